"""Local disk storage for uploaded images (tournament banners, post images)."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from chessmate.exceptions import ValidationError

logger = logging.getLogger(__name__)


def unique_filename(original_name: str | None) -> str:
    """Random file name that keeps the original extension."""
    suffix = Path(original_name or "").suffix.lower()
    return f"{uuid.uuid4()}{suffix}"


async def read_limited(upload, max_bytes: int, chunk_size: int = 64 * 1024) -> bytes:
    """
    Read an upload in chunks, stopping once it passes max_bytes.

    At most max_bytes + 1 bytes are returned, enough for save_upload to
    reject the file without holding all of it in memory.
    """
    chunks: list[bytes] = []
    total = 0
    while total <= max_bytes:
        chunk = await upload.read(chunk_size)
        if not chunk:
            break
        chunks.append(chunk)
        total += len(chunk)
    return b"".join(chunks)[: max_bytes + 1]


def save_upload(
    original_name: str | None,
    content: bytes,
    *,
    upload_dir: Path,
    url_prefix: str,
    max_bytes: int,
) -> str:
    """
    Store an uploaded file and return the URL it is served from.

    Raises:
        ValidationError: empty or oversize upload
    """
    if not content:
        raise ValidationError("No file uploaded.")
    if len(content) > max_bytes:
        raise ValidationError(f"File is larger than the {max_bytes} byte limit.")

    upload_dir.mkdir(parents=True, exist_ok=True)
    filename = unique_filename(original_name)
    (upload_dir / filename).write_bytes(content)

    logger.info("Stored upload %s (%d bytes)", filename, len(content))
    return f"{url_prefix.rstrip('/')}/{filename}"
