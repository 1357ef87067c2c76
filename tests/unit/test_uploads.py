"""Unit tests for local upload storage."""

import asyncio

import pytest

from chessmate.exceptions import ValidationError
from chessmate.services.uploads import read_limited, save_upload, unique_filename


def test_unique_filename_keeps_extension():
    first = unique_filename("Banner.PNG")
    second = unique_filename("Banner.PNG")
    assert first.endswith(".png")
    assert first != second
    assert unique_filename(None).count(".") == 0


def test_save_upload_writes_file(tmp_path):
    url = save_upload(
        "board.jpg",
        b"image-bytes",
        upload_dir=tmp_path / "uploads",
        url_prefix="/uploads/",
        max_bytes=1024,
    )
    name = url.rsplit("/", 1)[1]
    assert url == f"/uploads/{name}"
    assert (tmp_path / "uploads" / name).read_bytes() == b"image-bytes"


@pytest.mark.parametrize("content", [b"", b"x" * 11])
def test_save_upload_rejects_empty_and_oversize(tmp_path, content):
    with pytest.raises(ValidationError):
        save_upload("a.png", content, upload_dir=tmp_path, url_prefix="/uploads", max_bytes=10)
    assert list(tmp_path.iterdir()) == []


class ChunkedUpload:
    """Stands in for UploadFile: serves bytes in the requested chunk sizes."""

    def __init__(self, content: bytes):
        self.content = content
        self.position = 0
        self.reads = 0

    async def read(self, size: int = -1) -> bytes:
        self.reads += 1
        end = len(self.content) if size < 0 else self.position + size
        chunk = self.content[self.position:end]
        self.position += len(chunk)
        return chunk


def test_read_limited_returns_small_upload_whole():
    upload = ChunkedUpload(b"abcdefghij")
    assert asyncio.run(read_limited(upload, max_bytes=10, chunk_size=4)) == b"abcdefghij"


def test_read_limited_stops_after_limit():
    upload = ChunkedUpload(b"x" * 1000)

    content = asyncio.run(read_limited(upload, max_bytes=10, chunk_size=4))

    assert content == b"x" * 11
    assert upload.reads == 3
    assert upload.position == 12


def test_read_limited_result_is_rejected_when_oversize(tmp_path):
    content = asyncio.run(read_limited(ChunkedUpload(b"x" * 1000), max_bytes=10, chunk_size=4))
    with pytest.raises(ValidationError):
        save_upload("a.png", content, upload_dir=tmp_path, url_prefix="/uploads", max_bytes=10)
