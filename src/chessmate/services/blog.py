"""
Blog service: news posts published by organizers.

Posts are stored as HTML (what the rich text editor produces). Posts can
also be written as markdown files with YAML front matter and imported in
bulk; those are rendered to HTML on import:

    ---
    title: Spring Open 2026 Results
    category: Tournament News
    tags: [results, spring-open]
    image: /uploads/abc.png
    ---
    Congratulations to **all players** ...

The file name (without .md) becomes the slug unless front matter sets one.
"""

import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import frontmatter
import markdown
from sqlalchemy.orm import Session

from chessmate.db.models import BlogPost
from chessmate.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

BLOG_CATEGORIES: tuple[str, ...] = (
    "Tournament News",
    "Game Analysis",
    "Chess Tips",
    "Community Spotlight",
    "General",
)
DEFAULT_CATEGORY = "General"

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def generate_slug(text: str) -> str:
    """
    Make a URL-friendly slug.

    Lowercases, drops anything but word characters, spaces and hyphens,
    turns whitespace into hyphens and collapses repeated hyphens.
    """
    slug = text.lower().strip()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    return _HYPHENS.sub("-", slug)


def parse_tags(raw: Union[str, Iterable[str], None]) -> list[str]:
    """Accept a list of tags or a comma separated string; blanks are dropped."""
    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else raw
    return [str(tag).strip() for tag in items if str(tag).strip()]


def category_or_default(category: Optional[str]) -> str:
    return category if category in BLOG_CATEGORIES else DEFAULT_CATEGORY


def _as_datetime(value: Any) -> Optional[datetime]:
    # YAML front matter yields date objects for bare dates
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    return datetime.fromisoformat(str(value))


def list_posts(db: Session) -> list[BlogPost]:
    """All posts, newest first."""
    return db.query(BlogPost).order_by(BlogPost.created_at.desc(), BlogPost.id.desc()).all()


def get_post_by_slug(db: Session, slug: str) -> BlogPost:
    post = db.query(BlogPost).filter(BlogPost.slug == slug).first()
    if post is None:
        raise NotFoundError("Blog post not found")
    return post


def create_post(db: Session, data: dict[str, Any]) -> BlogPost:
    """
    Publish a post.

    Raises:
        ValidationError: missing title/slug/content/category, or unknown category
        ConflictError: slug already used
    """
    title = (data.get("title") or "").strip()
    slug = generate_slug(data.get("slug") or "")
    content = data.get("content") or ""
    category = data.get("category")

    if not title or not slug or not content.strip() or not category:
        raise ValidationError("Missing required blog post data (title, slug, content, category)")
    if category not in BLOG_CATEGORIES:
        raise ValidationError(f"Unknown blog category: {category}")

    if db.query(BlogPost.id).filter(BlogPost.slug == slug).first() is not None:
        raise ConflictError(
            f'A post with slug "{slug}" already exists. Please use a unique slug.'
        )

    post = BlogPost(
        title=title,
        slug=slug,
        image_url=data.get("image_url") or None,
        category=category,
        tags=parse_tags(data.get("tags")),
        content=content,
    )
    if data.get("created_at") is not None:
        post.created_at = data["created_at"]

    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("Published blog post %s", post.slug)
    return post


def load_posts_from_directory(directory: Path) -> list[dict[str, Any]]:
    """Read markdown posts with front matter; drafts are skipped."""
    posts: list[dict[str, Any]] = []

    if not directory.exists():
        return posts

    for file_path in sorted(directory.glob("*.md")):
        post = frontmatter.load(file_path)

        # Skip draft posts
        if post.get("draft", False):
            continue

        posts.append({
            "title": post.get("title", file_path.stem.replace("-", " ").title()),
            "slug": post.get("slug", file_path.stem),
            "category": category_or_default(post.get("category")),
            "tags": post.get("tags", []),
            "image_url": post.get("image"),
            "created_at": _as_datetime(post.get("date")),
            "content": markdown.markdown(post.content, extensions=["tables"]),
        })

    return posts


def import_posts(db: Session, posts: Iterable[dict[str, Any]]) -> dict[str, int]:
    """
    Publish posts that are not already stored (matched by slug).

    Returns:
        Counts of imported and skipped posts
    """
    counts = {"imported": 0, "skipped": 0}
    for data in posts:
        try:
            create_post(db, data)
        except ConflictError:
            counts["skipped"] += 1
            continue
        counts["imported"] += 1
    logger.info("Blog import: %(imported)d imported, %(skipped)d skipped", counts)
    return counts

