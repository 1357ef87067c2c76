#!/usr/bin/env python3
"""
Import markdown blog posts (with YAML front matter) into the database.

Posts whose slug already exists are skipped, so the import can be re-run.

    python scripts/import_blog_posts.py content/blog
    python scripts/import_blog_posts.py content/blog --dry-run
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from chessmate.config import settings
from chessmate.db import get_session
from chessmate.services.blog import import_posts, load_posts_from_directory

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Import markdown blog posts")
    parser.add_argument("directory", type=Path, help="Directory of .md files")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the posts that would be imported without writing anything",
    )
    args = parser.parse_args()

    if not args.directory.is_dir():
        print(f"Not a directory: {args.directory}", file=sys.stderr)
        return 1

    posts = load_posts_from_directory(args.directory)
    if args.dry_run:
        for post in posts:
            print(f"{post['slug']}: {post['title']} [{post['category']}]")
        print(f"{len(posts)} posts found")
        return 0

    with get_session() as session:
        counts = import_posts(session, posts)
    print(f"Imported {counts['imported']} posts, skipped {counts['skipped']} existing")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
