"""Unit tests for the blog service and markdown import."""

from datetime import datetime

import pytest

from chessmate.exceptions import ConflictError, NotFoundError, ValidationError
from chessmate.services.blog import (
    create_post,
    generate_slug,
    get_post_by_slug,
    import_posts,
    list_posts,
    load_posts_from_directory,
    parse_tags,
)


class TestGenerateSlug:

    @pytest.mark.parametrize("text,expected", [
        ("Spring Open 2026 Results", "spring-open-2026-results"),
        ("  Caro-Kann:  a guide!  ", "caro-kann-a-guide"),
        ("Queen's Gambit -- Declined", "queens-gambit-declined"),
        ("already-a-slug", "already-a-slug"),
    ])
    def test_slugs(self, text, expected):
        assert generate_slug(text) == expected


def test_parse_tags():
    assert parse_tags("news, results ,,club") == ["news", "results", "club"]
    assert parse_tags(["a", " b "]) == ["a", "b"]
    assert parse_tags(None) == []


def _post(**overrides):
    data = {
        "title": "Spring Open Results",
        "slug": "Spring Open Results",
        "category": "Tournament News",
        "tags": "results, spring",
        "content": "<p>Congratulations!</p>",
    }
    data.update(overrides)
    return data


def test_create_normalizes_slug_and_tags(db_session):
    post = create_post(db_session, _post())
    assert post.slug == "spring-open-results"
    assert post.tags == ["results", "spring"]
    assert get_post_by_slug(db_session, "spring-open-results").id == post.id


def test_duplicate_slug_conflicts(db_session):
    create_post(db_session, _post())
    with pytest.raises(ConflictError):
        create_post(db_session, _post(title="Another title"))


def test_missing_fields_and_unknown_category(db_session):
    with pytest.raises(ValidationError):
        create_post(db_session, _post(content="  "))
    with pytest.raises(ValidationError):
        create_post(db_session, _post(slug="!!!"))
    with pytest.raises(ValidationError):
        create_post(db_session, _post(category="Gossip"))


def test_missing_post(db_session):
    with pytest.raises(NotFoundError):
        get_post_by_slug(db_session, "nope")


def test_list_newest_first(db_session):
    create_post(db_session, _post(slug="old", created_at=datetime(2026, 1, 1)))
    create_post(db_session, _post(slug="new", created_at=datetime(2026, 3, 1)))
    assert [p.slug for p in list_posts(db_session)] == ["new", "old"]


def test_load_and_import_markdown(db_session, tmp_path):
    (tmp_path / "club-night.md").write_text(
        "---\n"
        "title: Club Night\n"
        "category: Community Spotlight\n"
        "tags: [club, casual]\n"
        "date: 2026-02-01\n"
        "---\n"
        "Join us for **blitz**.\n",
        encoding="utf-8",
    )
    (tmp_path / "draft.md").write_text("---\ntitle: Draft\ndraft: true\n---\nWIP\n", encoding="utf-8")
    (tmp_path / "no-category.md").write_text("---\ntitle: Misc\n---\nHello\n", encoding="utf-8")

    posts = load_posts_from_directory(tmp_path)

    by_slug = {p["slug"]: p for p in posts}
    assert set(by_slug) == {"club-night", "no-category"}
    assert "<strong>blitz</strong>" in by_slug["club-night"]["content"]
    assert by_slug["club-night"]["created_at"] == datetime(2026, 2, 1)
    assert by_slug["no-category"]["category"] == "General"

    assert import_posts(db_session, posts) == {"imported": 2, "skipped": 0}
    assert import_posts(db_session, posts) == {"imported": 0, "skipped": 2}
    assert get_post_by_slug(db_session, "club-night").tags == ["club", "casual"]


def test_load_from_missing_directory(tmp_path):
    assert load_posts_from_directory(tmp_path / "absent") == []
