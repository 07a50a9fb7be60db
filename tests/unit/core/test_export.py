"""Unit tests for core/export.py"""

import json
from datetime import datetime, timedelta, timezone

from mdsite.core.export import build_archive, build_tags, prune_pages, write_site
from mdsite.core.models import Index, Metadata, Page


def _page(slug: str, year: int, tags=()) -> Page:
    return Page(
        slug=slug,
        source_path=f"{slug}.md",
        metadata=Metadata(title=slug.title(), date=datetime(year, 1, 1, tzinfo=timezone.utc), tags=list(tags)),
        html=f"<p>{slug}</p>\n",
        description=f"About {slug}.",
    )


def _index() -> Index:
    return Index(pages=(_page("newer", 2025, ["aoc"]), _page("older", 2024, ["aoc", "django"])))


def test_write_site_layout(tmp_path):
    written = write_site(_index(), tmp_path)
    assert (tmp_path / "pages" / "newer.html").read_text() == "<p>newer</p>\n"
    assert (tmp_path / "pages" / "older.html").exists()
    assert set(written) == {
        tmp_path / "pages" / "newer.html",
        tmp_path / "pages" / "older.html",
        tmp_path / "index.json",
        tmp_path / "tags.json",
        tmp_path / "archive.json",
    }


def test_index_json_in_index_order(tmp_path):
    write_site(_index(), tmp_path)
    records = json.loads((tmp_path / "index.json").read_text())
    assert [r["slug"] for r in records] == ["newer", "older"]
    assert records[0]["html"] == "<p>newer</p>\n"
    assert records[0]["description"] == "About newer."


def test_tags_and_archive(tmp_path):
    index = _index()
    assert build_tags(index) == {"aoc": ["newer", "older"], "django": ["older"]}
    assert build_archive(index) == {"2025": ["newer"], "2024": ["older"]}
    write_site(index, tmp_path)
    assert json.loads((tmp_path / "tags.json").read_text())["django"] == ["older"]


def test_unchanged_files_not_rewritten(tmp_path):
    write_site(_index(), tmp_path)
    assert write_site(_index(), tmp_path) == []


def test_changed_page_rewritten(tmp_path):
    write_site(_index(), tmp_path)
    (tmp_path / "pages" / "older.html").write_text("stale")
    assert write_site(_index(), tmp_path) == [tmp_path / "pages" / "older.html"]


def test_prune_removes_fragments_missing_from_index(tmp_path):
    write_site(_index(), tmp_path)
    shrunk = Index(pages=(_page("newer", 2025),))
    assert prune_pages(shrunk, tmp_path) == [tmp_path / "pages" / "older.html"]
    assert [p.name for p in (tmp_path / "pages").iterdir()] == ["newer.html"]
    assert (tmp_path / "index.json").exists()


def test_prune_without_pages_dir(tmp_path):
    assert prune_pages(_index(), tmp_path) == []


def test_archive_years_taken_in_given_zone():
    late = Page(
        slug="late",
        source_path="late.md",
        metadata=Metadata(title="Late", date=datetime(2024, 12, 31, 23, 30, tzinfo=timezone.utc)),
        html="",
        description="",
    )
    index = Index(pages=(late,))
    assert build_archive(index) == {"2024": ["late"]}
    assert build_archive(index, timezone(timedelta(hours=1))) == {"2025": ["late"]}
