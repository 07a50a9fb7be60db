"""Unit tests for core/utils/slug.py"""

import pytest

from mdsite.core.utils.slug import slug_for_path, slugify, strip_leading_zeros, unique_anchor


@pytest.mark.parametrize("text,expected", [
    ("Hello World", "hello-world"),
    ("my_file_name", "my-file-name"),
    ("  leading and trailing  ", "leading-and-trailing"),
    ("multiple---hyphens", "multiple-hyphens"),
    ("Special! Ch@rs#", "special-chrs"),
    ("", ""),
])
def test_slugify_basic(text, expected):
    """slugify converts text to lowercase hyphenated slug."""
    assert slugify(text) == expected


@pytest.mark.parametrize("slug,expected", [
    ("day-03", "day-3"),
    ("day-3", "day-3"),
    ("007", "7"),
    ("0", "0"),
    ("day-100", "day-100"),
    ("2025-01-02", "2025-1-2"),
])
def test_strip_leading_zeros(slug, expected):
    assert strip_leading_zeros(slug) == expected


@pytest.mark.parametrize("path,expected", [
    ("day-3.md", "day-3"),
    ("day-03.md", "day-3"),
    ("posts/Advent Of Code Day 10.md", "advent-of-code-day-10"),
    ("posts/My_Post.markdown", "my-post"),
    ("posts/bundle-post/index.md", "bundle-post"),
    ("section/_index.md", "section"),
    ("index.md", "index"),
])
def test_slug_for_path(path, expected):
    """slug_for_path lowercases, hyphenates whitespace, and strips the extension."""
    assert slug_for_path(path) == expected


def test_slug_for_path_is_deterministic():
    assert slug_for_path("a/B C.md") == slug_for_path("a/B C.md")


def test_unique_anchor_suffixes_repeats():
    seen = set()
    assert unique_anchor("Part One", seen) == "part-one"
    assert unique_anchor("Part One", seen) == "part-one-1"
    assert unique_anchor("Part One", seen) == "part-one-2"
    assert unique_anchor("!!!", seen) == "section"


def test_unique_anchor_skips_ids_taken_by_literal_headings():
    seen = set()
    ids = [unique_anchor(text, seen) for text in ["Foo", "Foo", "Foo 1", "Foo 1"]]
    assert ids == ["foo", "foo-1", "foo-1-1", "foo-1-2"]
