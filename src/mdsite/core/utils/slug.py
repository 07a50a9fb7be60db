"""Slug generation for URLs and heading anchors"""

import re
from pathlib import PurePosixPath


BUNDLE_STEMS = {"index", "_index"}


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def strip_leading_zeros(slug: str) -> str:
    """Drop leading zeros from every digit run ('day-03' -> 'day-3', '007' -> '7')."""
    return re.sub(r'(?<!\d)0+(?=\d)', '', slug)


def slug_for_path(path: str) -> str:
    """Derive a page slug from a content path.

    The final component's stem is used; a bundle file named index/_index takes
    its parent directory name instead. 'posts/Day 03.md' -> 'day-3'.
    """
    p = PurePosixPath(path)
    stem = p.stem
    if stem.lower() in BUNDLE_STEMS and p.parent.name:
        stem = p.parent.name
    return strip_leading_zeros(slugify(stem))


def unique_anchor(text: str, seen: set[str]) -> str:
    """Slugify heading text, suffixing -1, -2... until the id is unused in this document."""
    base = slugify(text) or "section"
    anchor, n = base, 0
    while anchor in seen:
        n += 1
        anchor = f"{base}-{n}"
    seen.add(anchor)
    return anchor
