"""Route/page building: slugs, collision detection, and the date-ordered index"""

import math
from typing import Iterable

from mdsite.core.models import Index, Page, RenderResult, SourceDoc
from mdsite.core.utils.slug import slug_for_path, slugify, strip_leading_zeros
from mdsite.errors import DuplicateSlug, MalformedMetadata


def page_slug(doc: SourceDoc) -> str:
    """Explicit front matter slug if given, else derived from the source path.

    A path with no word characters ('!!!.md') falls back to the title. An
    explicit slug that reduces to nothing raises MalformedMetadata.
    """
    if doc.metadata.slug:
        slug = strip_leading_zeros(slugify(doc.metadata.slug))
        if not slug:
            raise MalformedMetadata(doc.path, f"slug {doc.metadata.slug!r} has no URL-safe characters")
        return slug
    slug = slug_for_path(doc.path) or strip_leading_zeros(slugify(doc.metadata.title))
    if not slug:
        raise MalformedMetadata(doc.path, "cannot derive a slug from the file name or title")
    return slug


def routable_docs(docs: Iterable[SourceDoc]) -> tuple[list[SourceDoc], list[MalformedMetadata]]:
    """Split docs into those with a usable slug and the errors for the rest."""
    ok, errors = [], []
    for doc in docs:
        try:
            page_slug(doc)
        except MalformedMetadata as e:
            errors.append(e)
        else:
            ok.append(doc)
    return ok, errors


def build_page(doc: SourceDoc, rendered: RenderResult, words_per_minute: int = 200) -> Page:
    """Combine a parsed document and its rendering into a Page."""
    return Page(
        slug=page_slug(doc),
        source_path=doc.path,
        metadata=doc.metadata,
        html=rendered.html,
        description=doc.metadata.description or rendered.summary,
        toc=tuple(rendered.toc),
        word_count=rendered.word_count,
        reading_minutes=max(1, math.ceil(rendered.word_count / words_per_minute)) if rendered.word_count else 0,
        hash=doc.hash,
    )


def check_unique_slugs(pages: Iterable[Page]) -> None:
    """Raise DuplicateSlug on the first slug claimed by two source paths."""
    owners: dict[str, str] = {}
    for page in sorted(pages, key=lambda p: p.source_path):
        first = owners.setdefault(page.slug, page.source_path)
        if first != page.source_path:
            raise DuplicateSlug(page.slug, first, page.source_path)


def build_pages(
    items: Iterable[tuple[SourceDoc, RenderResult]],
    words_per_minute: int = 200,
    ) -> list[Page]:
    """Build a Page per (doc, rendering) pair; fails on any slug collision."""
    pages = [build_page(doc, rendered, words_per_minute) for doc, rendered in items]
    check_unique_slugs(pages)
    return pages


def sort_key(page: Page) -> tuple[float, str]:
    return (-page.date.timestamp(), page.slug)


def build_index(pages: Iterable[Page]) -> Index:
    """Index sorted by date descending, ties broken by slug ascending."""
    return Index(pages=tuple(sorted(pages, key=sort_key)))
