"""Data models for content files, front matter, rendered pages, and the index"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from mdsite.errors import RenderDegraded


def _coerce_datetime(value: Any, tz) -> datetime:
    """Accept native datetimes/dates or ISO-8601 strings; attach tz when no offset is given."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ValueError(f"not an ISO-8601 timestamp: {value!r}") from e
    else:
        raise ValueError(f"expected a timestamp, got {type(value).__name__}")
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=tz)


@dataclass(frozen=True)
class ContentFile:
    """Raw file text keyed by its POSIX path relative to the content root."""
    path: str
    text: str


class Metadata(BaseModel):
    """Validated front matter. Naive dates take the tz passed in the validation context."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    title:       str
    date:        datetime
    tags:        tuple[str, ...] = ()
    description: Optional[str] = None
    slug:        Optional[str] = None     # explicit override of the path-derived slug
    draft:       bool = False

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any, info: ValidationInfo) -> datetime:
        tz = (info.context or {}).get("tz", timezone.utc)
        return _coerce_datetime(value, tz)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple, set)):
            raise ValueError(f"tags must be a list of strings, got {type(value).__name__}")
        if not all(isinstance(t, str) for t in value):
            raise ValueError("tags must be a list of strings")
        # Set semantics: order in the source is irrelevant.
        return tuple(sorted({t.strip() for t in value if t.strip()}))

    @field_validator("description", "slug", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


@dataclass(frozen=True)
class SourceDoc:
    """A successfully parsed content file."""
    path:     str
    metadata: Metadata
    body:     str
    hash:     str        # sha256 of the raw file text


@dataclass(frozen=True)
class ContentStore:
    """Parsed documents ordered by path, plus the per-path errors met while scanning."""
    docs:   tuple[SourceDoc, ...] = ()
    errors: tuple[Exception, ...] = ()

    def get(self, path: str) -> SourceDoc | None:
        """Return the SourceDoc for path, or None if absent or failed."""
        return next((d for d in self.docs if d.path == path), None)

    @property
    def paths(self) -> list[str]:
        return [d.path for d in self.docs]


class TocEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: int
    id:    str
    text:  str


@dataclass
class RenderResult:
    """Output of MarkdownRenderer.render for one body."""
    html:        str
    toc:         list[TocEntry] = field(default_factory=list)
    word_count:  int = 0
    summary:     str = ""
    diagnostics: list[RenderDegraded] = field(default_factory=list)


class Page(BaseModel):
    """A routable page: slug, metadata, and rendered HTML body."""
    model_config = ConfigDict(frozen=True)

    slug:            str
    source_path:     str
    metadata:        Metadata
    html:            str
    description:     str                 # metadata.description or auto-summary
    toc:             tuple[TocEntry, ...] = ()
    word_count:      int = 0
    reading_minutes: int = 0
    hash:            str = ""

    @property
    def title(self) -> str:
        return self.metadata.title

    @property
    def date(self) -> datetime:
        return self.metadata.date

    @property
    def tags(self) -> tuple[str, ...]:
        return self.metadata.tags

    def to_record(self) -> dict[str, Any]:
        """Flat, JSON-ready dict for the templating layer."""
        return {
            "slug": self.slug,
            "title": self.title,
            "date": self.date.isoformat(),
            "tags": list(self.tags),
            "description": self.description,
            "html": self.html,
            "source_path": self.source_path,
            "word_count": self.word_count,
            "reading_minutes": self.reading_minutes,
            "toc": [entry.model_dump() for entry in self.toc],
        }


class Index(BaseModel):
    """Pages sorted by date descending, ties by slug ascending."""
    model_config = ConfigDict(frozen=True)

    pages: tuple[Page, ...] = ()

    def __len__(self) -> int:
        return len(self.pages)

    @property
    def slugs(self) -> list[str]:
        return [p.slug for p in self.pages]

    def by_tag(self) -> dict[str, list[Page]]:
        """Tag -> pages carrying it, tags sorted, pages in index order."""
        groups: dict[str, list[Page]] = {}
        for page in self.pages:
            for tag in page.tags:
                groups.setdefault(tag, []).append(page)
        return dict(sorted(groups.items()))

    def by_year(self, tz=None) -> dict[int, list[Page]]:
        """Year -> pages from that year, newest year first.

        Dates are converted to tz (when given) before taking the year.
        """
        groups: dict[int, list[Page]] = {}
        for page in self.pages:
            when = page.date.astimezone(tz) if tz else page.date
            groups.setdefault(when.year, []).append(page)
        return dict(sorted(groups.items(), reverse=True))

    def to_records(self) -> list[dict[str, Any]]:
        return [p.to_record() for p in self.pages]
