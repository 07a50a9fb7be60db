"""Content discovery, file reading, and front matter parsing across a directory tree"""

from datetime import timezone, tzinfo
from pathlib import Path
from typing import Iterable

from mdsite.core.frontmatter import parse_frontmatter
from mdsite.core.models import ContentFile, ContentStore, SourceDoc
from mdsite.core.utils.hashing import sha256
from mdsite.core.utils.workers import ordered_map
from mdsite.errors import MalformedMetadata, UnreadablePath
from mdsite.logger import get_logger


MD_EXTENSIONS = (".md", ".markdown")

log = get_logger("store")


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def discover_files(root: Path, extensions: Iterable[str] = MD_EXTENSIONS) -> list[Path]:
    """Return sorted content files under root, skipping hidden files and directories."""
    exts = {e.lower() for e in extensions}
    return sorted(
        p for p in root.rglob('*')
        if p.is_file() and p.suffix.lower() in exts and not _is_hidden(p, root)
    )


def read_content_file(path: Path, root: Path) -> ContentFile:
    """Read a file as UTF-8 into a ContentFile keyed by its path relative to root."""
    rel = path.relative_to(root).as_posix()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise UnreadablePath(rel, str(e)) from e
    return ContentFile(path=rel, text=text)


def parse_content_file(content: ContentFile, tz: tzinfo = timezone.utc) -> SourceDoc:
    """Split a ContentFile into validated Metadata and body."""
    metadata, body = parse_frontmatter(content.text, content.path, tz)
    return SourceDoc(path=content.path, metadata=metadata, body=body, hash=sha256(content.text))


def _check_root(root: Path) -> None:
    """Raise UnreadablePath unless root is an existing, listable directory."""
    if not root.exists():
        raise UnreadablePath(str(root), "content directory does not exist")
    if not root.is_dir():
        raise UnreadablePath(str(root), "content path is not a directory")
    try:
        next(root.iterdir(), None)
    except OSError as e:
        raise UnreadablePath(str(root), str(e)) from e


def load_store(
    root: Path,
    extensions: Iterable[str] = MD_EXTENSIONS,
    tz: tzinfo = timezone.utc,
    workers: int = 1,
    ) -> ContentStore:
    """Read and parse every content file under root.

    Per-file MalformedMetadata and UnreadablePath errors are collected rather
    than raised, so one bad post does not stop the scan. Only an inaccessible
    root raises. Documents and errors are ordered by path.
    """
    root = Path(root)
    _check_root(root)
    files = discover_files(root, extensions)
    log.info("Scanning %d file(s) under %s", len(files), root)

    def _load(path: Path) -> SourceDoc | Exception:
        try:
            doc = parse_content_file(read_content_file(path, root), tz)
        except (MalformedMetadata, UnreadablePath) as e:
            return e
        log.debug("parsed %s", doc.path)
        return doc

    docs: list[SourceDoc] = []
    errors: list[Exception] = []
    for result in ordered_map(_load, files, workers):
        if isinstance(result, SourceDoc):
            docs.append(result)
        else:
            log.error("%s", result)
            errors.append(result)

    return ContentStore(docs=tuple(docs), errors=tuple(errors))
