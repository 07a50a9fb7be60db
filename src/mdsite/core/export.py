"""Export: write HTML fragments and index/tag/archive JSON for the templating layer"""

import json
from pathlib import Path

from mdsite.core.models import Index
from mdsite.core.utils.hashing import file_sha256, sha256
from mdsite.logger import get_logger


log = get_logger("export")


PAGES_DIR = "pages"


def _write_if_changed(path: Path, content: str) -> bool:
    """Write content unless the file already holds identical bytes. Returns True if written."""
    if file_sha256(path) == sha256(content):
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8", newline="")
    return True


def _dump(data) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def build_tags(index: Index) -> dict[str, list[str]]:
    """Tag -> slugs in index order."""
    return {tag: [p.slug for p in pages] for tag, pages in index.by_tag().items()}


def build_archive(index: Index, tz=None) -> dict[str, list[str]]:
    """Year (as string key, newest first) -> slugs in index order."""
    return {str(year): [p.slug for p in pages] for year, pages in index.by_year(tz).items()}


def write_site(index: Index, output_dir: Path, tz=None) -> list[Path]:
    """Write one fragment per page plus index.json, tags.json, archive.json.

    Layout:
      output_dir / pages / {slug}.html
      output_dir / index.json | tags.json | archive.json

    Archive years are taken in tz when given.
    Unchanged files are left alone. Returns the paths actually written.
    """
    output_dir = Path(output_dir)
    outputs: dict[Path, str] = {
        output_dir / PAGES_DIR / f"{page.slug}.html": page.html for page in index.pages
    }
    outputs[output_dir / "index.json"] = _dump(index.to_records())
    outputs[output_dir / "tags.json"] = _dump(build_tags(index))
    outputs[output_dir / "archive.json"] = _dump(build_archive(index, tz))

    return [path for path, content in outputs.items() if _write_if_changed(path, content)]


def prune_pages(index: Index, output_dir: Path) -> list[Path]:
    """Delete pages/*.html fragments whose slug is no longer in the index. Returns the removed paths."""
    pages_dir = Path(output_dir) / PAGES_DIR
    if not pages_dir.is_dir():
        return []
    keep = set(index.slugs)
    removed = []
    for path in sorted(pages_dir.glob("*.html")):
        if path.stem not in keep:
            path.unlink()
            log.info("Removed stale page %s", path)
            removed.append(path)
    return removed
