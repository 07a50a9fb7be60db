"""CLI command implementations"""

from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdsite.config import Settings, load_config
from mdsite.core.frontmatter import render_document
from mdsite.core.models import Metadata
from mdsite.core.pipeline import BuildReport, run_build
from mdsite.core.utils.slug import slugify, strip_leading_zeros
from mdsite.errors import ConfigError, DuplicateSlug, UnreadablePath
from mdsite.logger import setup_logging


ContentDir = Annotated[Optional[str], typer.Argument(help="Content directory (default: settings.content_dir)")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ConfigError as e:
        _fail(str(e))
    setup_logging(settings.log_level)
    return settings


def _run(settings: Settings, content_dir: str | None, write: bool) -> BuildReport:
    """run_build with fatal errors mapped to exit code 1."""
    try:
        return run_build(settings, content_dir, write=write)
    except DuplicateSlug as e:
        _fail("Duplicate slug", e)
    except UnreadablePath as e:
        _fail("Content directory is not readable", e)


def _echo_report(report: BuildReport) -> None:
    """Print per-file errors and render warnings, then a summary line."""
    for err in report.errors:
        typer.echo(f"  error: {err}", err=True)
    for diag in report.diagnostics:
        typer.echo(f"  warning: {diag}", err=True)
    typer.echo(
        f"{len(report.index)} page(s), "
        f"{len(report.errors)} error(s), "
        f"{len(report.diagnostics)} warning(s), "
        f"{report.drafts} draft(s) skipped"
    )


def build_cmd(
    content_dir: ContentDir = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    workers: Annotated[Optional[int], typer.Option("--workers", help="Parallel parse/render workers")] = None,
    drafts: Annotated[Optional[bool], typer.Option("--drafts/--no-drafts", help="Include draft posts")] = None,
    strict: Annotated[bool, typer.Option("--strict", help="Exit 1 if any file failed to parse")] = False,
    ):
    """Run the full pipeline: scan -> render -> index -> write."""
    settings = _settings(overrides={"output_dir": out, "workers": workers, "include_drafts": drafts})
    report = _run(settings, content_dir, write=True)
    for path in report.written:
        typer.echo(f"  wrote {path}")
    for path in report.removed:
        typer.echo(f"  removed {path}")
    _echo_report(report)
    if strict and not report.ok:
        raise typer.Exit(1)


def check_cmd(
    content_dir: ContentDir = None,
    drafts: Annotated[Optional[bool], typer.Option("--drafts/--no-drafts", help="Include draft posts")] = None,
    ):
    """Parse and render everything without writing; exit 1 on any per-file error."""
    settings = _settings(overrides={"include_drafts": drafts})
    report = _run(settings, content_dir, write=False)
    _echo_report(report)
    if not report.ok:
        raise typer.Exit(1)


def list_cmd(
    content_dir: ContentDir = None,
    tag: Annotated[Optional[str], typer.Option("--tag", help="Only pages carrying this tag")] = None,
    drafts: Annotated[Optional[bool], typer.Option("--drafts/--no-drafts", help="Include draft posts")] = None,
    ):
    """List pages in index order (newest first)."""
    settings = _settings(overrides={"include_drafts": drafts})
    report = _run(settings, content_dir, write=False)
    pages = report.index.by_tag().get(tag, []) if tag else list(report.index.pages)
    if not pages:
        typer.echo("No pages found.")
        raise typer.Exit(1)
    for page in pages:
        typer.echo(f"{page.date.date().isoformat()}  {page.slug}  {page.title}")


def new_cmd(
    title: Annotated[str, typer.Argument(help="Post title")],
    content_dir: Annotated[Optional[str], typer.Option("--content-dir", help="Where to create the file")] = None,
    tags: Annotated[Optional[str], typer.Option("--tags", help="Comma-separated tags")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", help="Front matter format: toml or yaml")] = None,
    draft: Annotated[bool, typer.Option("--draft", help="Mark the post as a draft")] = False,
    ):
    """Create a new post with a front matter block dated now."""
    settings = _settings(overrides={"content_dir": content_dir, "frontmatter_format": fmt})
    slug = strip_leading_zeros(slugify(title))
    if not slug:
        _fail(f"Cannot derive a file name from title {title!r}")

    try:
        metadata = Metadata(
            title=title,
            date=datetime.now(settings.tzinfo).replace(microsecond=0),
            tags=[t for t in (tags or "").split(",")],
            draft=draft,
        )
    except ValueError as e:
        _fail("Invalid metadata", e)

    path = Path(settings.content_dir) / f"{slug}.md"
    if path.exists():
        _fail(f"{path} already exists")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_document(metadata, "", settings.frontmatter_format), encoding="utf-8")
    typer.echo(f"Created {path}")
