"""Pipeline orchestration: scan -> render -> build pages -> index -> export"""

from dataclasses import dataclass, field
from pathlib import Path

from mdsite.config import Settings
from mdsite.core.export import prune_pages, write_site
from mdsite.core.models import Index, RenderResult, SourceDoc
from mdsite.core.pages import build_index, build_pages, routable_docs
from mdsite.core.render import MarkdownRenderer
from mdsite.core.store import load_store
from mdsite.core.utils.workers import ordered_map
from mdsite.errors import RenderDegraded
from mdsite.logger import get_logger


log = get_logger("pipeline")


@dataclass
class BuildReport:
    """Outcome of one run: the index plus everything worth telling the user."""
    index:       Index
    errors:      list[Exception] = field(default_factory=list)       # per-file, non-fatal
    diagnostics: list[RenderDegraded] = field(default_factory=list)
    written:     list[Path] = field(default_factory=list)
    removed:     list[Path] = field(default_factory=list)
    drafts:      int = 0

    @property
    def ok(self) -> bool:
        return not self.errors


def render_docs(docs: list[SourceDoc], renderer: MarkdownRenderer, workers: int = 1) -> list[RenderResult]:
    """Render each doc body; output order matches docs."""
    return ordered_map(lambda doc: renderer.render(doc.body, doc.path), docs, workers)


def run_build(settings: Settings, content_dir: str | None = None, write: bool = True) -> BuildReport:
    """Run the full pipeline for content_dir (default settings.content_dir).

    Per-file parse/read failures are collected in the report. DuplicateSlug and
    an unreadable content root propagate; nothing is written in that case.
    """
    root = Path(content_dir or settings.content_dir)
    store = load_store(root, settings.extensions, settings.tzinfo, settings.workers)

    docs = list(store.docs)
    drafts = 0
    if not settings.include_drafts:
        docs = [d for d in store.docs if not d.metadata.draft]
        drafts = len(store.docs) - len(docs)
        if drafts:
            log.info("Skipping %d draft(s)", drafts)

    docs, slug_errors = routable_docs(docs)
    for err in slug_errors:
        log.error("%s", err)

    renderer = MarkdownRenderer(settings.parser_config, settings.allow_html, settings.summary_words)
    rendered = render_docs(docs, renderer, settings.workers)

    pages = build_pages(zip(docs, rendered), settings.words_per_minute)
    index = build_index(pages)
    log.info("Built index of %d page(s)", len(index))

    report = BuildReport(
        index=index,
        errors=[*store.errors, *slug_errors],
        diagnostics=[d for r in rendered for d in r.diagnostics],
        drafts=drafts,
    )
    if write:
        report.written = write_site(index, Path(settings.output_dir), settings.tzinfo)
        report.removed = prune_pages(index, Path(settings.output_dir))
        log.info("Wrote %d file(s) to %s", len(report.written), settings.output_dir)
    return report
