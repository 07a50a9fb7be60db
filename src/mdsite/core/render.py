"""Markdown body to HTML fragment, with heading anchors, summary text, and degraded-span diagnostics"""

import re
import threading

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml

from mdsite.core.models import RenderResult, TocEntry
from mdsite.core.utils.slug import unique_anchor
from mdsite.core.utils.tokens import heading_level, inline_text, paragraph_texts, top_level_blocks
from mdsite.errors import RenderDegraded
from mdsite.logger import get_logger


MORE_RE = re.compile(r'^[ \t]*<!--\s*more\s*-->[ \t]*$\n?', re.MULTILINE | re.IGNORECASE)
ELLIPSIS = "…"

log = get_logger("render")


def _make_parser(preset: str, allow_html: bool) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False, "html": allow_html})


def _fence_closed(token, lines: list[str]) -> bool:
    """True if the fence's last mapped line is its closing marker."""
    start, end = token.map
    if end - start < 2 or end > len(lines):
        return False
    closing = lines[end - 1].strip().lstrip('>').strip()
    return closing.startswith(token.markup) and set(closing) == {token.markup[0]}


def _line_of(text: str, needle: str) -> int | None:
    pos = text.find(needle)
    return text.count("\n", 0, pos) + 1 if pos >= 0 else None


def _truncate_words(text: str, limit: int) -> str:
    words = text.split()
    if len(words) <= limit:
        return " ".join(words)
    return " ".join(words[:limit]) + ELLIPSIS


class MarkdownRenderer:
    """Render Markdown bodies to HTML fragments.

    Rendering is deterministic and never fails a document: a block that
    cannot be rendered is emitted as escaped literal text, and unsafe link
    destinations stay as text. Each such span is reported as a RenderDegraded
    diagnostic and logged as a warning.
    """

    def __init__(self, preset: str = "gfm-like", allow_html: bool = False, summary_words: int = 70):
        self.md = _make_parser(preset, allow_html)
        self.summary_words = summary_words
        self._local = threading.local()

        default_validate = self.md.validateLink

        def _validate(url: str) -> bool:
            ok = default_validate(url)
            if not ok:
                self._rejected().append(url)
            return ok

        self.md.validateLink = _validate

    def _rejected(self) -> list[str]:
        if not hasattr(self._local, "rejected"):
            self._local.rejected = []
        return self._local.rejected

    def _anchor_headings(self, tokens: list) -> list[TocEntry]:
        """Give each heading an id attribute and collect the table of contents."""
        seen: set[str] = set()
        toc = []
        for i, tok in enumerate(tokens):
            level = heading_level(tok)
            if level is None:
                continue
            text = inline_text(tokens[i + 1])
            anchor = unique_anchor(text, seen)
            tok.attrSet("id", anchor)
            toc.append(TocEntry(level=level, id=anchor, text=text))
        return toc

    def _render_blocks(self, tokens: list, env: dict, lines: list[str], source: str) -> tuple[str, list[RenderDegraded]]:
        parts, diagnostics = [], []
        for group in top_level_blocks(tokens):
            try:
                parts.append(self.md.renderer.render(group, self.md.options, env))
            except Exception as e:
                mapped = next((t.map for t in group if t.map), None)
                if mapped:
                    literal = "\n".join(lines[mapped[0]:mapped[1]])
                else:
                    literal = "".join(t.content for t in group)
                parts.append(f"<p>{escapeHtml(literal.strip())}</p>\n")
                line = mapped[0] + 1 if mapped else None
                diagnostics.append(RenderDegraded(source, line, f"block rendered as literal text ({e})"))
        return "".join(parts), diagnostics

    def summarize(self, body: str) -> str:
        """Plain-text summary: content before <!--more--> if present, else the first summary_words words."""
        m = MORE_RE.search(body)
        if m:
            lead = self.md.parse(body[:m.start()])
            return " ".join(paragraph_texts(lead)).strip()
        return _truncate_words(" ".join(paragraph_texts(self.md.parse(body))), self.summary_words)

    def render(self, body: str, source: str = "") -> RenderResult:
        """Render one body. source names the file in diagnostics."""
        summary = self.summarize(body)
        text = MORE_RE.sub("", body, count=1)
        lines = text.splitlines()

        self._local.rejected = []
        env: dict = {}
        tokens = self.md.parse(text, env)
        rejected = list(dict.fromkeys(self._rejected()))

        toc = self._anchor_headings(tokens)
        html, diagnostics = self._render_blocks(tokens, env, lines, source)

        for url in rejected:
            diagnostics.append(RenderDegraded(source, _line_of(text, url), f"unsafe link destination left as text: {url}"))
        for tok in tokens:
            if tok.type == "fence" and tok.map and not _fence_closed(tok, lines):
                diagnostics.append(RenderDegraded(source, tok.map[0] + 1, "unterminated code fence runs to end of document"))

        for d in diagnostics:
            log.warning("%s", d)

        words = sum(len(inline_text(t).split()) for t in tokens if t.type == "inline")
        return RenderResult(html=html, toc=toc, word_count=words, summary=summary, diagnostics=diagnostics)
