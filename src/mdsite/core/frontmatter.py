"""Front matter extraction and serialization (+++ TOML, --- YAML)"""

import re
import tomllib
from datetime import timezone, tzinfo
from typing import Any

import tomli_w
import yaml
from pydantic import ValidationError

from mdsite.core.models import Metadata
from mdsite.errors import MalformedMetadata


FRONTMATTER_RE = re.compile(
    r'\A(?P<fence>\+\+\+|---)[ \t]*\r?\n(?P<block>.*?)^(?P=fence)[ \t]*(?:\r?\n|\Z)',
    re.DOTALL | re.MULTILINE,
)
FENCES = {"toml": "+++", "yaml": "---"}
REQUIRED_KEYS = ("title", "date")


def _load_block(fence: str, block: str, path: str) -> dict[str, Any]:
    """Parse the delimited block as TOML or YAML; the result must be a mapping."""
    if fence == "+++":
        try:
            return tomllib.loads(block)
        except tomllib.TOMLDecodeError as e:
            raise MalformedMetadata(path, f"invalid TOML front matter: {e}") from e

    try:
        data = yaml.safe_load(block) if block.strip() else {}
    except yaml.YAMLError as e:
        raise MalformedMetadata(path, f"invalid YAML front matter: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MalformedMetadata(path, f"front matter must be a mapping, got {type(data).__name__}")
    return data


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(p) for p in err["loc"]) or "front matter"
    return f"invalid '{loc}': {err['msg']}"


def split_frontmatter(text: str, path: str = "") -> tuple[dict[str, Any], str]:
    """Return (raw key/value mapping, body). Raises MalformedMetadata if no delimited block."""
    text = text.removeprefix("\ufeff")
    m = FRONTMATTER_RE.match(text)
    if m is None:
        if text.startswith(("+++", "---")):
            raise MalformedMetadata(path, "front matter block is not terminated")
        raise MalformedMetadata(path, "missing front matter block (expected '+++' or '---')")
    return _load_block(m.group("fence"), m.group("block"), path), text[m.end():]


def parse_frontmatter(text: str, path: str = "", tz: tzinfo = timezone.utc) -> tuple[Metadata, str]:
    """Extract validated Metadata and the remaining body from raw file text.

    Requires title (non-empty string) and date (ISO-8601-like). Never returns
    a partial Metadata: any missing or malformed required field raises
    MalformedMetadata naming the path.
    """
    raw, body = split_frontmatter(text, path)

    missing = [k for k in REQUIRED_KEYS if raw.get(k) is None]
    if missing:
        raise MalformedMetadata(path, f"missing required key(s): {', '.join(missing)}")

    try:
        metadata = Metadata.model_validate(raw, context={"tz": tz})
    except ValidationError as e:
        raise MalformedMetadata(path, _first_error(e)) from e
    return metadata, body


def _metadata_dict(metadata: Metadata) -> dict[str, Any]:
    data: dict[str, Any] = {
        "title": metadata.title,
        "date": metadata.date,
        "tags": list(metadata.tags),
    }
    if metadata.description is not None:
        data["description"] = metadata.description
    if metadata.slug is not None:
        data["slug"] = metadata.slug
    if metadata.draft:
        data["draft"] = True
    return data


def emit_frontmatter(metadata: Metadata, fmt: str = "toml") -> str:
    """Serialize Metadata to a delimited block that parse_frontmatter reads back unchanged."""
    data = _metadata_dict(metadata)
    if fmt == "toml":
        header = tomli_w.dumps(data)
    elif fmt == "yaml":
        data["date"] = metadata.date.isoformat()
        header = yaml.safe_dump(data, allow_unicode=True, sort_keys=False, default_flow_style=False)
    else:
        raise ValueError(f"unknown front matter format: {fmt!r}")
    fence = FENCES[fmt]
    return f"{fence}\n{header}{fence}\n"


def render_document(metadata: Metadata, body: str = "", fmt: str = "toml") -> str:
    """Full content file text: front matter block, blank line, body."""
    return f"{emit_frontmatter(metadata, fmt)}\n{body.lstrip()}"
