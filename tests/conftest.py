"""Root test configuration: content-tree helpers shared by unit and integration tests"""

import os

import pytest


POST_TEMPLATE = """\
+++
title = "{title}"
date = {date}
tags = {tags}
+++

{body}
"""


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Keep MDSITE_* variables from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("MDSITE_"):
            monkeypatch.delenv(name)


@pytest.fixture(name="content_dir")
def content_dir_fixture(tmp_path):
    d = tmp_path / "content"
    d.mkdir()
    return d


@pytest.fixture(name="write_post")
def write_post_fixture(content_dir):
    """Factory: write a TOML-fronted post under content_dir and return its path."""
    def _write(name: str, title: str = "Post", date: str = "2025-01-01T00:00:00Z",
               tags: list[str] = None, body: str = "Body text.\n"):
        path = content_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        tag_list = "[" + ", ".join(f'"{t}"' for t in (tags or [])) + "]"
        path.write_text(
            POST_TEMPLATE.format(title=title, date=date, tags=tag_list, body=body),
            encoding="utf-8",
        )
        return path
    return _write
