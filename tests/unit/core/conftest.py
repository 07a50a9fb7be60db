"""Shared fixtures for core unit tests"""

import pytest

from mdsite.core.render import MarkdownRenderer


SAMPLE_MD = """\
# Advent of Code

A paragraph with **bold** text and a [link](https://example.com).

## Part One

- item one
- item two

| a | b |
|---|---|
| 1 | 2 |

```rust
fn main() { println!("{}", 1 < 2 && true); }
```

> quoted

![diagram](img/diagram.png)
"""

SAMPLE_TOML = """\
+++
title = "Advent of Code 2025 Day 10"
date = "2025-12-11T15:50:42+02:00"
tags = ["aoc", "rust", "z3"]
+++

Solving today's puzzle with an SMT solver.
"""

SAMPLE_YAML = """\
---
title: Django ORM tricks
date: 2024-03-02
tags: [python, django]
description: Annotating querysets.
---

# Body
"""


@pytest.fixture(name="renderer")
def renderer_fixture():
    return MarkdownRenderer("gfm-like", allow_html=False, summary_words=8)


@pytest.fixture(name="samples")
def samples_fixture():
    return {"toml": SAMPLE_TOML, "yaml": SAMPLE_YAML, "body": SAMPLE_MD}
