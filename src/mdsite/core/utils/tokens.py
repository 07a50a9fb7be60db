"""Shared markdown-it token utilities"""


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def inline_text(token) -> str:
    """Plain text of an inline token: text, code spans, and image alt text; markup dropped."""
    parts = []
    for child in token.children or []:
        if child.type in ('text', 'code_inline', 'image'):
            parts.append(child.content)
        elif child.type in ('softbreak', 'hardbreak'):
            parts.append(' ')
    return ''.join(parts).strip()


def top_level_blocks(tokens: list) -> list[list]:
    """Split a token stream into self-contained top-level block groups (open..close)."""
    groups, current, depth = [], [], 0
    for tok in tokens:
        current.append(tok)
        depth += tok.nesting
        if depth == 0:
            groups.append(current)
            current = []
    if current:
        groups.append(current)
    return groups


def paragraph_texts(tokens: list) -> list[str]:
    """Plain text of each paragraph, in document order."""
    return [
        inline_text(tok)
        for prev, tok in zip(tokens, tokens[1:])
        if prev.type == 'paragraph_open' and tok.type == 'inline'
    ]
