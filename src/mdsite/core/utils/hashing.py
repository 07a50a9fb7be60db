"""SHA-256 hashing of source text and written outputs"""

import hashlib
from pathlib import Path


def sha256(content: str) -> str:
    """Hex digest of UTF-8 encoded content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def file_sha256(path: Path) -> str | None:
    """Hex digest of a file's bytes, or None if the file does not exist."""
    try:
        return hashlib.sha256(path.read_bytes()).hexdigest()
    except FileNotFoundError:
        return None
