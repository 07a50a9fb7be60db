"""Error taxonomy for the content pipeline"""


class SiteError(Exception):
    """Base exception for all mdsite errors."""


class ConfigError(SiteError):
    """Invalid config.yaml or settings value."""


class MalformedMetadata(SiteError):
    """Front matter missing, unparseable, or lacking a required field."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}" if path else reason)


class UnreadablePath(SiteError):
    """A file or the content root could not be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class DuplicateSlug(SiteError):
    """Two source files map to the same URL slug. Fatal to the build."""

    def __init__(self, slug: str, first_path: str, second_path: str):
        self.slug = slug
        self.first_path = first_path
        self.second_path = second_path
        super().__init__(f"slug '{slug}' is produced by both {first_path} and {second_path}")


class RenderDegraded(SiteError):
    """A Markdown span rendered as literal text. Recorded as a diagnostic, never raised."""

    def __init__(self, path: str, line: int | None, reason: str):
        self.path = path
        self.line = line
        self.reason = reason
        where = f"{path}:{line}" if line is not None else path
        super().__init__(f"{where}: {reason}")
