"""Exception types raised by docshelf."""

from __future__ import annotations


class DocshelfError(Exception):
    """Base class for docshelf errors."""


class ConfigError(DocshelfError):
    """Raised when a site configuration file cannot be loaded."""


class ProviderError(DocshelfError):
    """Raised when the AI completion provider fails or times out."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
