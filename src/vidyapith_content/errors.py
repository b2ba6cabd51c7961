"""Error types for content cache flows."""

from __future__ import annotations


class ContentError(RuntimeError):
    """Base error for content cache operations."""


class FetchFailed(ContentError):
    """A content fetch failed and no cached value was available to serve."""

    def __init__(self, cache_key: str, cause: BaseException) -> None:
        self.cache_key = cache_key
        self.cause = cause
        super().__init__(f"fetch failed for {cache_key}: {cause}")


class CacheCorrupt(ContentError):
    """Stored cache text could not be decoded into content."""


class PersistWriteFailed(ContentError):
    """The key-value store rejected a write."""


class CLIError(ContentError):
    """User-facing CLI error."""
