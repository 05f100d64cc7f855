"""Error types raised or emitted while following redirects."""

from __future__ import annotations

from typing import List, Optional


class RedirectError(Exception):
    """Base class for every error produced by this package."""


class ProtocolMismatch(RedirectError, ValueError):
    def __init__(self, expected: str, actual: Optional[str]) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"protocol mismatch: expected {expected!r}, got {actual!r}")


class TooManyRedirects(RedirectError):
    def __init__(self, fetched_urls: List[str], max_redirects: int) -> None:
        self.fetched_urls = list(fetched_urls)
        self.max_redirects = max_redirects
        super().__init__(f"Max redirects exceeded ({max_redirects})")


class UnsupportedScheme(RedirectError, LookupError):
    def __init__(self, scheme: Optional[str]) -> None:
        self.scheme = scheme
        super().__init__(f"no transport registered for scheme {scheme!r}")


class TransportError(RedirectError):
    """Wraps a failure surfaced by the underlying transport on some hop."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        self.url = url
        super().__init__(message)

    @classmethod
    def wrap(cls, exc: BaseException, url: Optional[str] = None) -> "TransportError":
        if isinstance(exc, TransportError):
            return exc
        err = cls(f"{type(exc).__name__}: {exc}", url=url)
        err.__cause__ = exc
        return err


__all__ = [
    "ProtocolMismatch",
    "RedirectError",
    "TooManyRedirects",
    "TransportError",
    "UnsupportedScheme",
]
