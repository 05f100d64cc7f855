"""URL helper utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

REDIRECT_STATUS_CODES = frozenset({300, 301, 302, 303, 305, 307, 308})

DEFAULT_PORTS = {"http": 80, "https": 443}

URL_FIELDS = ("scheme", "username", "password", "host", "port", "path", "query", "fragment")


@dataclass(frozen=True)
class URLParts:
    scheme: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    path: str = "/"
    query: Optional[str] = None
    fragment: Optional[str] = None

    def as_dict(self) -> dict:
        return {name: getattr(self, name) for name in URL_FIELDS}


def is_redirect(status_code: Optional[int]) -> bool:
    return status_code in REDIRECT_STATUS_CODES


def url_scheme(url: str) -> Optional[str]:
    return urlsplit(url.strip()).scheme.lower() or None


def parse_url(url: str) -> URLParts:
    """Split ``url`` into the components a request descriptor carries."""

    split = urlsplit(url.strip())
    if not split.scheme:
        raise ValueError(f"URL has no scheme: {url!r}")
    path = split.path
    if not path and split.netloc:
        path = "/"
    return URLParts(
        scheme=split.scheme.lower(),
        username=split.username,
        password=split.password,
        host=split.hostname,
        port=split.port,
        path=path or "/",
        query=split.query or None,
        fragment=split.fragment or None,
    )


def resolve_url(base: str, location: str) -> str:
    return urljoin(base, location.strip())


def format_url(parts: Any) -> str:
    """Build a URL string from anything exposing the :data:`URL_FIELDS` attributes."""

    netloc = ""
    host = parts.host or ""
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    if parts.username is not None:
        netloc = parts.username
        if parts.password is not None:
            netloc += f":{parts.password}"
        netloc += "@"
    netloc += host
    if parts.port is not None:
        netloc += f":{parts.port}"
    return urlunsplit((parts.scheme or "", netloc, parts.path or "/", parts.query or "", parts.fragment or ""))


def origin(parts: Any) -> tuple:
    scheme = (parts.scheme or "").lower()
    port = parts.port if parts.port is not None else DEFAULT_PORTS.get(scheme)
    return scheme, (parts.host or "").lower(), port


__all__ = [
    "REDIRECT_STATUS_CODES",
    "URLParts",
    "URL_FIELDS",
    "format_url",
    "is_redirect",
    "origin",
    "parse_url",
    "resolve_url",
    "url_scheme",
]
