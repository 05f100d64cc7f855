"""Request descriptor and caller option normalization."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .errors import ProtocolMismatch
from .urls import URL_FIELDS, format_url, parse_url, url_scheme

logger = logging.getLogger(__name__)

DEFAULT_MAX_REDIRECTS = 5

# fields owned by the controller; callers cannot seed them
_INTERNAL_FIELDS = frozenset({"transport", "default_issue"})


@dataclass
class RequestDescriptor:
    """Mutable description of the next request to issue.

    One descriptor is threaded through every hop of a logical request and
    rewritten in place on each redirect.
    """

    scheme: Optional[str] = None
    method: str = "GET"
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    host: Optional[str] = None
    port: Optional[int] = None
    path: str = "/"
    query: Optional[str] = None
    fragment: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = field(default=None, repr=False)
    timeout: Optional[float] = None
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    transport: Any = field(default=None, repr=False, compare=False)
    issue_fn: Optional[Callable[..., Any]] = field(default=None, repr=False, compare=False)
    default_issue: Optional[Callable[..., Any]] = field(default=None, repr=False, compare=False)

    @property
    def url(self) -> str:
        return format_url(self)

    def apply_url(self, url: str) -> None:
        """Replace every URL-derived field with the components of ``url``.

        Components absent from ``url`` are reset, never carried over from
        the previous value.
        """

        parts = parse_url(url)
        for name in URL_FIELDS:
            setattr(self, name, getattr(parts, name))

    def drop_header(self, name: str) -> None:
        lowered = name.lower()
        for key in [k for k in self.headers if k.lower() == lowered]:
            del self.headers[key]


OptionsInput = Union[str, Mapping[str, Any], RequestDescriptor]

_OPTION_NAMES = frozenset(f.name for f in fields(RequestDescriptor)) - _INTERNAL_FIELDS


def _descriptor_items(descriptor: RequestDescriptor) -> Dict[str, Any]:
    return {name: getattr(descriptor, name) for name in _OPTION_NAMES}


def normalize_options(
    options: OptionsInput,
    expected_scheme: str,
    max_redirects: int = DEFAULT_MAX_REDIRECTS,
) -> RequestDescriptor:
    """Turn a URL string or an options mapping into a fresh descriptor.

    Raises :class:`ProtocolMismatch` when the resulting scheme is not
    ``expected_scheme``.
    """

    expected_scheme = expected_scheme.lower()

    if isinstance(options, str):
        if url_scheme(options) is None:
            raise ProtocolMismatch(expected_scheme, None)
        descriptor = RequestDescriptor(max_redirects=max_redirects)
        descriptor.apply_url(options)
    else:
        if isinstance(options, RequestDescriptor):
            items = _descriptor_items(options)
        elif isinstance(options, Mapping):
            items = dict(options)
        else:
            raise TypeError(f"expected a URL string or options mapping, got {type(options).__name__}")

        descriptor = RequestDescriptor(scheme=expected_scheme, max_redirects=max_redirects)
        url = items.pop("url", None)
        if url is not None:
            if url_scheme(url) is None:
                raise ProtocolMismatch(expected_scheme, None)
            descriptor.apply_url(url)

        unknown = sorted(set(items) - _OPTION_NAMES)
        if unknown:
            raise TypeError(f"unexpected request options: {', '.join(unknown)}")

        for name, value in items.items():
            setattr(descriptor, name, value)
        descriptor.headers = dict(descriptor.headers or {})
        if descriptor.scheme:
            descriptor.scheme = descriptor.scheme.lower().rstrip(":")
        descriptor.method = descriptor.method.upper()

    if descriptor.scheme != expected_scheme:
        raise ProtocolMismatch(expected_scheme, descriptor.scheme)

    logger.debug("options %r", descriptor)
    return descriptor


__all__ = ["DEFAULT_MAX_REDIRECTS", "OptionsInput", "RequestDescriptor", "normalize_options"]
