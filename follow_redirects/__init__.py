"""Follow HTTP redirects on top of a per-scheme request transport."""

from .controller import RedirectController, RequestHandle, State
from .errors import ProtocolMismatch, RedirectError, TooManyRedirects, TransportError, UnsupportedScheme
from .options import DEFAULT_MAX_REDIRECTS, RequestDescriptor, normalize_options
from .registry import SchemeEntryPoint, TransportRegistry
from .transport import HttpxResponse, HttpxTransport, Response, Transport, TransportRequest
from .urls import format_url, is_redirect, parse_url, resolve_url

__all__ = [
    "DEFAULT_MAX_REDIRECTS",
    "HttpxResponse",
    "HttpxTransport",
    "ProtocolMismatch",
    "RedirectController",
    "RedirectError",
    "RequestDescriptor",
    "RequestHandle",
    "Response",
    "SchemeEntryPoint",
    "State",
    "TooManyRedirects",
    "Transport",
    "TransportError",
    "TransportRegistry",
    "TransportRequest",
    "UnsupportedScheme",
    "format_url",
    "is_redirect",
    "normalize_options",
    "parse_url",
    "resolve_url",
]

__version__ = "0.1.0"
