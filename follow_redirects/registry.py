"""Scheme to transport registry and the public request entry points."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

import httpx

from .controller import RedirectController, RequestHandle
from .errors import UnsupportedScheme
from .options import DEFAULT_MAX_REDIRECTS, OptionsInput, normalize_options
from .transport import HttpxTransport, Response, Transport

logger = logging.getLogger(__name__)

ResponseListener = Callable[[Response], Any]


class SchemeEntryPoint:
    """``request``/``get`` for one scheme, routed through the redirect controller."""

    def __init__(self, registry: "TransportRegistry", scheme: str) -> None:
        self.registry = registry
        self.scheme = scheme

    @property
    def transport(self) -> Transport:
        return self.registry.resolve(self.scheme)

    def request(self, options: OptionsInput, on_response: Optional[ResponseListener] = None) -> RequestHandle:
        descriptor = normalize_options(options, self.scheme, self.registry.max_redirects)
        controller = RedirectController(self.registry, descriptor, on_response)
        return controller.handle

    def get(self, options: OptionsInput, on_response: Optional[ResponseListener] = None) -> RequestHandle:
        handle = self.request(options, on_response)
        handle.end()
        return handle

    def __repr__(self) -> str:
        return f"SchemeEntryPoint(scheme={self.scheme!r})"


class TransportRegistry:
    def __init__(self, transports: Mapping[str, Transport], max_redirects: int = DEFAULT_MAX_REDIRECTS) -> None:
        self.max_redirects = max_redirects
        self._transports: Dict[str, Transport] = {}
        self._entry_points: Dict[str, SchemeEntryPoint] = {}
        for scheme, transport in transports.items():
            scheme = scheme.lower().rstrip(":")
            self._transports[scheme] = transport
            self._entry_points[scheme] = SchemeEntryPoint(self, scheme)
        logger.debug("registered transports for %s", ", ".join(self._transports) or "no schemes")

    @classmethod
    def from_client(cls, client: httpx.AsyncClient, max_redirects: int = DEFAULT_MAX_REDIRECTS) -> "TransportRegistry":
        return cls(
            {scheme: HttpxTransport(client, scheme=scheme) for scheme in ("http", "https")},
            max_redirects=max_redirects,
        )

    @property
    def schemes(self) -> List[str]:
        return list(self._transports)

    def resolve(self, scheme: Optional[str]) -> Transport:
        try:
            return self._transports[(scheme or "").lower()]
        except KeyError:
            raise UnsupportedScheme(scheme) from None

    def __contains__(self, scheme: object) -> bool:
        return isinstance(scheme, str) and scheme.lower() in self._transports

    def __getitem__(self, scheme: str) -> SchemeEntryPoint:
        return self._entry_points[scheme.lower()]

    def __getattr__(self, name: str) -> SchemeEntryPoint:
        entry_points = self.__dict__.get("_entry_points", {})
        if name in entry_points:
            return entry_points[name]
        raise AttributeError(f"{type(self).__name__!r} has no scheme or attribute {name!r}")


__all__ = ["SchemeEntryPoint", "TransportRegistry"]
