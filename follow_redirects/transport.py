"""Transport interface and the httpx-backed implementation."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Mapping, Optional

import httpx

from .errors import TransportError
from .events import EventEmitter

logger = logging.getLogger(__name__)

ResponseCallback = Callable[["Response"], Any]


class Response(ABC):
    """A response as seen by the redirect controller.

    ``headers`` must be a case-insensitive mapping. ``fetched_urls`` is
    filled in on the response that is finally delivered to the caller.
    """

    status_code: int
    headers: Mapping[str, str]
    url: str

    def __init__(self) -> None:
        self.fetched_urls: List[str] = []

    @abstractmethod
    async def read(self) -> bytes:
        ...

    @abstractmethod
    async def drain(self) -> None:
        """Consume and discard the body so the connection can be released."""


class TransportRequest(EventEmitter, ABC):
    """One in-flight request on a transport.

    Emits ``response`` with a :class:`Response` or ``error`` with an
    exception. The body is sent once :meth:`end` is called.
    """

    def __init__(self) -> None:
        super().__init__()
        self._chunks: List[bytes] = []
        self.ended = False

    def write(self, data: bytes) -> None:
        if self.ended:
            raise RuntimeError("write after end")
        self._chunks.append(data)

    def end(self, data: Optional[bytes] = None) -> None:
        if self.ended:
            return
        if data:
            self._chunks.append(data)
        self.ended = True
        self._start()

    @property
    def body(self) -> bytes:
        return b"".join(self._chunks)

    @abstractmethod
    def _start(self) -> None:
        ...


class Transport(ABC):
    scheme: str

    @abstractmethod
    def issue(self, descriptor: Any, on_response: ResponseCallback) -> TransportRequest:
        ...


class HttpxResponse(Response):
    def __init__(self, response: httpx.Response) -> None:
        super().__init__()
        self.raw = response
        self.status_code = response.status_code
        self.headers = response.headers
        self.url = str(response.url)

    async def read(self) -> bytes:
        try:
            return await self.raw.aread()
        finally:
            await self.raw.aclose()

    async def drain(self) -> None:
        try:
            await self.raw.aread()
        finally:
            await self.raw.aclose()

    def __repr__(self) -> str:
        return f"<HttpxResponse [{self.status_code}] {self.url}>"


class HttpxTransportRequest(TransportRequest):
    def __init__(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        timeout: Optional[float],
    ) -> None:
        super().__init__()
        self.client = client
        self.method = method
        self.url = url
        self.headers = dict(headers)
        self.timeout = timeout
        self.task: Optional[asyncio.Task] = None
        if body:
            self._chunks.append(body)

    def _start(self) -> None:
        self.task = asyncio.get_running_loop().create_task(self._send())

    async def _send(self) -> None:
        kwargs = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        try:
            request = self.client.build_request(
                self.method,
                self.url,
                headers=self.headers,
                content=self.body or None,
                **kwargs,
            )
            response = await self.client.send(request, stream=True, follow_redirects=False)
        except Exception as exc:
            logger.debug("%s %s failed: %s", self.method, self.url, exc)
            self.emit("error", TransportError.wrap(exc, self.url))
            return
        logger.debug("%s %s -> %s", self.method, self.url, response.status_code)
        self.emit("response", HttpxResponse(response))

    def __repr__(self) -> str:
        return f"<HttpxTransportRequest {self.method} {self.url}>"


class HttpxTransport(Transport):
    """Issues requests for one scheme through a shared ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient, scheme: str = "http") -> None:
        self.client = client
        self.scheme = scheme

    def issue(self, descriptor: Any, on_response: ResponseCallback) -> HttpxTransportRequest:
        request = HttpxTransportRequest(
            self.client,
            method=descriptor.method,
            url=descriptor.url,
            headers=descriptor.headers,
            body=descriptor.body,
            timeout=descriptor.timeout,
        )
        request.on("response", on_response)
        return request

    def __repr__(self) -> str:
        return f"HttpxTransport(scheme={self.scheme!r})"


__all__ = [
    "HttpxResponse",
    "HttpxTransport",
    "HttpxTransportRequest",
    "Response",
    "ResponseCallback",
    "Transport",
    "TransportRequest",
]
