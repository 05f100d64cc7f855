"""Redirect state machine and the caller-facing request handle."""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Any, Callable, List, Optional, Tuple

from .errors import RedirectError, TooManyRedirects, TransportError
from .events import EventEmitter
from .options import RequestDescriptor
from .transport import Response, ResponseCallback, TransportRequest
from .urls import is_redirect, origin, resolve_url

logger = logging.getLogger(__name__)

BODY_HEADERS = ("Content-Length", "Content-Type", "Transfer-Encoding")


class State(enum.Enum):
    INITIATED = "initiated"
    AWAITING_RESPONSE = "awaiting_response"
    DECIDING = "deciding"
    DELIVERED = "delivered"
    FAILED = "failed"


class RequestHandle(EventEmitter):
    """Stable object handed to the caller for one logical request.

    Listeners registered here live on the handle itself; only the delegate
    (the transport request currently in flight) changes from hop to hop.
    """

    def __init__(self, controller: "RedirectController", on_response: Optional[Callable[[Response], Any]] = None) -> None:
        super().__init__()
        self._controller = controller
        self.delegate: Optional[TransportRequest] = None
        self._outcome: asyncio.Future = asyncio.get_running_loop().create_future()
        if on_response is not None:
            self.on("response", on_response)

    @property
    def state(self) -> State:
        return self._controller.state

    @property
    def fetched_urls(self) -> List[str]:
        return self._controller.fetched_urls

    @property
    def descriptor(self) -> RequestDescriptor:
        return self._controller.descriptor

    def write(self, data: bytes) -> None:
        self.delegate.write(data)

    def end(self, data: Optional[bytes] = None) -> None:
        self.delegate.end(data)

    async def result(self) -> Response:
        """Wait for the terminal response, raising the delivered error instead if one occurs."""

        return await asyncio.shield(self._outcome)

    def __repr__(self) -> str:
        return f"<RequestHandle {self.state.value} {self.descriptor.url}>"


class RedirectController:
    """Drives one logical request through its redirect chain.

    The first hop is issued on construction so the caller can write the
    request body on the returned handle; every later hop is ended here,
    since a redirect never carries the caller's body forward.
    """

    def __init__(
        self,
        registry: Any,
        descriptor: RequestDescriptor,
        on_response: Optional[Callable[[Response], Any]] = None,
    ) -> None:
        self.registry = registry
        self.descriptor = descriptor
        self.fetched_urls: List[str] = []
        self.state = State.INITIATED
        self._loop = asyncio.get_running_loop()
        self.handle = RequestHandle(self, on_response)

        request, pending = self._issue(None)
        self.handle.delegate = request
        self.task = self._loop.create_task(self._run(pending))

    def default_issue(
        self,
        descriptor: RequestDescriptor,
        on_response: ResponseCallback,
        previous: Optional[Response] = None,
    ) -> TransportRequest:
        if previous is not None and previous.status_code != 307:
            # only 307 keeps the original method
            descriptor.method = "GET"
            descriptor.body = None
            for name in BODY_HEADERS:
                descriptor.drop_header(name)
        return descriptor.transport.issue(descriptor, on_response)

    def _issue(self, previous: Optional[Response]) -> Tuple[TransportRequest, asyncio.Future]:
        descriptor = self.descriptor
        if len(self.fetched_urls) > descriptor.max_redirects:
            raise TooManyRedirects(self.fetched_urls, descriptor.max_redirects)

        descriptor.transport = self.registry.resolve(descriptor.scheme)
        descriptor.default_issue = self.default_issue
        pending = self._loop.create_future()

        def on_response(response: Response) -> None:
            if not pending.done():
                pending.set_result(response)

        def on_error(exc: BaseException) -> None:
            if not pending.done():
                pending.set_exception(exc)

        issue = descriptor.issue_fn or self.default_issue
        request = issue(descriptor, on_response, previous)
        request.on("error", on_error)
        self.state = State.AWAITING_RESPONSE
        if previous is not None:
            request.end()
        return request, pending

    async def _run(self, pending: asyncio.Future) -> None:
        while True:
            try:
                response = await pending
            except Exception as exc:
                self._fail(exc)
                return

            self.state = State.DECIDING
            fetched_url = self.descriptor.url
            self.fetched_urls.insert(0, fetched_url)

            location = response.headers.get("location")
            if not is_redirect(response.status_code) or location is None:
                self._deliver(response)
                return

            try:
                await response.drain()
                redirect_url = resolve_url(fetched_url, location)
                logger.debug("redirecting to %s", redirect_url)
                self._follow(redirect_url)
                request, pending = self._issue(response)
            except Exception as exc:
                self._fail(exc)
                return
            self.handle.delegate = request

    def _follow(self, url: str) -> None:
        descriptor = self.descriptor
        previous_origin = origin(descriptor)
        descriptor.apply_url(url)
        if origin(descriptor) != previous_origin:
            descriptor.drop_header("Authorization")

    def _deliver(self, response: Response) -> None:
        response.fetched_urls = list(self.fetched_urls)
        self.state = State.DELIVERED
        self.handle._outcome.set_result(response)
        self._notify("response", response)

    def _fail(self, exc: Exception) -> None:
        if not isinstance(exc, RedirectError):
            exc = TransportError.wrap(exc, self.descriptor.url)
        logger.debug("request to %s failed: %s", self.descriptor.url, exc)
        self.state = State.FAILED
        outcome = self.handle._outcome
        outcome.set_exception(exc)
        # the error is delivered through the handle's error event; result() is optional
        outcome.exception()
        self._notify("error", exc)

    def _notify(self, event: str, payload: Any) -> None:
        try:
            self.handle.emit(event, payload)
        except Exception:
            logger.exception("%s listener on %r raised", event, self.handle)


__all__ = ["BODY_HEADERS", "RedirectController", "RequestHandle", "State"]
