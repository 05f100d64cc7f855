import asyncio
from typing import Dict, List, Optional, Tuple, Union

import httpx
import pytest

from follow_redirects.registry import TransportRegistry
from follow_redirects.transport import Response, Transport, TransportRequest

Route = Union[Tuple[int, Dict[str, str]], Exception]


class FakeResponse(Response):
    def __init__(self, status_code: int, headers: Optional[Dict[str, str]] = None, url: str = "") -> None:
        super().__init__()
        self.status_code = status_code
        self.headers = httpx.Headers(headers or {})
        self.url = url
        self.drained = False

    async def read(self) -> bytes:
        return b""

    async def drain(self) -> None:
        self.drained = True


class FakeRequest(TransportRequest):
    def __init__(self, network: "FakeNetwork", scheme: str, descriptor) -> None:
        super().__init__()
        self.network = network
        self.scheme = scheme
        self.method = descriptor.method
        self.url = descriptor.url
        self.headers = dict(descriptor.headers)
        if descriptor.body:
            self._chunks.append(descriptor.body)

    def _start(self) -> None:
        asyncio.get_running_loop().call_soon(self._respond)

    def _respond(self) -> None:
        outcome = self.network.routes.get(self.url, (404, {}))
        if isinstance(outcome, Exception):
            self.emit("error", outcome)
            return
        status_code, headers = outcome
        response = FakeResponse(status_code, headers, url=self.url)
        self.network.responses.append(response)
        self.emit("response", response)


class FakeTransport(Transport):
    def __init__(self, network: "FakeNetwork", scheme: str) -> None:
        self.network = network
        self.scheme = scheme

    def issue(self, descriptor, on_response) -> FakeRequest:
        request = FakeRequest(self.network, self.scheme, descriptor)
        request.on("response", on_response)
        self.network.requests.append(request)
        return request


class FakeNetwork:
    """Scripted responses keyed by absolute URL, shared by every scheme's transport."""

    def __init__(self, routes: Optional[Dict[str, Route]] = None) -> None:
        self.routes: Dict[str, Route] = dict(routes or {})
        self.requests: List[FakeRequest] = []
        self.responses: List[FakeResponse] = []

    def registry(self, schemes=("http", "https"), max_redirects: int = 5) -> TransportRegistry:
        return TransportRegistry(
            {scheme: FakeTransport(self, scheme) for scheme in schemes},
            max_redirects=max_redirects,
        )


@pytest.fixture
def network() -> FakeNetwork:
    return FakeNetwork()
