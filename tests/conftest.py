from __future__ import annotations

import json
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from app.config import Settings

Reply = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.current = start
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self.current

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += seconds

    def advance(self, seconds: float) -> None:
        self.current += seconds


class ProviderStub:
    """Scripted provider: replies per (method, path) and records every call.

    A route holds a list of replies consumed in order; the last one repeats.
    Unknown routes answer 404. ``request_cost`` advances the fake clock on each
    call to simulate slow requests.
    """

    def __init__(self, clock: Optional[FakeClock] = None, request_cost: float = 0.0) -> None:
        self.clock = clock
        self.request_cost = request_cost
        self.routes: dict[tuple[str, str], list[Reply]] = {}
        self.calls: list[tuple[str, str]] = []
        self.call_times: list[float] = []
        self.bodies: list[Any] = []
        self.headers: list[httpx.Headers] = []

    def on(self, method: str, path: str, *replies: Reply) -> "ProviderStub":
        self.routes[(method.upper(), path)] = list(replies)
        return self

    def paths(self, method: Optional[str] = None) -> list[str]:
        return [path for verb, path in self.calls if method is None or verb == method.upper()]

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.raw_path.decode("ascii")
        key = (request.method, path)
        if self.clock is not None:
            self.call_times.append(self.clock.now())
            self.clock.advance(self.request_cost)
        self.calls.append(key)
        self.headers.append(request.headers)
        self.bodies.append(json.loads(request.content) if request.content else None)
        replies = self.routes.get(key)
        if not replies:
            return httpx.Response(404, json={"message": f"no route for {path}"})
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if callable(reply):
            return reply(request)
        # fresh copy so a repeated reply is never a consumed response object
        return httpx.Response(reply.status_code, headers=reply.headers, content=reply.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url="https://provider.test", transport=self.transport)


def connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def provider(clock: FakeClock) -> ProviderStub:
    return ProviderStub(clock=clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        provider_api_key="test-key",
        provider_base_url="https://provider.test",
        poll_deadline_seconds=30.0,
        _env_file=None,
    )
