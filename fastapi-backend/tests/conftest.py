from __future__ import annotations

import json
from typing import Callable, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from settings import AppSettings, get_settings
from telemetry.client import OpenObserveClient


LIVE_RECORD = {
    "_timestamp": 1729339200000000,
    "cpu_usage": 72.456,
    "memory_usage": 81.2,
    "cache_hit_rate": 93.33,
    "response_time": 120,
    "requests_per_sec": 640,
    "threats_blocked": 25,
    "active_connections": 310,
    "error_rate": 2.5,
    "disk_usage": 55.0,
    "network_io": 412.34,
    "environment": "staging",
    "source": "aardi-simulator",
}


class StoreStub:
    """Records requests and answers them with a canned response."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def last_json(self) -> Dict:
        return json.loads(self.requests[-1].content)


def hits_response(*hits: Dict) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(200, json={"took": 1, "hits": list(hits)})


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        environment="development",
        openobserve_url="http://openobserve.test:5080",
        openobserve_user="admin@aardi.com",
        openobserve_password="aardi123",
    )


@pytest.fixture
def demo_settings() -> AppSettings:
    return AppSettings(environment="production", openobserve_url=None)


@pytest.fixture
def live_store() -> StoreStub:
    return StoreStub(hits_response(LIVE_RECORD))


@pytest.fixture
def failing_store() -> StoreStub:
    return StoreStub(lambda request: httpx.Response(503, text="unavailable"))


@pytest.fixture
def make_client():
    from main import app, get_telemetry_client

    def _make(s: AppSettings, store: StoreStub) -> TestClient:
        app.dependency_overrides[get_settings] = lambda: s
        app.dependency_overrides[get_telemetry_client] = lambda: OpenObserveClient(
            s, transport=store.transport
        )
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
