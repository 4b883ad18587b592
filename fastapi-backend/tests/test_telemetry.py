from __future__ import annotations

import asyncio
import base64
import random

import httpx
import pytest

from conftest import LIVE_RECORD, StoreStub, hits_response
from telemetry.client import OpenObserveClient, TelemetryUnavailable
from telemetry.snapshot import MetricsSnapshot, fetch_latest_metrics
from telemetry.synthetic import generate_publisher_metrics, generate_simulated_metrics


EXPECTED_AUTH = "Basic " + base64.b64encode(b"admin@aardi.com:aardi123").decode()


def test_simulated_metrics_stay_within_demo_ranges():
    rng = random.Random(7)
    for _ in range(200):
        m = generate_simulated_metrics(rng)
        assert 35 <= m["cpu_usage"] < 75
        assert 40 <= m["memory_usage"] < 75
        assert 85 <= m["cache_hit_rate"] < 99
        assert 50 <= m["response_time"] <= 149
        assert 500 <= m["requests_per_sec"] <= 999
        assert 0 <= m["threats_blocked"] <= 29
        assert 100 <= m["active_connections"] <= 499
        assert 0 <= m["error_rate"] < 3
        assert m["environment"] == "production"


def test_publisher_metrics_use_integer_counters():
    m = generate_publisher_metrics(random.Random(1))
    for key in ("requests_per_sec", "response_time", "active_connections", "threats_blocked"):
        assert isinstance(m[key], int)
    assert 100 <= m["requests_per_sec"] <= 1099
    assert 0 <= m["threats_blocked"] <= 49


def test_latest_record_posts_search_query_with_basic_auth(settings, live_store):
    client = OpenObserveClient(settings, transport=live_store.transport)

    record = asyncio.run(client.latest_record())

    assert record == LIVE_RECORD
    request = live_store.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://openobserve.test:5080/api/default/_search"
    assert request.headers["Authorization"] == EXPECTED_AUTH
    assert live_store.last_json() == {
        "query": {"sql": "SELECT * FROM default ORDER BY _timestamp DESC LIMIT 1"},
        "size": 1,
    }


@pytest.mark.parametrize(
    "handler",
    [
        hits_response(),
        lambda request: httpx.Response(200, json={"took": 1}),
        lambda request: httpx.Response(401, json={"error": "unauthorized"}),
        lambda request: httpx.Response(200, text="not json"),
    ],
)
def test_latest_record_raises_when_store_has_nothing_usable(settings, handler):
    client = OpenObserveClient(settings, transport=StoreStub(handler).transport)
    with pytest.raises(TelemetryUnavailable):
        asyncio.run(client.latest_record())


def test_latest_record_wraps_transport_errors(settings):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = OpenObserveClient(settings, transport=StoreStub(refuse).transport)
    with pytest.raises(TelemetryUnavailable):
        asyncio.run(client.latest_record())


def test_ingest_posts_json_record(settings):
    store = StoreStub(lambda request: httpx.Response(201, json={"code": 200}))
    client = OpenObserveClient(settings, transport=store.transport)

    client.ingest({"cpu_usage": 12.5})

    assert str(store.requests[0].url) == "http://openobserve.test:5080/api/default/default/_json"
    assert store.requests[0].headers["Authorization"] == EXPECTED_AUTH
    assert store.last_json() == {"cpu_usage": 12.5}


def test_ingest_raises_on_rejected_record(settings):
    store = StoreStub(lambda request: httpx.Response(400, json={"error": "bad"}))
    with pytest.raises(TelemetryUnavailable):
        OpenObserveClient(settings, transport=store.transport).ingest({})


def test_snapshot_defaults_missing_and_null_fields():
    m = MetricsSnapshot.model_validate({"cpu_usage": None, "threats_blocked": "7", "environment": None})
    assert m.cpu_usage == 0
    assert m.memory_usage == 0
    assert m.threats_blocked == 7
    assert m.environment == "production"


def test_fetch_uses_store_record_when_available(settings, live_store):
    client = OpenObserveClient(settings, transport=live_store.transport)

    metrics, source = asyncio.run(fetch_latest_metrics(settings, client))

    assert source == "openobserve"
    assert metrics.cpu_usage == pytest.approx(72.456)
    assert metrics.environment == "staging"


def test_fetch_falls_back_to_simulated_on_store_failure(settings, failing_store):
    client = OpenObserveClient(settings, transport=failing_store.transport)

    metrics, source = asyncio.run(fetch_latest_metrics(settings, client))

    assert source == "simulated"
    assert len(failing_store.requests) == 1
    assert 35 <= metrics.cpu_usage < 75


def test_fetch_falls_back_on_malformed_record(settings):
    store = StoreStub(hits_response({"cpu_usage": "very high"}))
    client = OpenObserveClient(settings, transport=store.transport)

    _, source = asyncio.run(fetch_latest_metrics(settings, client))

    assert source == "simulated"


@pytest.mark.parametrize(
    "body",
    [
        b'{"hits": [{"threats_blocked": NaN}]}',
        b'{"hits": [{"active_connections": 1e400}]}',
        b'{"hits": [{"cpu_usage": -Infinity}]}',
    ],
)
def test_fetch_falls_back_on_non_finite_values(settings, body):
    store = StoreStub(
        lambda request: httpx.Response(200, content=body, headers={"content-type": "application/json"})
    )
    client = OpenObserveClient(settings, transport=store.transport)

    metrics, source = asyncio.run(fetch_latest_metrics(settings, client))

    assert source == "simulated"
    assert 0 <= metrics.threats_blocked <= 29


def test_demo_mode_never_queries_the_store(demo_settings, live_store):
    client = OpenObserveClient(demo_settings, transport=live_store.transport)

    _, source = asyncio.run(fetch_latest_metrics(demo_settings, client))

    assert source == "simulated"
    assert live_store.requests == []
