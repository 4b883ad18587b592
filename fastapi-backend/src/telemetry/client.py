# fastapi-backend/src/telemetry/client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from settings import AppSettings

logger = logging.getLogger(__name__)


class TelemetryUnavailable(RuntimeError):
    """Raised when the OpenObserve store cannot answer or accept a record."""


class OpenObserveClient:
    """Thin HTTP wrapper around the two OpenObserve endpoints the dashboard uses.

    ``transport`` is passed straight to httpx so tests can plug in a
    ``httpx.MockTransport``.
    """

    def __init__(self, settings: AppSettings, transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings
        self.transport = transport
        self.base_url = settings.telemetry_url
        self.auth = httpx.BasicAuth(settings.openobserve_user, settings.openobserve_password)

    @property
    def search_url(self) -> str:
        return f"{self.base_url}/api/{self.settings.openobserve_org}/_search"

    @property
    def ingest_url(self) -> str:
        org = self.settings.openobserve_org
        return f"{self.base_url}/api/{org}/{self.settings.openobserve_stream}/_json"

    def latest_query(self) -> Dict[str, Any]:
        stream = self.settings.openobserve_stream
        return {
            "query": {"sql": f"SELECT * FROM {stream} ORDER BY _timestamp DESC LIMIT 1"},
            "size": 1,
        }

    async def latest_record(self) -> Dict[str, Any]:
        """Return the most recent record in the stream."""
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.openobserve_timeout,
                auth=self.auth,
                transport=self.transport,
            ) as client:
                r = await client.post(self.search_url, json=self.latest_query())
        except httpx.HTTPError as exc:
            raise TelemetryUnavailable(f"search request failed: {exc}") from exc

        if not r.is_success:
            raise TelemetryUnavailable(f"search returned HTTP {r.status_code}")
        try:
            payload = r.json()
        except ValueError as exc:
            raise TelemetryUnavailable("search returned a non-JSON body") from exc

        hits = payload.get("hits") if isinstance(payload, dict) else None
        if not isinstance(hits, list) or not hits:
            raise TelemetryUnavailable("search returned no hits")
        if not isinstance(hits[0], dict):
            raise TelemetryUnavailable("search hit is not an object")
        return hits[0]

    def ingest(self, record: Dict[str, Any]) -> None:
        try:
            with httpx.Client(
                timeout=self.settings.openobserve_timeout,
                auth=self.auth,
                transport=self.transport,
            ) as client:
                r = client.post(self.ingest_url, json=record)
        except httpx.HTTPError as exc:
            raise TelemetryUnavailable(f"ingest request failed: {exc}") from exc

        if r.status_code not in (200, 201):
            raise TelemetryUnavailable(f"ingest returned HTTP {r.status_code}")
        logger.debug("Ingested record into %s", self.ingest_url)
