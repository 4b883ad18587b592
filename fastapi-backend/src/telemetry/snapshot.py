# fastapi-backend/src/telemetry/snapshot.py
from __future__ import annotations

import logging
import random
from typing import Any, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from settings import AppSettings
from telemetry.client import OpenObserveClient, TelemetryUnavailable
from telemetry.synthetic import generate_simulated_metrics

logger = logging.getLogger(__name__)

MetricsSource = Literal["openobserve", "simulated"]


class MetricsSnapshot(BaseModel):
    """Latest metric values. Absent fields read as zero."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    cpu_usage: float = 0
    memory_usage: float = 0
    cache_hit_rate: float = 0
    response_time: float = 0
    requests_per_sec: float = 0
    threats_blocked: float = 0
    active_connections: float = 0
    error_rate: float = 0
    disk_usage: float = 0
    network_io: float = 0
    environment: str = "production"

    @field_validator("*", mode="before")
    @classmethod
    def _none_is_default(cls, v: Any, info) -> Any:
        if v is None or v == "":
            return "production" if info.field_name == "environment" else 0
        return v


def simulated_snapshot(rng: Optional[random.Random] = None) -> MetricsSnapshot:
    return MetricsSnapshot(**generate_simulated_metrics(rng))


async def fetch_latest_metrics(
    settings: AppSettings,
    client: Optional[OpenObserveClient] = None,
) -> Tuple[MetricsSnapshot, MetricsSource]:
    if settings.demo_mode:
        return simulated_snapshot(), "simulated"

    client = client or OpenObserveClient(settings)
    try:
        record = await client.latest_record()
        return MetricsSnapshot.model_validate(record), "openobserve"
    except TelemetryUnavailable as exc:
        logger.warning("Error fetching from OpenObserve: %s", exc)
    except ValidationError as exc:
        logger.warning("Malformed OpenObserve record: %s", exc)

    return simulated_snapshot(), "simulated"
