# fastapi-backend/src/reports/voice_cards.py
# | Card                   | Id prefix | Priority | Keywords                          | Data Shown                                   |
# | ---------------------- | --------- | -------- | --------------------------------- | -------------------------------------------- |
# | Security Analysis      | sec       | 1        | security, threat                  | threats, error rate, connections, env        |
# | System Performance     | sys       | 2        | system, production, performance   | cpu, memory, cache hit, latency, req/s       |
# | Network Traffic        | net       | 3        | network, traffic                  | network io, connections, req/s, latency      |
# | Environmental Overview | overview  | 5        | (fallback when nothing matches)   | data source, cpu, memory, threats, status    |
from __future__ import annotations

import math
import time
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from telemetry.snapshot import MetricsSnapshot, MetricsSource

RED = "#ef4444"
AMBER = "#f59e0b"
GREEN = "#10b981"
BLUE = "#60a5fa"

Badge = Literal["critical", "warning", "success", "info"]


class MetricRow(BaseModel):
    label: str
    value: str
    color: Optional[str] = None


class Card(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    badge: Badge
    badge_text: str = Field(alias="badgeText")
    metrics: List[MetricRow]
    chart: bool = False
    priority: int = 0


def _card_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}"


def _pct(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}%"


def format_count(value: float) -> str:
    # half-up, so 2.5 reads as 3 on the card and in the spoken response
    return str(math.floor(value + 0.5))


def _warn_above(value: float, limit: float) -> str:
    return AMBER if value > limit else GREEN


def _threat_color(threats: float) -> str:
    return RED if threats > 20 else GREEN


def threat_badge(threats: float) -> Badge:
    if threats > 20:
        return "critical"
    if threats > 10:
        return "warning"
    return "success"


def data_source_label(source: MetricsSource) -> str:
    return "OpenObserve" if source == "openobserve" else "Simulated"


def security_card(m: MetricsSnapshot, source: MetricsSource) -> Card:
    return Card(
        id=_card_id("sec"),
        title="Security Analysis",
        badge=threat_badge(m.threats_blocked),
        badge_text="Live" if source == "openobserve" else "Demo",
        metrics=[
            MetricRow(
                label="Threats Blocked",
                value=format_count(m.threats_blocked),
                color=_threat_color(m.threats_blocked),
            ),
            MetricRow(
                label="Error Rate",
                value=_pct(m.error_rate, 2),
                color=_warn_above(m.error_rate, 2),
            ),
            MetricRow(label="Active Connections", value=format_count(m.active_connections)),
            MetricRow(label="Environment", value=m.environment, color=BLUE),
        ],
        chart=True,
        priority=1,
    )


def system_card(m: MetricsSnapshot, source: MetricsSource) -> Card:
    return Card(
        id=_card_id("sys"),
        title="System Performance",
        badge="info",
        badge_text="Real-Time" if source == "openobserve" else "Demo",
        metrics=[
            MetricRow(label="CPU Usage", value=_pct(m.cpu_usage), color=_warn_above(m.cpu_usage, 70)),
            MetricRow(label="Memory", value=_pct(m.memory_usage), color=_warn_above(m.memory_usage, 80)),
            MetricRow(label="Cache Hit Rate", value=_pct(m.cache_hit_rate), color=GREEN),
            MetricRow(
                label="Response Time",
                value=f"{format_count(m.response_time)}ms",
                color=_warn_above(m.response_time, 100),
            ),
            MetricRow(label="Requests/sec", value=format_count(m.requests_per_sec)),
        ],
        chart=True,
        priority=2,
    )


def network_card(m: MetricsSnapshot, source: MetricsSource) -> Card:
    return Card(
        id=_card_id("net"),
        title="Network Traffic",
        badge="warning" if m.error_rate > 2 else "info",
        badge_text="Live" if source == "openobserve" else "Demo",
        metrics=[
            MetricRow(label="Network I/O", value=f"{m.network_io:.1f} MB/s", color=BLUE),
            MetricRow(label="Active Connections", value=format_count(m.active_connections)),
            MetricRow(label="Requests/sec", value=format_count(m.requests_per_sec)),
            MetricRow(
                label="Response Time",
                value=f"{format_count(m.response_time)}ms",
                color=_warn_above(m.response_time, 100),
            ),
        ],
        chart=True,
        priority=3,
    )


def overview_card(m: MetricsSnapshot, source: MetricsSource) -> Card:
    return Card(
        id=_card_id("overview"),
        title="Environmental Overview",
        badge="success",
        badge_text="Connected" if source == "openobserve" else "Demo Mode",
        metrics=[
            MetricRow(label="Data Source", value=data_source_label(source), color=GREEN),
            MetricRow(label="CPU", value=_pct(m.cpu_usage), color=_warn_above(m.cpu_usage, 70)),
            MetricRow(label="Memory", value=_pct(m.memory_usage), color=_warn_above(m.memory_usage, 80)),
            MetricRow(
                label="Threats Blocked",
                value=format_count(m.threats_blocked),
                color=_threat_color(m.threats_blocked),
            ),
            MetricRow(label="Status", value="Operational", color=GREEN),
        ],
        chart=True,
        priority=5,
    )
