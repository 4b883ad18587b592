from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Tuple

from pydantic import BaseModel

from reports.voice_cards import Card, format_count, network_card, overview_card, security_card, system_card
from telemetry.snapshot import MetricsSnapshot, MetricsSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandRule:
    name: str
    keywords: Tuple[str, ...]
    build_card: Callable[[MetricsSnapshot, MetricsSource], Card]
    describe: Callable[[MetricsSnapshot], str]

    def matches(self, lowered: str) -> bool:
        return any(k in lowered for k in self.keywords)


class VoiceResponse(BaseModel):
    cards: List[Card]
    response: str


COMMAND_RULES: List[CommandRule] = [
    CommandRule(
        name="security",
        keywords=("security", "threat"),
        build_card=security_card,
        describe=lambda m: f"Security analysis: {format_count(m.threats_blocked)} threats blocked.",
    ),
    CommandRule(
        name="system",
        keywords=("system", "production", "performance"),
        build_card=system_card,
        describe=lambda m: (
            f"System metrics: CPU at {m.cpu_usage:.1f}%, Memory at {m.memory_usage:.1f}%"
        ),
    ),
    CommandRule(
        name="network",
        keywords=("network", "traffic"),
        build_card=network_card,
        describe=lambda m: (
            f"Network traffic: {m.network_io:.1f} MB/s across "
            f"{format_count(m.active_connections)} active connections."
        ),
    ),
]

DEMO_RESPONSE = "Running in demo mode with simulated data."
LIVE_RESPONSE = "Connected to live telemetry stream."


def classify(command: str) -> List[CommandRule]:
    lowered = command.lower()
    return [rule for rule in COMMAND_RULES if rule.matches(lowered)]


def process_command(
    command: str,
    metrics: MetricsSnapshot,
    source: MetricsSource,
) -> VoiceResponse:
    """Map a spoken command onto dashboard cards.

    Every matching rule contributes a card; the spoken response comes from
    the first match only. Commands that match nothing get the overview card.
    """
    rules = classify(command)
    if not rules:
        return VoiceResponse(
            cards=[overview_card(metrics, source)],
            response=LIVE_RESPONSE if source == "openobserve" else DEMO_RESPONSE,
        )

    logger.debug("Command %r matched %s", command, [r.name for r in rules])
    return VoiceResponse(
        cards=[rule.build_card(metrics, source) for rule in rules],
        response=rules[0].describe(metrics),
    )
