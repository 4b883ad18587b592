#!/usr/bin/env python3
"""Publish synthetic telemetry to OpenObserve on a fixed interval.

    python -m generators.generate_metrics --interval 2 --count 100
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from typing import Any, Callable, Dict, List, Optional

from settings import AppSettings, get_settings
from telemetry.client import OpenObserveClient, TelemetryUnavailable
from telemetry.synthetic import generate_publisher_metrics

logger = logging.getLogger("generate_metrics")


def build_record(
    source: str = "aardi-simulator",
    rng: Optional[random.Random] = None,
    now: Callable[[], float] = time.time,
) -> Dict[str, Any]:
    return {
        **generate_publisher_metrics(rng),
        "timestamp": int(now() * 1000),
        "source": source,
        "environment": "production",
    }


def send_metrics(client: OpenObserveClient, settings: AppSettings, rng: Optional[random.Random] = None) -> bool:
    record = build_record(source=settings.metrics_source, rng=rng)
    try:
        client.ingest(record)
    except TelemetryUnavailable as exc:
        logger.error("Error sending metrics: %s", exc)
        return False
    logger.info(
        "Metrics sent - CPU: %.1f%% Mem: %.1f%% Req/s: %d",
        record["cpu_usage"],
        record["memory_usage"],
        record["requests_per_sec"],
    )
    return True


def run(
    client: OpenObserveClient,
    settings: AppSettings,
    interval: float,
    count: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Send one record now and one every ``interval`` seconds.

    Runs until ``count`` records have been attempted, or forever when
    ``count`` is None. Returns the number of successful sends.
    """
    sent = 0
    attempts = 0
    while count is None or attempts < count:
        if send_metrics(client, settings):
            sent += 1
        attempts += 1
        if count is not None and attempts >= count:
            break
        sleep(interval)
    return sent


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate synthetic telemetry for OpenObserve")
    parser.add_argument("--interval", type=float, default=None, help="seconds between records")
    parser.add_argument("--count", type=int, default=None, help="stop after N records")
    parser.add_argument("--url", default=None, help="OpenObserve base URL")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    if args.url:
        settings = settings.model_copy(update={"openobserve_url": args.url})
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )

    interval = args.interval if args.interval is not None else settings.metrics_publish_interval
    client = OpenObserveClient(settings)
    logger.info("Generating telemetry data for OpenObserve at %s", client.base_url)
    logger.info("Press Ctrl+C to stop")
    try:
        run(client, settings, interval=interval, count=args.count)
    except KeyboardInterrupt:
        logger.info("Stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
