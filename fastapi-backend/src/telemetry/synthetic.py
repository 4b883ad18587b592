# fastapi-backend/src/telemetry/synthetic.py
# | Generator                   | Used by                    | Ranges                                   |
# | --------------------------- | -------------------------- | ---------------------------------------- |
# | generate_simulated_metrics  | /api/voice fallback        | narrow, "healthy looking" demo values    |
# | generate_publisher_metrics  | generator CLI, celery beat | wide, anything the store might plausibly |
from __future__ import annotations

import random
from typing import Any, Dict, Optional


def generate_simulated_metrics(rng: Optional[random.Random] = None) -> Dict[str, Any]:
    rng = rng or random.Random()
    return {
        "cpu_usage": 35 + rng.random() * 40,
        "memory_usage": 40 + rng.random() * 35,
        "cache_hit_rate": 85 + rng.random() * 14,
        "response_time": 50 + rng.randrange(100),
        "requests_per_sec": 500 + rng.randrange(500),
        "threats_blocked": rng.randrange(30),
        "active_connections": 100 + rng.randrange(400),
        "error_rate": rng.random() * 3,
        "disk_usage": 40 + rng.random() * 40,
        "network_io": 100 + rng.random() * 500,
        "environment": "production",
    }


def generate_publisher_metrics(rng: Optional[random.Random] = None) -> Dict[str, Any]:
    rng = rng or random.Random()
    return {
        "cpu_usage": rng.random() * 100,
        "memory_usage": rng.random() * 100,
        "requests_per_sec": rng.randrange(1000) + 100,
        "error_rate": rng.random() * 5,
        "response_time": rng.randrange(200) + 20,
        "active_connections": rng.randrange(500) + 100,
        "disk_usage": rng.random() * 90,
        "network_io": rng.random() * 1000,
        "cache_hit_rate": 85 + rng.random() * 15,
        "threats_blocked": rng.randrange(50),
    }
