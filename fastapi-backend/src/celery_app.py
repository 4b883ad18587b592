from __future__ import annotations

import sys
import logging
from celery import Celery
from typing import Any, Dict


from settings import get_settings
from telemetry.client import OpenObserveClient
from generators.generate_metrics import send_metrics

s = get_settings()
logging.basicConfig(
    level=s.log_level.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger("celery")


def create_celery(settings) -> Celery:
    """
    Factory to create a configured Celery instance.

    The beat schedule publishes one synthetic metrics record every
    ``metrics_publish_interval`` seconds.
    """
    app = Celery(
        main=settings.app_name,
        broker=settings.celery_broker_url,
        backend=settings.celery_result_backend,
    )
    app.conf.update(
        task_default_queue=settings.celery_task_default_queue,
        task_serializer="json",
        result_serializer="json",
        accept_content=["json"],
        worker_hijack_root_logger=False,
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        broker_heartbeat=30,
        broker_connection_retry_on_startup=True,
        result_extended=True,
        timezone="UTC",
        worker_send_task_events=True,
        task_send_sent_event=True,
        beat_schedule={
            "publish-synthetic-metrics": {
                "task": "tasks.publish_metrics",
                "schedule": settings.metrics_publish_interval,
            },
        },
        beat_scheduler="celery.beat:PersistentScheduler",
        beat_schedule_filename="celerybeat-schedule",
    )
    return app


celery_app: Celery = create_celery(s)


@celery_app.task(name="tasks.ping")
def ping(payload: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Trivial health task to verify worker reachability and queue wiring.
    """
    return {"ok": True, "payload": payload or {}, "worker": s.app_name}


@celery_app.task(name="tasks.publish_metrics", ignore_result=True)
def publish_metrics() -> bool:
    return send_metrics(OpenObserveClient(s), s)
