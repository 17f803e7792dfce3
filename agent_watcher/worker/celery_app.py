"""Celery application configuration."""

from celery import Celery
from celery.signals import worker_process_init

from agent_watcher.core.config import get_settings
from agent_watcher.core.logging import setup_logging

settings = get_settings()

celery_app = Celery(
    "agent_watcher",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["agent_watcher.worker.tasks"],
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    # Retry configuration
    task_default_retry_delay=settings.stream_backoff_base_seconds,
    task_max_retries=settings.stream_max_retries,
    beat_schedule={
        "expire-stale-sessions": {
            "task": "agent_watcher.worker.tasks.expire_stale_sessions",
            "schedule": settings.session_sweep_interval_seconds,
        },
    },
)


@worker_process_init.connect
def _configure_worker_logging(**_: object) -> None:
    setup_logging()
