"""
Celery Configuration

Broker, queue layout and beat schedule for the export workers. Exports
run on ``export_queue``; the periodic registry sweep runs on
``cleanup_queue`` so a long export never delays eviction.
"""

import os

from celery import Celery
from kombu import Queue

EXPORT_TASK = "tasks.generate_static_export"
SWEEP_TASK = "tasks.sweep_expired_exports"

EXPORT_QUEUE = "export_queue"
CLEANUP_QUEUE = "cleanup_queue"


class CeleryConfig:
    """Settings handed to ``Celery.config_from_object``."""

    broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0")
    result_expires = int(os.getenv("CELERY_RESULT_EXPIRES", 3600))

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]
    timezone = "UTC"
    enable_utc = True

    # one export at a time per worker process; acked only once finished
    worker_prefetch_multiplier = 1
    task_acks_late = True
    worker_concurrency = int(os.getenv("CELERY_WORKER_CONCURRENCY", 2))
    worker_max_tasks_per_child = int(os.getenv("CELERY_MAX_TASKS_PER_CHILD", 50))

    task_default_queue = "default"
    task_queues = (
        Queue("default", routing_key="default"),
        Queue(EXPORT_QUEUE, routing_key="export"),
        Queue(CLEANUP_QUEUE, routing_key="cleanup"),
    )
    task_routes = {
        EXPORT_TASK: {"queue": EXPORT_QUEUE},
        SWEEP_TASK: {"queue": CLEANUP_QUEUE},
    }

    beat_schedule = {
        "sweep-expired-exports": {
            "task": SWEEP_TASK,
            "schedule": float(os.getenv("EXPORT_SWEEP_INTERVAL_SECONDS", 60)),
        },
    }

    task_soft_time_limit = int(os.getenv("CELERY_TASK_SOFT_TIME_LIMIT", 600))
    task_time_limit = int(os.getenv("CELERY_TASK_TIME_LIMIT", 900))


def make_celery(app):
    """
    Build the Celery app bound to a Flask application.

    Every task body runs inside ``app.app_context()`` so tasks can reach
    the services registered on the Flask app.
    """
    celery = Celery(
        app.import_name,
        broker=CeleryConfig.broker_url,
        backend=CeleryConfig.result_backend,
    )
    celery.config_from_object(CeleryConfig)

    class FlaskContextTask(celery.Task):
        def __call__(self, *args, **kwargs):
            with app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = FlaskContextTask
    return celery
