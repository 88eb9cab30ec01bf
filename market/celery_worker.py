# market/celery_worker.py
from celery import Celery
from market.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
    SETTLE_INTERVAL_SECONDS,
)

celery_app = Celery(
    "market",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks must be imported explicitly so the worker registers them
celery_app.conf.imports = (
    "market.tasks.settle",
    "market.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "settle-orders": {
        "task": "market.tasks.settle.settle_pending_orders_task",
        "schedule": SETTLE_INTERVAL_SECONDS,
    },
}
celery_app.conf.timezone = "UTC"
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
