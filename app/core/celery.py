"""
Celery configuration for background tasks
"""
from celery import Celery
from celery.schedules import crontab
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

# Create Celery instance
celery_app = Celery(
    "invoice_builder",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "app.modules.email.tasks",
        "app.modules.reminders.tasks",
    ]
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=30 * 60,  # 30 minutes
    task_soft_time_limit=25 * 60,  # 25 minutes
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,

    # Rate limiting
    task_default_rate_limit="100/m",

    # Result backend settings
    result_expires=3600,  # 1 hour

    # Task routes for different queues
    task_routes={
        "app.modules.email.tasks.*": {"queue": "email"},
        "app.modules.reminders.tasks.*": {"queue": "reminders"},
    },

    # Beat schedule for periodic tasks
    beat_schedule={
        "dispatch-due-reminders": {
            "task": "app.modules.reminders.tasks.dispatch_due_reminders",
            "schedule": crontab(hour=settings.REMINDER_DISPATCH_HOUR, minute=0),  # Daily
        },
    }
)

if __name__ == "__main__":
    celery_app.start()
