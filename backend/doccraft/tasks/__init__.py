"""
Celery application factory.
"""

from celery import Celery
from celery.signals import worker_process_init

from doccraft.core.config import settings
from doccraft.core.logging import setup_logging

celery_app = Celery("doccraft")
celery_app.config_from_object("celeryconfig")

# Auto-discover tasks in these modules
celery_app.autodiscover_tasks([
    "doccraft.tasks.build_tasks",
])


@worker_process_init.connect
def _configure_worker_logging(**_kwargs) -> None:
    setup_logging("DEBUG" if settings.APP_ENV == "development" else "INFO")
