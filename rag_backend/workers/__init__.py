"""
Celery workers module.

Broker-backed document ingestion. Start a worker with:
    celery -A rag_backend.workers:celery_app worker --loglevel=info

Dependencies: celery, rag_backend.configs
System role: Background task processing
"""

from celery import Celery
from celery.signals import setup_logging

from rag_backend.configs import get_settings
from rag_backend.observability.logger import configure_logging

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "knowledge_base",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=["rag_backend.workers.tasks.document_ingestion"],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    result_serializer=celery_config.result_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    task_time_limit=celery_config.task_time_limit_seconds,
    task_acks_late=True,
)


@setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    configure_logging(settings.log_level)
