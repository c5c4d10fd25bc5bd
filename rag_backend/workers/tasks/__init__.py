"""Ingestion tasks run by FastAPI background tasks or Celery workers."""
