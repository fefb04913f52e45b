"""
Celery workers module.

Async task processing for document embedding, URL ingestion and corpus
re-embedding.

Dependencies: celery, ragcore.configs
System role: Background task processing
"""

from celery import Celery

from ragcore.configs import get_settings

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "ragcore",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=[
        "ragcore.workers.tasks.embedding",
        "ragcore.workers.tasks.ingestion",
        "ragcore.workers.tasks.reembedding",
    ],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    result_serializer=celery_config.result_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    task_max_retries=celery_config.task_max_retries,
    task_always_eager=celery_config.task_always_eager,
)
