# planner/workers/tasks.py

from __future__ import annotations

import asyncio
from typing import Any, Dict

from celery import Celery
from celery.utils.log import get_task_logger

from planner.config import settings
from planner.core.errors import PlannerError
from planner.core.stats.schemas import EventChange
from planner.core.stats.service import TimeBucketService
from planner.db.base import async_session_context

log = get_task_logger(__name__)

celery_app = Celery(
    "planner",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=['planner.workers.tasks'],
    task_serializer='json',
    result_serializer='json',
    accept_content=['json'],
)
celery_app.conf.update(
    task_track_started=True,
    timezone='UTC',
    broker_connection_retry_on_startup=True,
)


# --- Async logic behind the task ---
async def _run_record_event_change(task_id: str, change: EventChange) -> str:
    log.info(
        "[record_event_change %s] user=%s was_completed=%s is_now_completed=%s",
        task_id, change.user_id, change.was_completed, change.is_now_completed,
    )
    async with async_session_context() as session:
        await TimeBucketService(session).handle_event_change(change)
    log.info("[record_event_change %s] time buckets updated for user %s", task_id, change.user_id)
    return f"UPDATED:{change.user_id}"


@celery_app.task(
    name="planner.workers.tasks.record_event_change_task",
    bind=True,
    autoretry_for=(Exception,),
    dont_autoretry_for=(ValueError, PlannerError),
    retry_kwargs={'max_retries': 3},
    retry_backoff=True,
    retry_backoff_max=60 * 5,
    retry_jitter=True,
)
def record_event_change_task(self, payload: Dict[str, Any]) -> str:
    """
    Update the label time buckets for one event change.

    ``payload`` is an ``EventChange`` in JSON form. A payload that does not
    validate, or that names an unknown label or timezone, fails without retry.
    """
    change = EventChange.model_validate(payload)
    return asyncio.run(_run_record_event_change(self.request.id, change))


__all__ = ["celery_app", "record_event_change_task"]
