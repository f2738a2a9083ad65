"""
Progress tracking for queued exports.
"""

import logging
from datetime import datetime
from typing import Optional

from django.core.cache import cache

from .constants import (
    PROGRESS_EXPIRE_SECONDS,
    PROGRESS_KEY_PREFIX,
    TASK_STATE_FAILURE,
    TASK_STATE_PROGRESS,
    TASK_STATE_SUCCESS,
)

logger = logging.getLogger(__name__)


def progress_key(task_id: str) -> str:
    return f"{PROGRESS_KEY_PREFIX}{task_id}"


class ExportProgressTracker:
    """
    Publishes export progress to the cache and to Celery task meta.

    Publishing failures are logged and never interrupt the export.
    """

    def __init__(self, task_id: str, celery_task=None):
        """
        Args:
            task_id: Celery task ID
            celery_task: Bound Celery task, used for ``update_state``
        """
        self.task_id = task_id
        self.celery_task = celery_task
        self.cache_key = progress_key(task_id)
        self.total_rows = 0
        self.processed_rows = 0
        self.started_at: Optional[datetime] = None

    def start(self, total_rows: Optional[int]) -> None:
        """Reset counters; an unknown total is reported as 0."""
        self.total_rows = total_rows or 0
        self.processed_rows = 0
        self.started_at = datetime.now()
        self._publish(self.snapshot(), celery=True)

    def advance(self, rows: int) -> None:
        self.processed_rows += rows
        self._publish(self.snapshot(), celery=True)

    def complete(self, **result) -> None:
        """Mark as succeeded; ``result`` (file path, URL, disk) is stored alongside."""
        if self.processed_rows > self.total_rows:
            self.total_rows = self.processed_rows
        self.processed_rows = self.total_rows
        data = self.snapshot(status=TASK_STATE_SUCCESS)
        data["percent"] = 100
        data.update(result)
        self._publish(data)

    def fail(self, error_message: str) -> None:
        data = self.snapshot(status=TASK_STATE_FAILURE)
        data["error"] = error_message
        self._publish(data)

    def snapshot(self, status: str = TASK_STATE_PROGRESS) -> dict:
        """
        Build the progress payload.

        Returns:
            dict: status, percent, processed_rows, total_rows, updated_at and,
            once rows are flowing, speed_rows_per_sec and eta_seconds
        """
        percent = 0
        if self.total_rows > 0:
            percent = min(100, int(self.processed_rows * 100 / self.total_rows))

        data = {
            "status": status,
            "percent": percent,
            "processed_rows": self.processed_rows,
            "total_rows": self.total_rows,
            "updated_at": datetime.now().isoformat(),
        }

        if self.started_at and self.processed_rows > 0:
            elapsed = (datetime.now() - self.started_at).total_seconds()
            if elapsed > 0:
                speed = self.processed_rows / elapsed
                data["speed_rows_per_sec"] = round(speed, 2)
                if self.total_rows > self.processed_rows:
                    data["eta_seconds"] = round((self.total_rows - self.processed_rows) / speed, 0)

        return data

    def _publish(self, data: dict, celery: bool = False) -> None:
        try:
            cache.set(self.cache_key, data, timeout=PROGRESS_EXPIRE_SECONDS)
        except Exception as e:
            logger.warning(f"Failed to publish export progress to cache: {e}")

        if celery and self.celery_task is not None:
            try:
                self.celery_task.update_state(state=TASK_STATE_PROGRESS, meta=data)
            except Exception as e:
                logger.warning(f"Failed to publish export progress to Celery: {e}")


def get_progress(task_id: str) -> Optional[dict]:
    """Read cached progress for a task, or None."""
    try:
        return cache.get(progress_key(task_id))
    except Exception as e:
        logger.warning(f"Failed to read export progress from cache: {e}")
        return None
