"""
Global pytest configuration.

Celery is never reached from tests: ``.delay()`` and ``.apply_async()`` are
replaced unless CELERY_TASK_ALWAYS_EAGER is set, and the cache is forced to
local memory.
"""

from unittest.mock import MagicMock

import pytest


@pytest.fixture(autouse=True)
def mock_celery_tasks(monkeypatch, settings):
    """
    Mock Celery task dispatch to prevent broker connection attempts during tests.

    - If settings.CELERY_TASK_ALWAYS_EAGER is truthy: execute synchronously via
      Task.apply().
    - Otherwise dispatch is a no-op returning a MagicMock that stands in for
      an AsyncResult.

    Tests that need to verify task calls should use @patch at the test level.
    """

    def mock_delay(self, *args, **kwargs):
        if getattr(settings, "CELERY_TASK_ALWAYS_EAGER", False):
            return self.apply(args=args, kwargs=kwargs)

        return MagicMock()

    def mock_apply_async(self, args=None, kwargs=None, **options):
        if getattr(settings, "CELERY_TASK_ALWAYS_EAGER", False):
            return self.apply(args=args or (), kwargs=kwargs or {})

        return MagicMock()

    monkeypatch.setattr("celery.app.task.Task.delay", mock_delay)
    monkeypatch.setattr("celery.app.task.Task.apply_async", mock_apply_async)


@pytest.fixture(autouse=True)
def locmem_cache(settings):
    """Force local memory cache so progress tracking never needs Redis."""
    settings.CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "test-cache-fixture",
        },
    }
