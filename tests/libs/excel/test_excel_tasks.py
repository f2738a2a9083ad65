"""
Tests for queued exports and progress tracking.
"""

import os
import shutil
import tempfile
from unittest.mock import MagicMock, patch

from django.core.cache import cache
from django.test import SimpleTestCase, override_settings

from libs.excel import ExportProgressTracker, FromArray, WithHeadings, get_progress
from libs.excel.constants import CSV, PROGRESS_EXPIRE_SECONDS, PROGRESS_KEY_PREFIX
from libs.excel.tasks import store_export_task


class NumbersExport(FromArray, WithHeadings):
    def array(self):
        return [[n] for n in range(5)]

    def headings(self):
        return ["Number"]


class ExportProgressTrackerTests(SimpleTestCase):
    """Test cases for ExportProgressTracker."""

    def setUp(self):
        cache.clear()
        self.celery_task = MagicMock()
        self.tracker = ExportProgressTracker(task_id="task-123", celery_task=self.celery_task)

    def tearDown(self):
        cache.clear()

    def test_start(self):
        self.tracker.start(1000)

        progress = cache.get(f"{PROGRESS_KEY_PREFIX}task-123")
        self.assertEqual(progress["status"], "PROGRESS")
        self.assertEqual(progress["total_rows"], 1000)
        self.assertEqual(progress["processed_rows"], 0)
        self.assertEqual(progress["percent"], 0)
        self.celery_task.update_state.assert_called_once()

    def test_advance(self):
        self.tracker.start(1000)
        self.tracker.advance(250)
        self.tracker.advance(250)

        progress = get_progress("task-123")
        self.assertEqual(progress["processed_rows"], 500)
        self.assertEqual(progress["percent"], 50)
        self.assertIn("speed_rows_per_sec", progress)

        _, kwargs = self.celery_task.update_state.call_args
        self.assertEqual(kwargs["state"], "PROGRESS")
        self.assertEqual(kwargs["meta"]["processed_rows"], 500)

    def test_unknown_total(self):
        self.tracker.start(None)
        self.tracker.advance(10)

        progress = get_progress("task-123")
        self.assertEqual(progress["total_rows"], 0)
        self.assertEqual(progress["percent"], 0)
        self.assertNotIn("eta_seconds", progress)

    def test_complete(self):
        self.tracker.start(10)
        self.tracker.advance(4)
        self.tracker.complete(file_path="a.csv", file_url="/media/exports/a.csv", disk="local")

        progress = get_progress("task-123")
        self.assertEqual(progress["status"], "SUCCESS")
        self.assertEqual(progress["percent"], 100)
        self.assertEqual(progress["processed_rows"], 10)
        self.assertEqual(progress["file_path"], "a.csv")
        self.assertEqual(progress["disk"], "local")

    def test_fail(self):
        self.tracker.start(10)
        self.tracker.fail("disk full")

        progress = get_progress("task-123")
        self.assertEqual(progress["status"], "FAILURE")
        self.assertEqual(progress["error"], "disk full")

    @patch("libs.excel.progress.cache")
    def test_cache_errors_do_not_interrupt(self, mock_cache):
        mock_cache.set.side_effect = ConnectionError("redis down")
        mock_cache.get.side_effect = ConnectionError("redis down")

        self.tracker.start(10)
        self.tracker.advance(5)

        self.assertIsNone(get_progress("task-123"))
        self.assertEqual(self.tracker.processed_rows, 5)

    def test_celery_errors_do_not_interrupt(self):
        self.celery_task.update_state.side_effect = RuntimeError("no backend")

        self.tracker.start(10)

        self.assertIsNotNone(get_progress("task-123"))

    @patch("libs.excel.progress.cache")
    def test_cache_timeout(self, mock_cache):
        self.tracker.start(1)

        _, kwargs = mock_cache.set.call_args
        self.assertEqual(kwargs["timeout"], PROGRESS_EXPIRE_SECONDS)


class StoreExportTaskTests(SimpleTestCase):
    def setUp(self):
        cache.clear()
        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)
        override = override_settings(
            MEDIA_ROOT=self.media_root,
            MEDIA_URL="/media/",
            EXPORTER_DEFAULT_DISK="local",
            EXPORTER_DISKS={"local": {"driver": "local", "root": "exports"}},
            EXPORTER_CHUNK_SIZE=2,
        )
        override.enable()
        self.addCleanup(override.disable)

    def test_stores_export_and_reports_progress(self):
        result = store_export_task.apply(
            args=(NumbersExport(), "numbers.csv", None, CSV, {"visibility": "private"}),
            task_id="task-ok",
        ).get()

        self.assertEqual(
            result,
            {
                "status": "success",
                "file_path": "numbers.csv",
                "file_url": "/media/exports/numbers.csv",
                "disk": "local",
            },
        )
        with open(os.path.join(self.media_root, "exports", "numbers.csv"), "rb") as f:
            self.assertEqual(f.read(), b"Number\n0\n1\n2\n3\n4\n")

        progress = get_progress("task-ok")
        self.assertEqual(progress["status"], "SUCCESS")
        self.assertEqual(progress["total_rows"], 5)
        self.assertEqual(progress["processed_rows"], 5)
        self.assertEqual(progress["file_url"], "/media/exports/numbers.csv")

    @patch("libs.excel.tasks.get_exporter")
    def test_failure_is_recorded_and_raised(self, mock_get_exporter):
        mock_get_exporter.return_value.store.side_effect = OSError("disk full")

        with self.assertRaises(OSError):
            store_export_task.apply(args=(NumbersExport(), "numbers.csv", None, CSV, {}), task_id="task-ko", throw=True)

        progress = get_progress("task-ko")
        self.assertEqual(progress["status"], "FAILURE")
        self.assertEqual(progress["error"], "disk full")
