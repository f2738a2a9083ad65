"""
Celery tasks for queued exports.
"""

import logging

from celery import shared_task

from .exporter import get_exporter
from .progress import ExportProgressTracker
from .sheets import SheetBuilder
from .storage import get_disk

logger = logging.getLogger(__name__)


@shared_task(bind=True, name="excel.store_export")
def store_export_task(self, export, file_path, disk=None, writer_type=None, disk_options=None):
    """
    Generate an export and write it to a disk, reporting progress.

    The export object arrives pickled (see CELERY_TASK_SERIALIZER), so export
    classes must be importable by the worker.

    Args:
        export: Export object
        file_path: Path on the disk
        disk: Disk name; the default disk when None
        writer_type: Resolved writer type
        disk_options: Disk options

    Returns:
        dict: status, file_path, file_url and disk
    """
    tracker = ExportProgressTracker(task_id=self.request.id, celery_task=self)

    try:
        total_rows = sum(sheet["total_rows"] or 0 for sheet in SheetBuilder().build(export, count_rows=True))
        tracker.start(total_rows)

        stored_path = get_exporter().store(
            export,
            file_path,
            disk,
            writer_type,
            disk_options,
            progress_callback=tracker.advance,
        )
        target = get_disk(disk)
        file_url = target.url(stored_path)
    except Exception as e:
        logger.exception(f"Queued export to {file_path} failed")
        tracker.fail(str(e))
        raise

    result = {
        "status": "success",
        "file_path": stored_path,
        "file_url": file_url,
        "disk": target.name,
    }
    tracker.complete(file_path=stored_path, file_url=file_url, disk=target.name)
    return result
