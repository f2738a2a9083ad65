"""
Exporter: generates export files and delivers them.
"""

import logging

from django.conf import settings
from django.utils.module_loading import import_string

from .responses import download_response
from .storage import get_disk
from .writers import detect_writer_type, get_writer

logger = logging.getLogger(__name__)

DEFAULT_EXPORTER_CLASS = "libs.excel.exporter.Exporter"


class Exporter:
    """
    Delivers exports as a download, raw bytes, a stored file or a queued job.

    Arguments reaching the exporter are already resolved; see
    ``libs.excel.config``.
    """

    def __init__(self, writer_factory=None, disk_resolver=None):
        """
        Initialize exporter.

        Args:
            writer_factory: Callable ``(writer_type, **kwargs) -> writer``
            disk_resolver: Callable ``(disk_name) -> Disk``
        """
        self.writer_factory = writer_factory or get_writer
        self.disk_resolver = disk_resolver or get_disk

    def download(self, export, file_name, writer_type=None, headers=None):
        writer_type = detect_writer_type(file_name, writer_type)
        content = self.raw(export, writer_type)
        return download_response(content, file_name, writer_type, headers)

    def raw(self, export, writer_type, progress_callback=None) -> bytes:
        writer = self.writer_factory(writer_type, progress_callback=progress_callback)
        return writer.write(export)

    def store(self, export, file_path, disk=None, writer_type=None, disk_options=None, progress_callback=None):
        """
        Generate the export and write it to a disk.

        Returns:
            str: Stored path
        """
        writer_type = detect_writer_type(file_path, writer_type)
        target = self.disk_resolver(disk)
        content = self.raw(export, writer_type, progress_callback=progress_callback)

        stored_path = target.put(file_path, content, disk_options or {})
        logger.info(f"Stored {writer_type} export {type(export).__name__} at {target.name}:{stored_path}")
        return stored_path

    def queue(self, export, file_path, disk=None, writer_type=None, disk_options=None):
        """
        Store the export in a Celery worker.

        The writer type is detected before dispatch so an unknown extension
        fails in the caller.

        Returns:
            AsyncResult: Handle of the queued task
        """
        from .tasks import store_export_task

        writer_type = detect_writer_type(file_path, writer_type)
        result = store_export_task.apply_async(
            args=(export, file_path, disk, writer_type, disk_options or {}),
            queue=getattr(settings, "EXPORTER_QUEUE", None),
        )
        logger.info(f"Queued {writer_type} export {type(export).__name__} to {file_path}")
        return result


def get_exporter():
    """Instantiate the exporter class configured in ``settings.EXPORTER_CLASS``."""
    exporter_class = import_string(getattr(settings, "EXPORTER_CLASS", DEFAULT_EXPORTER_CLASS))
    return exporter_class()
