"""
Export concerns.

An export is a plain class that mixes in ``Exportable`` for delivery and one
or more data concerns describing what to write.

Usage:
    class UsersExport(Exportable, FromQuery, WithHeadings, WithMapping):
        file_name = "users.xlsx"
        disk = "s3"
        disk_options = {"visibility": "private"}

        def query(self):
            return User.objects.filter(is_active=True)

        def headings(self):
            return ["Username", "Email"]

        def map(self, user):
            return [user.username, user.email]

    UsersExport().download()
    UsersExport().store("exports/users.csv")
    UsersExport().queue("exports/users.xlsx")
"""

from typing import Optional, Protocol, runtime_checkable

from .config import ExportDefaults, ExportRequest, resolve_download, resolve_raw, resolve_store


@runtime_checkable
class Responsable(Protocol):
    """Object that can turn itself into an HTTP response for a request."""

    def to_response(self, request): ...


class Exportable:
    """
    Delivery capability for export objects.

    Subclasses override the class attributes below to declare defaults.
    Every one of them starts unset.
    """

    file_name: Optional[str] = None
    file_path: Optional[str] = None
    writer_type: Optional[str] = None
    disk: Optional[str] = None
    disk_options: Optional[dict] = None
    headers: Optional[dict] = None

    def get_file_name(self) -> Optional[str]:
        """Compute a download file name. Consulted only when none is declared."""
        return None

    def export_defaults(self) -> ExportDefaults:
        return ExportDefaults(
            file_name=self.file_name,
            file_path=self.file_path,
            writer_type=self.writer_type,
            disk=self.disk,
            disk_options=self.disk_options,
            headers=self.headers,
        )

    def get_exporter(self):
        from .exporter import get_exporter

        return get_exporter()

    def download(self, file_name=None, writer_type=None, headers=None):
        """
        Generate the export and return it as an attachment response.

        Raises:
            MissingFileNameError: If no file name is given, declared or computed
        """
        config = resolve_download(
            ExportRequest(file_name=file_name, writer_type=writer_type, headers=headers),
            self.export_defaults(),
            self.get_file_name,
        )
        return self.get_exporter().download(self, config.file_name, config.writer_type, config.headers)

    def store(self, file_path=None, disk=None, writer_type=None, disk_options=None):
        """
        Generate the export and write it to a disk.

        Returns:
            str: Path of the stored file

        Raises:
            MissingFilePathError: If no file path is given or declared
        """
        config = resolve_store(
            ExportRequest(file_name=file_path, writer_type=writer_type, disk=disk, disk_options=disk_options),
            self.export_defaults(),
        )
        return self.get_exporter().store(self, config.file_name, config.disk, config.writer_type, config.disk_options)

    def queue(self, file_path=None, disk=None, writer_type=None, disk_options=None):
        """
        Store the export in the background.

        Returns:
            AsyncResult: Handle of the queued Celery task

        Raises:
            MissingFilePathError: If no file path is given or declared
        """
        config = resolve_store(
            ExportRequest(file_name=file_path, writer_type=writer_type, disk=disk, disk_options=disk_options),
            self.export_defaults(),
        )
        return self.get_exporter().queue(self, config.file_name, config.disk, config.writer_type, config.disk_options)

    def raw(self, writer_type=None) -> bytes:
        """Generate the export and return the file contents."""
        return self.get_exporter().raw(self, resolve_raw(writer_type, self.export_defaults()))

    def to_response(self, request):
        return self.download()


class FromCollection:
    """Rows come from ``collection()``."""

    def collection(self):
        raise NotImplementedError


class FromArray:
    """Rows come from ``array()``."""

    def array(self):
        raise NotImplementedError


class FromQuery:
    """Rows come from the Django QuerySet returned by ``query()``."""

    def query(self):
        raise NotImplementedError


class WithHeadings:
    """``headings()`` returns one heading row or a list of heading rows."""

    def headings(self):
        raise NotImplementedError


class WithMapping:
    """``map(row)`` returns one output row or a list of output rows."""

    def map(self, row):
        raise NotImplementedError


class WithTitle:
    def title(self) -> str:
        raise NotImplementedError


class WithMultipleSheets:
    """``sheets()`` returns one export object per worksheet."""

    def sheets(self):
        raise NotImplementedError


class WithCustomCsvSettings:
    """
    ``get_csv_settings()`` overrides the configured CSV settings.

    Supported keys: delimiter, enclosure, line_ending, use_bom,
    include_separator_line, output_encoding.
    """

    def get_csv_settings(self) -> dict:
        raise NotImplementedError


class WithGroupedHeadings:
    """``heading_groups()`` returns ``[{"title": str, "span": int}, ...]`` written above the headings."""

    def heading_groups(self):
        raise NotImplementedError


class WithMergedColumns:
    """``merge_columns()`` returns 0-based columns whose equal consecutive values are merged."""

    def merge_columns(self):
        raise NotImplementedError


class ShouldAutoSize:
    """Marker: size columns to their content."""
