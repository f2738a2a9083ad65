"""
Configuration resolution for export delivery.

Call-site arguments always win over the defaults an export object declares,
and declared defaults win over "unset". Resolution is pure: nothing here
touches a disk, a queue or a writer.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from .exceptions import MissingFileNameError, MissingFilePathError, WriterTypeNotDetectedError


@dataclass(frozen=True)
class ExportRequest:
    """Arguments given at the call site. ``None`` means "not given"."""

    file_name: Optional[str] = None
    writer_type: Optional[str] = None
    disk: Optional[str] = None
    disk_options: Optional[dict] = None
    headers: Optional[dict] = None


@dataclass(frozen=True)
class ExportDefaults:
    """Fallback values declared on an export object."""

    file_name: Optional[str] = None
    file_path: Optional[str] = None
    writer_type: Optional[str] = None
    disk: Optional[str] = None
    disk_options: Optional[dict] = None
    headers: Optional[dict] = None


@dataclass(frozen=True)
class ResolvedConfiguration:
    """Result of merging an ExportRequest over ExportDefaults."""

    file_name: str
    writer_type: Optional[str] = None
    disk: Optional[str] = None
    disk_options: dict = field(default_factory=dict)
    headers: dict = field(default_factory=dict)


def _first_set(*values):
    for value in values:
        if value is not None:
            return value
    return None


def resolve_download(
    request: ExportRequest,
    defaults: ExportDefaults,
    file_name_callback: Optional[Callable[[], Optional[str]]] = None,
) -> ResolvedConfiguration:
    """
    Resolve configuration for a download.

    Args:
        request: Call-site arguments
        defaults: Export object defaults
        file_name_callback: Optional callable consulted when neither the call
            site nor the export object names a file

    Returns:
        ResolvedConfiguration: Configuration with a file name and headers

    Raises:
        MissingFileNameError: If no file name can be resolved
    """
    file_name = _first_set(request.file_name, defaults.file_name)
    if file_name is None and file_name_callback is not None:
        file_name = file_name_callback()

    if not file_name:
        raise MissingFileNameError()

    headers = _first_set(request.headers, defaults.headers, {})

    return ResolvedConfiguration(
        file_name=file_name,
        writer_type=_first_set(request.writer_type, defaults.writer_type),
        headers=dict(headers),
    )


def resolve_store(request: ExportRequest, defaults: ExportDefaults) -> ResolvedConfiguration:
    """
    Resolve configuration for storing or queueing an export.

    Disk options are replaced as a whole: an explicit empty mapping is kept
    and does not fall back to the export object's options.

    Args:
        request: Call-site arguments (``file_name`` holds the target path)
        defaults: Export object defaults

    Returns:
        ResolvedConfiguration: Configuration with path, disk, writer type and options

    Raises:
        MissingFilePathError: If no file path can be resolved
    """
    file_path = _first_set(request.file_name, defaults.file_path)
    if not file_path:
        raise MissingFilePathError()

    disk_options = _first_set(request.disk_options, defaults.disk_options, {})

    return ResolvedConfiguration(
        file_name=file_path,
        writer_type=_first_set(request.writer_type, defaults.writer_type),
        disk=_first_set(request.disk, defaults.disk),
        disk_options=dict(disk_options),
    )


def resolve_raw(writer_type: Optional[str], defaults: ExportDefaults) -> str:
    """Resolve the writer type for raw output, which has no file name to infer from."""
    resolved = _first_set(writer_type, defaults.writer_type)
    if resolved is None:
        raise WriterTypeNotDetectedError()
    return resolved
