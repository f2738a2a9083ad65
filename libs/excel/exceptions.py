"""Exception classes for export delivery."""

from .constants import (
    ERROR_INVALID_DISK,
    ERROR_NO_FILENAME,
    ERROR_NO_FILEPATH,
    ERROR_NO_WRITER_TYPE,
    ERROR_UNSUPPORTED_WRITER_TYPE,
)


class ExcelExportError(Exception):
    """Base class for export configuration errors."""

    default_message = "Export failed"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class MissingFileNameError(ExcelExportError):
    """Raised when a download has no file name to send."""

    default_message = ERROR_NO_FILENAME


class MissingFilePathError(ExcelExportError):
    """Raised when a store or queue call has no file path."""

    default_message = ERROR_NO_FILEPATH


class WriterTypeNotDetectedError(ExcelExportError):
    """Raised when neither an explicit type nor a known extension is available."""

    default_message = ERROR_NO_WRITER_TYPE


class UnsupportedWriterTypeError(ExcelExportError):
    """Raised when no writer is registered for a writer type."""

    def __init__(self, writer_type=None):
        message = ERROR_UNSUPPORTED_WRITER_TYPE
        if writer_type is not None:
            message = f"{ERROR_UNSUPPORTED_WRITER_TYPE}: {writer_type}"
        super().__init__(message)


class InvalidDiskError(ExcelExportError):
    """Raised when a disk name or driver is not configured."""

    def __init__(self, disk=None):
        message = ERROR_INVALID_DISK
        if disk is not None:
            message = f"{ERROR_INVALID_DISK}: {disk}"
        super().__init__(message)
