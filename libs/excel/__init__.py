"""
Spreadsheet export delivery.

Export objects mix in ``Exportable`` and a data concern, then are downloaded,
stored on a disk, queued, or rendered to raw bytes.
"""

from .concerns import (
    Exportable,
    FromArray,
    FromCollection,
    FromQuery,
    Responsable,
    ShouldAutoSize,
    WithCustomCsvSettings,
    WithGroupedHeadings,
    WithHeadings,
    WithMapping,
    WithMergedColumns,
    WithMultipleSheets,
    WithTitle,
)
from .constants import CSV, TSV, XLSX
from .exceptions import (
    ExcelExportError,
    InvalidDiskError,
    MissingFileNameError,
    MissingFilePathError,
    UnsupportedWriterTypeError,
    WriterTypeNotDetectedError,
)
from .exporter import Exporter, get_exporter
from .progress import ExportProgressTracker, get_progress
from .storage import get_disk
from .writers import detect_writer_type, get_writer

__all__ = [
    "CSV",
    "TSV",
    "XLSX",
    "Exportable",
    "Responsable",
    "FromArray",
    "FromCollection",
    "FromQuery",
    "ShouldAutoSize",
    "WithCustomCsvSettings",
    "WithGroupedHeadings",
    "WithHeadings",
    "WithMapping",
    "WithMergedColumns",
    "WithMultipleSheets",
    "WithTitle",
    "ExcelExportError",
    "InvalidDiskError",
    "MissingFileNameError",
    "MissingFilePathError",
    "UnsupportedWriterTypeError",
    "WriterTypeNotDetectedError",
    "Exporter",
    "get_exporter",
    "ExportProgressTracker",
    "get_progress",
    "get_disk",
    "detect_writer_type",
    "get_writer",
]
