from .excel import (
    CSV,
    TSV,
    XLSX,
    Exportable,
    Exporter,
    ExportProgressTracker,
    get_disk,
    get_exporter,
)

__all__ = [
    "CSV",
    "TSV",
    "XLSX",
    "Exportable",
    "Exporter",
    "ExportProgressTracker",
    "get_disk",
    "get_exporter",
]
