"""
Constants for the Excel export module.
"""

# Writer types
XLSX = "Xlsx"
CSV = "Csv"
TSV = "Tsv"

WRITER_TYPES = (XLSX, CSV, TSV)

# File extension -> writer type (matched case-insensitively)
EXTENSION_WRITER_TYPES = {
    "xlsx": XLSX,
    "csv": CSV,
    "tsv": TSV,
}

CONTENT_TYPES = {
    XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    CSV: "text/csv",
    TSV: "text/tab-separated-values",
}

# Fields skipped when a query export has no mapping of its own
DEFAULT_EXCLUDED_FIELDS = {
    "id",
    "created_at",
    "updated_at",
    "created_by",
    "updated_by",
    "deleted_at",
    "is_deleted",
}

# Sheets
DEFAULT_SHEET_TITLE = "Worksheet"
MAX_SHEET_TITLE_LENGTH = 31

# Styling
DEFAULT_HEADER_FONT_SIZE = 11
DEFAULT_HEADER_FONT_BOLD = True
DEFAULT_HEADER_BG_COLOR = "D3D3D3"  # Light gray
DEFAULT_HEADER_ALIGNMENT = "center"
MAX_AUTO_SIZE_WIDTH = 50

# CSV defaults, overridden by settings.EXPORTER_CSV and WithCustomCsvSettings
DEFAULT_CSV_SETTINGS = {
    "delimiter": ",",
    "enclosure": '"',
    "line_ending": "\n",
    "use_bom": False,
    "include_separator_line": False,
    "output_encoding": "utf-8",
}

# Disks
DRIVER_LOCAL = "local"
DRIVER_S3 = "s3"

VISIBILITY_PUBLIC = "public"
VISIBILITY_PRIVATE = "private"

LOCAL_FILE_PERMISSIONS = {
    VISIBILITY_PUBLIC: 0o644,
    VISIBILITY_PRIVATE: 0o600,
}

S3_ACLS = {
    VISIBILITY_PUBLIC: "public-read",
    VISIBILITY_PRIVATE: "private",
}

# Delivery modes for the ViewSet export action
DELIVERY_DIRECT = "direct"
DELIVERY_LINK = "link"

# Progress tracking
DEFAULT_CHUNK_SIZE = 500  # Report progress every N rows
PROGRESS_KEY_PREFIX = "excel:export:progress:"
PROGRESS_EXPIRE_SECONDS = 60 * 60 * 24  # 24 hours

# Celery task states
TASK_STATE_PENDING = "PENDING"
TASK_STATE_PROGRESS = "PROGRESS"
TASK_STATE_SUCCESS = "SUCCESS"
TASK_STATE_FAILURE = "FAILURE"

# Error messages
ERROR_NO_FILENAME = "A filename needs to be passed in order to download the export"
ERROR_NO_FILEPATH = "A filepath needs to be passed in order to store the export"
ERROR_NO_WRITER_TYPE = (
    "No WriterType could be detected. Make sure you either pass a valid extension "
    "to the filename or pass an explicit type."
)
ERROR_UNSUPPORTED_WRITER_TYPE = "Unsupported writer type"
ERROR_INVALID_DISK = "Invalid export disk"
