from .aws import AWS_STORAGE_BUCKET_NAME
from .base import config

# Export delivery settings
EXPORTER_CLASS = "libs.excel.exporter.Exporter"
EXPORTER_CELERY_ENABLED = config("EXPORTER_CELERY_ENABLED", default=False, cast=bool)
EXPORTER_QUEUE = config("EXPORTER_QUEUE", default="default")
EXPORTER_DEFAULT_DELIVERY = config("EXPORTER_DEFAULT_DELIVERY", default="direct")  # 'direct' or 'link'
EXPORTER_CHUNK_SIZE = config("EXPORTER_CHUNK_SIZE", default=500, cast=int)

# Disks
EXPORTER_DEFAULT_DISK = config("EXPORTER_DEFAULT_DISK", default="local")
EXPORTER_S3_BUCKET_NAME = config("EXPORTER_S3_BUCKET_NAME", default="") or AWS_STORAGE_BUCKET_NAME
EXPORTER_S3_SIGNED_URL_EXPIRE = config("EXPORTER_S3_SIGNED_URL_EXPIRE", default=3600, cast=int)
EXPORTER_DISKS = {
    "local": {
        "driver": "local",
        "root": "exports",  # Relative to MEDIA_ROOT
    },
    "s3": {
        "driver": "s3",
        "bucket": EXPORTER_S3_BUCKET_NAME,
        "prefix": config("EXPORTER_S3_PREFIX", default="exports"),
    },
}

# Headers added to every download response, below the per-export headers
EXPORTER_RESPONSE_HEADERS = {
    "Cache-Control": "no-store",
}

EXPORTER_CSV = {
    "delimiter": config("EXPORTER_CSV_DELIMITER", default=","),
    "enclosure": '"',
    "line_ending": "\n",
    "use_bom": config("EXPORTER_CSV_USE_BOM", default=False, cast=bool),
    "include_separator_line": False,
    "output_encoding": "utf-8",
}
