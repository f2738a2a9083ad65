"""
Disks for storing exported files.

Disks are named in ``settings.EXPORTER_DISKS``:

    EXPORTER_DISKS = {
        "local": {"driver": "local", "root": "exports"},
        "s3": {"driver": "s3", "bucket": "my-bucket", "prefix": "exports"},
    }
"""

import logging
import os

import boto3
from botocore.exceptions import ClientError
from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import FileSystemStorage
from storages.backends.s3boto3 import S3Boto3Storage

from .constants import DRIVER_LOCAL, DRIVER_S3, LOCAL_FILE_PERMISSIONS, S3_ACLS
from .exceptions import InvalidDiskError

logger = logging.getLogger(__name__)


class Disk:
    """
    Base class for disks.
    """

    def __init__(self, name, config):
        self.name = name
        self.config = config

    def put(self, file_path, content, options=None):
        """
        Write content to the disk.

        Args:
            file_path: Path of the file on the disk
            content: File content (bytes or file-like)
            options: Disk options such as ``{"visibility": "private"}``

        Returns:
            str: Stored path
        """
        raise NotImplementedError

    def url(self, file_path):
        """Get a URL for a stored file."""
        raise NotImplementedError


def _read(content):
    if hasattr(content, "read"):
        return content.read()
    return content


class LocalDisk(Disk):
    """
    Local filesystem disk rooted below MEDIA_ROOT.

    Files are written to the exact path; an existing file is replaced.
    """

    def __init__(self, name, config):
        super().__init__(name, config)
        self.root = config.get("root", "exports")

        media_root = getattr(settings, "MEDIA_ROOT", "media")
        self.location = os.path.join(media_root, self.root)
        self.base_url = f"{getattr(settings, 'MEDIA_URL', '/media/')}{self.root}/"

    def get_storage(self, options=None):
        options = options or {}
        permissions = LOCAL_FILE_PERMISSIONS.get(options.get("visibility"))
        ignored = set(options) - {"visibility"}
        if ignored:
            logger.debug(f"Local disk {self.name} ignores options: {', '.join(sorted(ignored))}")
        return FileSystemStorage(
            location=self.location,
            base_url=self.base_url,
            file_permissions_mode=permissions,
            allow_overwrite=True,
        )

    def put(self, file_path, content, options=None):
        storage = self.get_storage(options)
        return storage.save(file_path, ContentFile(_read(content)))

    def url(self, file_path):
        return self.get_storage().url(file_path)


class S3Disk(Disk):
    """
    AWS S3 disk.

    Saves through django-storages and signs download URLs with boto3.
    ``visibility`` maps to the object ACL; other options are sent as object
    parameters (e.g. ``ContentType``, ``CacheControl``).
    """

    def __init__(self, name, config):
        super().__init__(name, config)
        self.bucket_name = (
            config.get("bucket")
            or getattr(settings, "EXPORTER_S3_BUCKET_NAME", None)
            or getattr(settings, "AWS_STORAGE_BUCKET_NAME", None)
        )
        self.prefix = config.get("prefix", "")
        self.signed_url_expire = config.get("url_expire", getattr(settings, "EXPORTER_S3_SIGNED_URL_EXPIRE", 3600))

    def get_storage(self, options=None):
        options = dict(options or {})
        visibility = options.pop("visibility", None)
        return S3Boto3Storage(
            bucket_name=self.bucket_name,
            location=self.prefix,
            default_acl=S3_ACLS.get(visibility),
            object_parameters=options,
            file_overwrite=True,
        )

    def get_client(self):
        return boto3.client(
            "s3",
            aws_access_key_id=getattr(settings, "AWS_ACCESS_KEY_ID", None) or None,
            aws_secret_access_key=getattr(settings, "AWS_SECRET_ACCESS_KEY", None) or None,
            region_name=getattr(settings, "AWS_REGION_NAME", None) or None,
        )

    def put(self, file_path, content, options=None):
        return self.get_storage(options).save(file_path, ContentFile(_read(content)))

    def url(self, file_path):
        s3_key = f"{self.prefix}/{file_path}" if self.prefix else file_path
        try:
            return self.get_client().generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": s3_key},
                ExpiresIn=self.signed_url_expire,
            )
        except ClientError as e:
            logger.warning(f"Failed to sign S3 URL for {s3_key}: {e}")
            return self.get_storage().url(file_path)


DRIVERS = {
    DRIVER_LOCAL: LocalDisk,
    DRIVER_S3: S3Disk,
}


def get_disk(name=None):
    """
    Get a configured disk.

    Args:
        name: Disk name; the configured default disk when None

    Returns:
        Disk: Disk instance

    Raises:
        InvalidDiskError: If the disk or its driver is unknown
    """
    if name is None:
        name = getattr(settings, "EXPORTER_DEFAULT_DISK", DRIVER_LOCAL)

    config = getattr(settings, "EXPORTER_DISKS", {}).get(name)
    if config is None:
        raise InvalidDiskError(name)

    disk_class = DRIVERS.get(config.get("driver"))
    if disk_class is None:
        raise InvalidDiskError(f"{name} (driver {config.get('driver')!r})")

    return disk_class(name, config)
