"""
This configuration file overrides some necessary configs
to allow running unittests.
"""

import tempfile
import warnings

from .base import *  # noqa

warnings.simplefilter("ignore", category=RuntimeWarning)


ENVIRONMENT = "test"

ALLOWED_HOSTS = ["*"]

INTERNAL_IPS = ["127.0.0.1"]

CELERY_TASK_ALWAYS_EAGER = False

# Use in-memory SQLite database for tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Use local memory cache for tests to avoid Redis dependency
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "test-cache",
    },
}

LANGUAGE_CODE = "en"

DEBUG = False

# Use fast password hasher in tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Disable logging in tests to improve performance
LOGGING = {
    "version": 1,
    "disable_existing_loggers": True,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "root": {
        "handlers": ["null"],
    },
}

# Exports written by tests never leave a temporary directory
MEDIA_ROOT = tempfile.mkdtemp(prefix="excel-export-tests-")

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
}

EXPORTER_DEFAULT_DISK = "local"
EXPORTER_RESPONSE_HEADERS = {}
