"""
This configuration file overrides some necessary configs
to easily develop the app.
"""

from .base import *  # noqa

INSTALLED_APPS += [  # NOQA
    "django.contrib.staticfiles",  # for API admin in local
]

ALLOWED_HOSTS = ["*"]

INTERNAL_IPS = ["127.0.0.1"]

DEBUG = True

STATIC_ROOT = "staticfiles"

# Store local exports next to the project instead of S3
STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
}
