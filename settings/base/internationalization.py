"""Internationalization settings.
https://docs.djangoproject.com/en/5.1/topics/i18n/
"""

from .base import config

LANGUAGE_CODE = "en"
TIME_ZONE = config("TIME_ZONE", default="UTC")
USE_I18N = True
USE_TZ = True
