"""
Celery application.

Workers start with ``celery -A celery_tasks worker``.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "settings")

celery_app = Celery("excel_export")
celery_app.config_from_object("django.conf:settings", namespace="CELERY")
celery_app.autodiscover_tasks(lambda: ["libs.excel"])
