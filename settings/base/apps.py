DJANGO_APPs = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
]

EXTERNAL_APPS = [
    "rest_framework",
    "drf_spectacular",
    "django_celery_results",
]

INSTALLED_APPS = DJANGO_APPs + EXTERNAL_APPS
