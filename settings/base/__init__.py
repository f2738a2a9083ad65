# ruff: noqa

from .base import *
from .apps import *
from .aws import *
from .cache import *
from .celery import *
from .database import *
from .drf import *
from .internationalization import *
from .logging import *
from .middleware import *
from .storage import *
from .export import *
