from .base import config

# AWS common settings
AWS_ACCESS_KEY_ID = config("AWS_ACCESS_KEY_ID", default="")
AWS_SECRET_ACCESS_KEY = config("AWS_SECRET_ACCESS_KEY", default="")
AWS_STORAGE_BUCKET_NAME = config("AWS_STORAGE_BUCKET_NAME", default="")
AWS_REGION_NAME = config("AWS_REGION_NAME", default="")

# S3 settings
AWS_S3_REGION_NAME = AWS_REGION_NAME
AWS_QUERYSTRING_AUTH = False
