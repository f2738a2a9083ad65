"""
Download responses for generated exports.
"""

from pathlib import Path

from django.conf import settings
from django.http import FileResponse, HttpResponse

from .constants import CONTENT_TYPES


def download_response(content, file_name, writer_type, headers=None):
    """
    Wrap export content in an attachment response.

    Header precedence, lowest first: content type of the writer type,
    ``settings.EXPORTER_RESPONSE_HEADERS``, Content-Disposition, then the
    custom ``headers``.

    Args:
        content: bytes, a binary file-like object, or a Path to a file
        file_name: Name sent in Content-Disposition, used verbatim
        writer_type: Writer type of the content
        headers: Custom headers; they override computed ones

    Returns:
        HttpResponse: FileResponse for paths, HttpResponse otherwise
    """
    content_type = CONTENT_TYPES.get(writer_type, "application/octet-stream")

    if isinstance(content, Path):
        response = FileResponse(content.open("rb"), content_type=content_type)
    else:
        if hasattr(content, "read"):
            content = content.read()
        response = HttpResponse(content, content_type=content_type)

    for name, value in getattr(settings, "EXPORTER_RESPONSE_HEADERS", {}).items():
        response[name] = value

    response["Content-Disposition"] = f"attachment; filename={file_name}"

    for name, value in (headers or {}).items():
        response[name] = value

    return response
