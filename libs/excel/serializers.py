"""
Response serializers for export API documentation.

These serializers are used only by drf-spectacular to describe responses.
"""

from rest_framework import serializers


class ExportLinkResponseSerializer(serializers.Serializer):
    """Response for link delivery."""

    url = serializers.CharField(help_text="URL for downloading the stored file")
    file_path = serializers.CharField(help_text="Path of the file on the disk")
    disk = serializers.CharField(help_text="Disk the file was stored on")


class ExportAsyncResponseSerializer(serializers.Serializer):
    """Response for a queued export."""

    task_id = serializers.CharField(help_text="Celery task ID for tracking export progress")
    status = serializers.CharField(help_text="Task status (PENDING)")
    message = serializers.CharField(help_text="Human-readable message with instructions")


class ExportStatusResponseSerializer(serializers.Serializer):
    """Response for export status check."""

    task_id = serializers.CharField(help_text="Celery task ID")
    status = serializers.CharField(help_text="Task status (PENDING, PROGRESS, SUCCESS, FAILURE)")
    file_url = serializers.CharField(required=False, allow_null=True, help_text="Download URL (SUCCESS)")
    file_path = serializers.CharField(required=False, allow_null=True, help_text="Path on the disk (SUCCESS)")
    disk = serializers.CharField(required=False, allow_null=True, help_text="Disk name (SUCCESS)")
    error = serializers.CharField(required=False, allow_null=True, help_text="Error message (FAILURE)")
    percent = serializers.IntegerField(required=False, allow_null=True, help_text="Progress percentage (0-100)")
    processed_rows = serializers.IntegerField(required=False, allow_null=True)
    total_rows = serializers.IntegerField(required=False, allow_null=True)
    speed_rows_per_sec = serializers.FloatField(required=False, allow_null=True)
    eta_seconds = serializers.FloatField(required=False, allow_null=True)
    updated_at = serializers.CharField(required=False, allow_null=True, help_text="Last update (ISO format)")
