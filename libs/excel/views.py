"""
API views for export delivery.
"""

import posixpath

from celery.result import AsyncResult
from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext as _
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from .constants import DELIVERY_DIRECT, DELIVERY_LINK, TASK_STATE_FAILURE, TASK_STATE_PENDING, TASK_STATE_SUCCESS
from .exceptions import ExcelExportError, MissingFileNameError
from .progress import get_progress
from .serializers import ExportAsyncResponseSerializer, ExportLinkResponseSerializer, ExportStatusResponseSerializer
from .storage import get_disk


class ExportViewSetMixin:
    """
    Mixin for DRF ViewSets adding an ``export`` action.

    Usage:
        class UserViewSet(ExportViewSetMixin, ModelViewSet):
            queryset = User.objects.all()

            def get_export(self, request):
                return UsersExport(self.filter_queryset(self.get_queryset()))

    ``get_export`` returns an object mixing in ``Exportable`` with a file name.
    """

    export_disk = None

    def get_export(self, request):
        raise NotImplementedError("ViewSets using ExportViewSetMixin must implement get_export()")

    @extend_schema(
        summary="Export",
        description="Export data to a spreadsheet file. "
        "delivery=direct returns the file as an attachment, delivery=link stores it and returns a URL. "
        "async=true stores it in the background (requires EXPORTER_CELERY_ENABLED=true).",
        parameters=[
            OpenApiParameter(
                name="async",
                description="If 'true', store the export in the background using Celery",
                required=False,
                type=bool,
            ),
            OpenApiParameter(
                name="delivery",
                description="'direct' returns the file as an HTTP attachment; 'link' stores it and returns a URL.",
                required=False,
                type=str,
                enum=[DELIVERY_DIRECT, DELIVERY_LINK],
            ),
        ],
        responses={
            200: ExportLinkResponseSerializer,
            202: ExportAsyncResponseSerializer,
            400: OpenApiResponse(description="Bad request (invalid parameters or export configuration)"),
        },
        tags=["Export"],
    )
    @action(detail=False, methods=["get"], url_path="export")
    def export(self, request, *args, **kwargs):
        use_async = request.query_params.get("async", "false").lower() == "true"
        if use_async and not getattr(settings, "EXPORTER_CELERY_ENABLED", False):
            return Response({"error": _("Async export is not enabled")}, status=status.HTTP_400_BAD_REQUEST)

        delivery = request.query_params.get(
            "delivery", getattr(settings, "EXPORTER_DEFAULT_DELIVERY", DELIVERY_DIRECT)
        ).lower()
        if delivery not in (DELIVERY_LINK, DELIVERY_DIRECT):
            return Response(
                {"error": _("Invalid delivery parameter; allowed: link, direct")},
                status=status.HTTP_400_BAD_REQUEST,
            )

        export = self.get_export(request)
        try:
            if use_async:
                return self._queued_response(export)
            if delivery == DELIVERY_DIRECT:
                return export.download()
            return self._link_response(export)
        except ExcelExportError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

    def get_export_file_path(self, export):
        """Storage path for link and async delivery: the file name gets a timestamp prefix."""
        name = export.file_path or export.file_name or export.get_file_name()
        if not name:
            raise MissingFileNameError()
        directory, base_name = posixpath.split(name)
        return posixpath.join(directory, f"{timezone.now():%Y%m%d_%H%M%S}_{base_name}")

    def _export_disk_name(self, export):
        return self.export_disk if self.export_disk is not None else export.disk

    def _link_response(self, export):
        stored_path = export.store(self.get_export_file_path(export), self.export_disk)
        target = get_disk(self._export_disk_name(export))
        return Response(
            {"url": target.url(stored_path), "file_path": stored_path, "disk": target.name},
            status=status.HTTP_200_OK,
        )

    def _queued_response(self, export):
        result = export.queue(self.get_export_file_path(export), self.export_disk)
        return Response(
            {
                "task_id": result.id,
                "status": TASK_STATE_PENDING,
                "message": _("Export started. Check status at /api/export/status/?task_id={task_id}").format(
                    task_id=result.id
                ),
            },
            status=status.HTTP_202_ACCEPTED,
        )


class ExportStatusView(APIView):
    """
    Status of a queued export, including progress.
    """

    @extend_schema(
        summary="Check export task status",
        description="Status of a queued export with percentage, processed/total rows, speed and ETA.",
        parameters=[
            OpenApiParameter(
                name="task_id",
                description="Celery task ID returned when the export was queued",
                required=True,
                type=str,
            ),
        ],
        responses={
            200: ExportStatusResponseSerializer,
            400: OpenApiResponse(description="Bad request (missing task_id parameter)"),
        },
        tags=["Export"],
    )
    def get(self, request):
        task_id = request.query_params.get("task_id")
        if not task_id:
            return Response({"error": _("task_id parameter is required")}, status=status.HTTP_400_BAD_REQUEST)

        task_result = AsyncResult(task_id)
        response_data = {"task_id": task_id, "status": task_result.state}

        # Cached progress is more current than task meta
        progress_data = get_progress(task_id)
        if progress_data:
            response_data.update(progress_data)
        elif task_result.state == "PROGRESS" and isinstance(task_result.info, dict):
            response_data.update(task_result.info)

        if task_result.state == TASK_STATE_SUCCESS:
            result = task_result.result
            if isinstance(result, dict):
                response_data.update(
                    {
                        "status": TASK_STATE_SUCCESS,
                        "file_url": result.get("file_url"),
                        "file_path": result.get("file_path"),
                        "disk": result.get("disk"),
                        "percent": 100,
                    }
                )
        elif task_result.state == TASK_STATE_FAILURE:
            response_data["status"] = TASK_STATE_FAILURE
            response_data.setdefault("error", str(task_result.result))

        return Response(response_data, status=status.HTTP_200_OK)
