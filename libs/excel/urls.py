from django.urls import path

from .views import ExportStatusView

app_name = "excel"

urlpatterns = [
    path("status/", ExportStatusView.as_view(), name="export_status"),
]
