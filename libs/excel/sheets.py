"""
Sheet builder: turns an export object into sheet definitions for the writers.
"""

import logging
from datetime import date, datetime, time
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models.fields import AutoField

from .concerns import (
    FromArray,
    FromCollection,
    FromQuery,
    ShouldAutoSize,
    WithCustomCsvSettings,
    WithGroupedHeadings,
    WithHeadings,
    WithMapping,
    WithMergedColumns,
    WithMultipleSheets,
    WithTitle,
)
from .constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CSV_SETTINGS,
    DEFAULT_EXCLUDED_FIELDS,
    DEFAULT_SHEET_TITLE,
    MAX_SHEET_TITLE_LENGTH,
)

logger = logging.getLogger(__name__)


class SheetBuilder:
    """
    Builds sheet definitions from export objects.

    Each definition is a dict:
        {
            "title": str,
            "headings": [[...], ...],
            "rows": iterable of lists,
            "total_rows": int or None (None unless counted),
            "groups": [{"title": str, "span": int}, ...],
            "merge_columns": [int, ...],
            "auto_size": bool,
            "csv_settings": dict,
        }

    Rows are produced lazily so query exports are streamed in chunks.
    """

    def __init__(self, excluded_fields=None, chunk_size=None):
        self.excluded_fields = excluded_fields or DEFAULT_EXCLUDED_FIELDS
        self.chunk_size = chunk_size or getattr(settings, "EXPORTER_CHUNK_SIZE", DEFAULT_CHUNK_SIZE)

    def build(self, export, count_rows=False):
        """
        Build sheet definitions for an export.

        Args:
            export: Export object (or a WithMultipleSheets container)
            count_rows: Fill in ``total_rows``; this costs a COUNT query for query exports

        Returns:
            list: Sheet definitions, at least one
        """
        if isinstance(export, WithMultipleSheets):
            sheets = [
                self.build_sheet(sheet, index, count_rows=count_rows) for index, sheet in enumerate(export.sheets())
            ]
            if sheets:
                return sheets
            logger.warning(f"Export {type(export).__name__} declared no sheets; writing an empty one")
        return [self.build_sheet(export, count_rows=count_rows)]

    def build_sheet(self, export, index=0, count_rows=False):
        queryset = export.query() if isinstance(export, FromQuery) else None
        model_fields = self._get_query_fields(export, queryset)

        return {
            "title": self._get_title(export, index),
            "headings": self._get_headings(export, model_fields),
            "rows": self._iter_rows(export, queryset, model_fields),
            "total_rows": self._count_rows(export, queryset) if count_rows else None,
            "groups": list(export.heading_groups()) if isinstance(export, WithGroupedHeadings) else [],
            "merge_columns": list(export.merge_columns()) if isinstance(export, WithMergedColumns) else [],
            "auto_size": isinstance(export, ShouldAutoSize),
            "csv_settings": self._get_csv_settings(export),
        }

    def _get_title(self, export, index):
        if isinstance(export, WithTitle):
            title = str(export.title())
        elif index:
            title = f"{DEFAULT_SHEET_TITLE} {index + 1}"
        else:
            title = DEFAULT_SHEET_TITLE
        return title[:MAX_SHEET_TITLE_LENGTH]

    def _get_headings(self, export, model_fields):
        if isinstance(export, WithHeadings):
            return _as_rows(export.headings())
        if model_fields and not isinstance(export, WithMapping):
            return [[self._get_field_label(field) for field in model_fields]]
        return []

    def _get_csv_settings(self, export):
        csv_settings = {**DEFAULT_CSV_SETTINGS, **getattr(settings, "EXPORTER_CSV", {})}
        if isinstance(export, WithCustomCsvSettings):
            csv_settings.update(export.get_csv_settings())
        return csv_settings

    def _source(self, export, queryset):
        if queryset is not None:
            return queryset.iterator(chunk_size=self.chunk_size)
        if isinstance(export, FromCollection):
            return export.collection()
        if isinstance(export, FromArray):
            return export.array()
        return []

    def _count_rows(self, export, queryset):
        """Count source rows when it is cheap enough to know up front."""
        if queryset is not None:
            return queryset.count()
        source = None
        if isinstance(export, FromCollection):
            source = export.collection()
        elif isinstance(export, FromArray):
            source = export.array()
        if source is None:
            return 0
        try:
            return len(source)
        except TypeError:
            return None

    def _iter_rows(self, export, queryset, model_fields):
        mapped = isinstance(export, WithMapping)
        for item in self._source(export, queryset):
            if mapped:
                yield from _as_rows(export.map(item))
            elif model_fields:
                yield self._serialize_instance(item, model_fields)
            else:
                yield _as_row(item)

    def _get_query_fields(self, export, queryset):
        if queryset is None or isinstance(export, WithMapping):
            return []

        fields = []
        for field in queryset.model._meta.get_fields():
            if field.name in self.excluded_fields or field.name.startswith("_"):
                continue
            if isinstance(field, AutoField):
                continue
            # Reverse relations and m2m have no single cell value
            if not field.concrete or field.many_to_many:
                continue
            fields.append(field)
        return fields

    def _get_field_label(self, field):
        if getattr(field, "verbose_name", None):
            return str(field.verbose_name).title()
        return field.name.replace("_", " ").title()

    def _serialize_instance(self, obj, fields):
        row = []
        for field in fields:
            value = getattr(obj, field.name, None)

            if value is None:
                row.append("")
            elif field.choices:
                row.append(str(getattr(obj, f"get_{field.name}_display")()))
            elif isinstance(field, models.BooleanField):
                row.append("Yes" if value else "No")
            elif isinstance(field, models.ForeignKey):
                row.append(str(value))
            elif isinstance(value, (datetime, date, time)):
                row.append(value.isoformat())
            elif isinstance(value, Decimal):
                row.append(float(value))
            elif isinstance(value, (int, float, str)):
                row.append(value)
            else:
                row.append(str(value))
        return row


def _as_row(item):
    if isinstance(item, dict):
        return list(item.values())
    if isinstance(item, (list, tuple)):
        return list(item)
    return [item]


def _as_rows(value):
    """Normalize a single row or a list of rows to a list of rows."""
    if isinstance(value, (list, tuple)) and value and all(isinstance(item, (list, tuple, dict)) for item in value):
        return [_as_row(item) for item in value]
    if isinstance(value, (list, tuple)) and not value:
        return []
    return [_as_row(value)]
