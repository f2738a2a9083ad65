"""
Writers that turn sheet definitions into file bytes.
"""

import codecs
import csv
import io
import logging
import os
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from django.conf import settings
from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .constants import (
    CONTENT_TYPES,
    CSV,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_HEADER_ALIGNMENT,
    DEFAULT_HEADER_BG_COLOR,
    DEFAULT_HEADER_FONT_BOLD,
    DEFAULT_HEADER_FONT_SIZE,
    EXTENSION_WRITER_TYPES,
    MAX_AUTO_SIZE_WIDTH,
    TSV,
    XLSX,
)
from .exceptions import UnsupportedWriterTypeError, WriterTypeNotDetectedError
from .sheets import SheetBuilder

logger = logging.getLogger(__name__)


def detect_writer_type(file_name, writer_type=None):
    """
    Determine the writer type for a file.

    Args:
        file_name: Target file name or path
        writer_type: Explicit writer type, returned as is when given

    Returns:
        str: Writer type

    Raises:
        WriterTypeNotDetectedError: If no type is given and the extension is unknown
    """
    if writer_type:
        return writer_type

    extension = os.path.splitext(file_name or "")[1].lstrip(".").lower()
    try:
        return EXTENSION_WRITER_TYPES[extension]
    except KeyError:
        raise WriterTypeNotDetectedError() from None


XLSX_CELL_TYPES = (str, int, float, Decimal, datetime, date, time, timedelta)


def _cell_value(value):
    """Convert a row value to something openpyxl can store; Excel has no timezones."""
    if value is None:
        return None
    if isinstance(value, datetime) and timezone.is_aware(value):
        return timezone.make_naive(value)
    if isinstance(value, time) and value.tzinfo is not None:
        return value.replace(tzinfo=None)
    if isinstance(value, XLSX_CELL_TYPES):
        return value
    return str(value)


class BaseWriter:
    """
    Base class for writers.

    Subclasses implement ``_write_sheets`` and set ``writer_type``.
    """

    writer_type = None

    def __init__(self, progress_callback=None, chunk_size=None):
        """
        Initialize writer.

        Args:
            progress_callback: Optional callable receiving the number of rows
                written since the previous call
            chunk_size: Rows between progress callbacks
        """
        self.progress_callback = progress_callback
        self.chunk_size = chunk_size or getattr(settings, "EXPORTER_CHUNK_SIZE", DEFAULT_CHUNK_SIZE)
        self._pending_rows = 0

    @property
    def content_type(self):
        return CONTENT_TYPES[self.writer_type]

    def write(self, export) -> bytes:
        """Generate file contents for an export object."""
        sheets = SheetBuilder(chunk_size=self.chunk_size).build(export)
        content = self._write_sheets(sheets)
        self._flush_progress()
        return content

    def _write_sheets(self, sheets) -> bytes:
        raise NotImplementedError

    def _row_written(self):
        self._pending_rows += 1
        if self._pending_rows >= self.chunk_size:
            self._flush_progress()

    def _flush_progress(self):
        if self.progress_callback and self._pending_rows:
            self.progress_callback(self._pending_rows)
        self._pending_rows = 0


class XLSXWriter(BaseWriter):
    """Writes one worksheet per sheet definition with openpyxl."""

    writer_type = XLSX

    def _write_sheets(self, sheets):
        workbook = Workbook()
        # Remove default sheet
        workbook.remove(workbook.active)

        for sheet in sheets:
            self._write_sheet(workbook, sheet)

        output = io.BytesIO()
        workbook.save(output)
        return output.getvalue()

    def _write_sheet(self, workbook, sheet):
        ws = workbook.create_sheet(title=sheet["title"])

        current_row = 1
        if sheet["groups"]:
            current_row = self._add_group_headings(ws, sheet["groups"], current_row)

        for heading in sheet["headings"]:
            current_row = self._add_heading(ws, heading, current_row)

        self._add_rows(ws, sheet["rows"], sheet["merge_columns"], current_row)

        if sheet["auto_size"]:
            self._auto_size_columns(ws)

    def _style_heading_cell(self, cell):
        cell.font = Font(bold=DEFAULT_HEADER_FONT_BOLD, size=DEFAULT_HEADER_FONT_SIZE)
        cell.fill = PatternFill(start_color=DEFAULT_HEADER_BG_COLOR, end_color=DEFAULT_HEADER_BG_COLOR, fill_type="solid")
        cell.alignment = Alignment(horizontal=DEFAULT_HEADER_ALIGNMENT, vertical="center")
        cell.border = self._get_border()

    def _add_group_headings(self, ws, groups, start_row):
        col = 1
        for group in groups:
            span = group.get("span", 1)
            cell = ws.cell(row=start_row, column=col, value=group.get("title", ""))
            self._style_heading_cell(cell)

            if span > 1:
                ws.merge_cells(start_row=start_row, start_column=col, end_row=start_row, end_column=col + span - 1)
            col += span

        return start_row + 1

    def _add_heading(self, ws, heading, start_row):
        for col, value in enumerate(heading, start=1):
            self._style_heading_cell(ws.cell(row=start_row, column=col, value=value))
        return start_row + 1

    def _add_rows(self, ws, rows, merge_columns, start_row):
        """
        Write data rows and merge equal consecutive values in merge columns.

        Returns:
            int: Next free row number
        """
        # column -> (first row of the current run, value of the run)
        runs = {}
        merge_ranges = []
        current_row = start_row

        for row in rows:
            for col, value in enumerate(row, start=1):
                cell = ws.cell(row=current_row, column=col, value=_cell_value(value))
                cell.border = self._get_border()

            for index in merge_columns:
                value = row[index] if index < len(row) else None
                run_start, run_value = runs.get(index, (current_row, value))
                if run_value != value:
                    merge_ranges.append((run_start, current_row - 1, index + 1))
                    run_start = current_row
                runs[index] = (run_start, value)

            self._row_written()
            current_row += 1

        for index, (run_start, _value) in runs.items():
            merge_ranges.append((run_start, current_row - 1, index + 1))

        for first, last, col in merge_ranges:
            if last > first:
                ws.merge_cells(start_row=first, start_column=col, end_row=last, end_column=col)
                ws.cell(row=first, column=col).alignment = Alignment(horizontal="center", vertical="center")

        return current_row

    def _get_border(self):
        thin_border = Side(style="thin", color="000000")
        return Border(left=thin_border, right=thin_border, top=thin_border, bottom=thin_border)

    def _auto_size_columns(self, ws):
        for column in ws.columns:
            max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
            ws.column_dimensions[get_column_letter(column[0].column)].width = min(max_length + 2, MAX_AUTO_SIZE_WIDTH)


class CSVWriter(BaseWriter):
    """Writes the first sheet as delimited text."""

    writer_type = CSV
    delimiter = None

    def _write_sheets(self, sheets):
        sheet = sheets[0]
        if len(sheets) > 1:
            logger.warning(f"{self.writer_type} writes a single sheet; skipping {len(sheets) - 1} more")

        options = sheet["csv_settings"]
        delimiter = self.delimiter or options["delimiter"]
        encoding = options["output_encoding"] or "utf-8"

        buffer = io.StringIO()
        writer = csv.writer(
            buffer,
            delimiter=delimiter,
            quotechar=options["enclosure"] or '"',
            lineterminator=options["line_ending"],
            quoting=csv.QUOTE_MINIMAL,
        )

        if options["include_separator_line"]:
            buffer.write(f"sep={delimiter}{options['line_ending']}")

        for heading in sheet["headings"]:
            writer.writerow(heading)

        for row in sheet["rows"]:
            writer.writerow(["" if value is None else value for value in row])
            self._row_written()

        content = buffer.getvalue().encode(encoding)
        if options["use_bom"]:
            content = codecs.BOM_UTF8 + content
        return content


class TSVWriter(CSVWriter):
    writer_type = TSV
    delimiter = "\t"


WRITERS = {
    XLSX: XLSXWriter,
    CSV: CSVWriter,
    TSV: TSVWriter,
}


def get_writer(writer_type, progress_callback=None, chunk_size=None):
    """
    Get a writer instance for a writer type.

    Raises:
        UnsupportedWriterTypeError: If no writer is registered for the type
    """
    try:
        writer_class = WRITERS[writer_type]
    except KeyError:
        raise UnsupportedWriterTypeError(writer_type) from None
    return writer_class(progress_callback=progress_callback, chunk_size=chunk_size)
