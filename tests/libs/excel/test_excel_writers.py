"""
Tests for export writers and sheet building.
"""

import codecs
import uuid
from datetime import datetime, timezone
from io import BytesIO

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase, override_settings
from openpyxl import load_workbook

from libs.excel import (
    CSV,
    TSV,
    XLSX,
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
    detect_writer_type,
    get_writer,
)
from libs.excel.exceptions import UnsupportedWriterTypeError, WriterTypeNotDetectedError
from libs.excel.sheets import SheetBuilder
from libs.excel.writers import CSVWriter, TSVWriter, XLSXWriter

User = get_user_model()


class ProjectsExport(FromArray, WithHeadings, WithTitle):
    def array(self):
        return [
            ["Project A", "Task 1", 10],
            ["Project A", "Task 2", 15],
            ["Project B", "Task 3", 20],
        ]

    def headings(self):
        return ["Project", "Task", "Hours"]

    def title(self):
        return "Projects"


class DetectWriterTypeTests(SimpleTestCase):
    def test_detects_from_extension(self):
        self.assertEqual(detect_writer_type("report.xlsx"), XLSX)
        self.assertEqual(detect_writer_type("exports/report.CSV"), CSV)
        self.assertEqual(detect_writer_type("report.tsv"), TSV)

    def test_explicit_type_wins(self):
        self.assertEqual(detect_writer_type("report.xlsx", CSV), CSV)
        self.assertEqual(detect_writer_type("report", XLSX), XLSX)

    def test_unknown_extension(self):
        with self.assertRaises(WriterTypeNotDetectedError):
            detect_writer_type("report.pdf")

        with self.assertRaises(WriterTypeNotDetectedError):
            detect_writer_type("report")

    def test_get_writer(self):
        self.assertIsInstance(get_writer(XLSX), XLSXWriter)
        self.assertIsInstance(get_writer(CSV), CSVWriter)
        self.assertIsInstance(get_writer(TSV), TSVWriter)

        with self.assertRaises(UnsupportedWriterTypeError):
            get_writer("Pdf")


class SheetBuilderTests(SimpleTestCase):
    def setUp(self):
        self.builder = SheetBuilder()

    def test_rows_are_normalized(self):
        class MixedExport(FromCollection):
            def collection(self):
                return [{"a": 1, "b": 2}, (3, 4), "single"]

        sheet = self.builder.build(MixedExport(), count_rows=True)[0]

        self.assertEqual(list(sheet["rows"]), [[1, 2], [3, 4], ["single"]])
        self.assertEqual(sheet["total_rows"], 3)
        self.assertEqual(sheet["title"], "Worksheet")
        self.assertEqual(sheet["headings"], [])

    def test_mapping_can_return_several_rows(self):
        class ExpandedExport(FromArray, WithMapping, WithHeadings):
            def array(self):
                return [{"name": "John", "roles": ["admin", "user"]}]

            def map(self, row):
                return [[row["name"], role] for role in row["roles"]]

            def headings(self):
                return [["People"], ["Name", "Role"]]

        sheet = self.builder.build(ExpandedExport())[0]

        self.assertEqual(sheet["headings"], [["People"], ["Name", "Role"]])
        self.assertEqual(list(sheet["rows"]), [["John", "admin"], ["John", "user"]])

    def test_generator_collection_has_unknown_total(self):
        class GeneratorExport(FromCollection):
            def collection(self):
                return (n for n in range(3))

        sheet = self.builder.build(GeneratorExport(), count_rows=True)[0]

        self.assertIsNone(sheet["total_rows"])
        self.assertEqual(list(sheet["rows"]), [[0], [1], [2]])

    def test_rows_are_not_counted_by_default(self):
        sheet = self.builder.build(ProjectsExport())[0]

        self.assertIsNone(sheet["total_rows"])
        self.assertEqual(len(list(sheet["rows"])), 3)

    def test_title_is_truncated(self):
        class LongTitleExport(FromArray, WithTitle):
            def array(self):
                return []

            def title(self):
                return "x" * 40

        sheet = self.builder.build(LongTitleExport())[0]

        self.assertEqual(len(sheet["title"]), 31)

    @override_settings(EXPORTER_CSV={"delimiter": ";"})
    def test_csv_settings_merge_configured_and_custom(self):
        class CustomCsvExport(FromArray, WithCustomCsvSettings):
            def array(self):
                return []

            def get_csv_settings(self):
                return {"use_bom": True}

        csv_settings = self.builder.build(CustomCsvExport())[0]["csv_settings"]

        self.assertEqual(csv_settings["delimiter"], ";")
        self.assertTrue(csv_settings["use_bom"])
        self.assertEqual(csv_settings["enclosure"], '"')


class XLSXWriterTests(SimpleTestCase):
    def test_writes_headings_and_rows(self):
        content = XLSXWriter().write(ProjectsExport())

        wb = load_workbook(BytesIO(content))
        self.assertEqual(wb.sheetnames, ["Projects"])

        ws = wb["Projects"]
        self.assertEqual(ws.cell(1, 1).value, "Project")
        self.assertTrue(ws.cell(1, 1).font.bold)
        self.assertEqual(ws.cell(2, 1).value, "Project A")
        self.assertEqual(ws.cell(4, 3).value, 20)

    def test_grouped_headings(self):
        class GroupedExport(ProjectsExport, WithGroupedHeadings):
            def heading_groups(self):
                return [{"title": "Work", "span": 2}, {"title": "Time", "span": 1}]

        ws = load_workbook(BytesIO(XLSXWriter().write(GroupedExport())))["Projects"]

        self.assertEqual(ws.cell(1, 1).value, "Work")
        self.assertEqual(ws.cell(1, 3).value, "Time")
        self.assertIn("A1:B1", [str(rng) for rng in ws.merged_cells.ranges])
        self.assertEqual(ws.cell(2, 1).value, "Project")

    def test_merged_columns(self):
        class MergedExport(ProjectsExport, WithMergedColumns):
            def merge_columns(self):
                return [0]

        ws = load_workbook(BytesIO(XLSXWriter().write(MergedExport())))["Projects"]

        self.assertEqual(ws.cell(2, 1).value, "Project A")
        self.assertIsNone(ws.cell(3, 1).value)  # Merged cell
        self.assertEqual(ws.cell(4, 1).value, "Project B")
        self.assertIn("A2:A3", [str(rng) for rng in ws.merged_cells.ranges])

    def test_multiple_sheets(self):
        class SecondSheet(FromArray, WithTitle):
            def array(self):
                return [["only"]]

            def title(self):
                return "Second"

        class WorkbookExport(WithMultipleSheets):
            def sheets(self):
                return [ProjectsExport(), SecondSheet()]

        wb = load_workbook(BytesIO(XLSXWriter().write(WorkbookExport())))

        self.assertEqual(wb.sheetnames, ["Projects", "Second"])
        self.assertEqual(wb["Second"].cell(1, 1).value, "only")

    def test_auto_size(self):
        class SizedExport(ProjectsExport, ShouldAutoSize):
            pass

        ws = load_workbook(BytesIO(XLSXWriter().write(SizedExport())))["Projects"]

        self.assertEqual(ws.column_dimensions["A"].width, len("Project A") + 2)

    @override_settings(USE_TZ=True, TIME_ZONE="Asia/Ho_Chi_Minh")
    def test_values_are_converted_for_excel(self):
        token = uuid.UUID("12345678-1234-5678-1234-567812345678")

        class EventsExport(FromArray):
            def array(self):
                return [["launch", datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc), token, True]]

        ws = load_workbook(BytesIO(XLSXWriter().write(EventsExport()))).active

        self.assertEqual(ws.cell(1, 2).value, datetime(2025, 1, 1, 19, 0))
        self.assertEqual(ws.cell(1, 3).value, "12345678-1234-5678-1234-567812345678")
        self.assertIs(ws.cell(1, 4).value, True)

    def test_progress_callback_receives_chunks(self):
        calls = []
        writer = XLSXWriter(progress_callback=calls.append, chunk_size=2)

        writer.write(ProjectsExport())

        self.assertEqual(calls, [2, 1])


class CSVWriterTests(SimpleTestCase):
    def test_writes_first_sheet(self):
        content = CSVWriter().write(ProjectsExport())

        self.assertEqual(
            content.decode("utf-8"),
            "Project,Task,Hours\nProject A,Task 1,10\nProject A,Task 2,15\nProject B,Task 3,20\n",
        )

    def test_custom_csv_settings(self):
        class CustomExport(FromArray, WithCustomCsvSettings):
            def array(self):
                return [["a;b", None, "c"]]

            def get_csv_settings(self):
                return {
                    "delimiter": ";",
                    "enclosure": "'",
                    "line_ending": "\r\n",
                    "use_bom": True,
                    "include_separator_line": True,
                }

        content = CSVWriter().write(CustomExport())

        self.assertTrue(content.startswith(codecs.BOM_UTF8))
        self.assertEqual(content[len(codecs.BOM_UTF8) :].decode("utf-8"), "sep=;\r\n'a;b';;c\r\n")

    def test_tsv_uses_tabs(self):
        content = TSVWriter().write(ProjectsExport())

        self.assertEqual(content.decode("utf-8").splitlines()[0], "Project\tTask\tHours")

    def test_extra_sheets_are_skipped(self):
        class WorkbookExport(WithMultipleSheets):
            def sheets(self):
                return [ProjectsExport(), ProjectsExport()]

        content = CSVWriter().write(WorkbookExport())

        self.assertEqual(len(content.decode("utf-8").splitlines()), 4)


class QueryExportTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        User.objects.create_user(username="alice", email="alice@example.com", password="pass", is_active=True)
        User.objects.create_user(username="bob", email="bob@example.com", password="pass", is_active=False)

    def test_default_headings_and_values_from_model(self):
        class UsersExport(FromQuery):
            def query(self):
                return User.objects.order_by("username")

        sheet = SheetBuilder().build(UsersExport(), count_rows=True)[0]
        headings = sheet["headings"][0]
        rows = list(sheet["rows"])

        self.assertIn("Username", headings)
        self.assertNotIn("Id", headings)
        self.assertEqual(sheet["total_rows"], 2)

        username = headings.index("Username")
        active = headings.index("Active")
        self.assertEqual([row[username] for row in rows], ["alice", "bob"])
        self.assertEqual([row[active] for row in rows], ["Yes", "No"])

    def test_building_runs_no_query_until_rows_are_read(self):
        class UsersExport(FromQuery):
            def query(self):
                return User.objects.order_by("username")

        with self.assertNumQueries(0):
            sheet = SheetBuilder().build(UsersExport())[0]

        with self.assertNumQueries(1):
            self.assertEqual(len(list(sheet["rows"])), 2)

    def test_mapped_query_export_to_xlsx(self):
        class UsersExport(FromQuery, WithHeadings, WithMapping):
            def query(self):
                return User.objects.order_by("username")

            def headings(self):
                return ["Username", "Email"]

            def map(self, user):
                return [user.username, user.email]

        ws = load_workbook(BytesIO(XLSXWriter(chunk_size=1).write(UsersExport()))).active

        self.assertEqual(ws.cell(1, 2).value, "Email")
        self.assertEqual(ws.cell(2, 1).value, "alice")
        self.assertEqual(ws.cell(3, 2).value, "bob@example.com")
