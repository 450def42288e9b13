"""Unit tests for the Excel and CSV parsers."""
import io

import pytest
from openpyxl import Workbook

from gymtracker.models import COLUMN_EXERCISE, COLUMN_REPS, COLUMN_WEIGHT, SPREADSHEET_COLUMNS
from gymtracker.parsers import CSVParser, ExcelParser, FileInfo, FormatError, get_parser


def _xlsx(*rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(list(row))
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


class TestFileInfo:
    def test_extension_is_lowercased(self):
        info = FileInfo.from_filename("Export.XLSX", size_bytes=10)
        assert info.extension == ".xlsx"
        assert info.size_bytes == 10

    def test_no_extension(self):
        assert FileInfo.from_filename("README").extension == ""


class TestGetParser:
    @pytest.mark.parametrize(
        "filename,parser_cls",
        [("a.xlsx", ExcelParser), ("a.csv", CSVParser), ("a.tsv", CSVParser)],
    )
    def test_selects_by_extension(self, filename, parser_cls):
        assert isinstance(get_parser(FileInfo.from_filename(filename)), parser_cls)

    def test_unknown_extension(self):
        assert get_parser(FileInfo.from_filename("a.pdf")) is None


class TestExcelParser:
    """Test cases for ExcelParser."""

    @pytest.mark.asyncio
    async def test_reads_first_sheet(self):
        content = _xlsx(
            SPREADSHEET_COLUMNS,
            ["4/3/2024", "胸", "Bench Press", 1, 50, 10, "w-1", "2024-03-04T18:30:00.000Z"],
        )
        result = await ExcelParser().parse(content, FileInfo.from_filename("x.xlsx"))

        assert result.detected_format == "excel"
        assert result.columns == SPREADSHEET_COLUMNS
        assert len(result.rows) == 1
        assert result.rows[0][COLUMN_EXERCISE] == "Bench Press"
        assert result.rows[0][COLUMN_WEIGHT] == 50

    @pytest.mark.asyncio
    async def test_header_whitespace_is_stripped(self):
        content = _xlsx([f" {COLUMN_EXERCISE} ", COLUMN_REPS], ["Squat", 5])
        result = await ExcelParser().parse(content, FileInfo.from_filename("x.xlsx"))

        assert result.rows == [{COLUMN_EXERCISE: "Squat", COLUMN_REPS: 5}]

    @pytest.mark.asyncio
    async def test_missing_columns_warn(self):
        content = _xlsx(["Exercise", "Reps"], ["Squat", 5])
        parser = ExcelParser()
        result = await parser.parse(content, FileInfo.from_filename("x.xlsx"))

        assert result.warnings
        assert "Missing columns" in result.warnings[0]

    @pytest.mark.asyncio
    async def test_not_a_workbook(self):
        with pytest.raises(FormatError):
            await ExcelParser().parse(b"PK\x03\x04garbage", FileInfo.from_filename("x.xlsx"))


class TestCSVParser:
    """Test cases for CSVParser."""

    @pytest.mark.asyncio
    async def test_utf8_bom(self):
        text = ",".join(SPREADSHEET_COLUMNS) + "\n4/3/2024,胸,臥推,1,50,10,w-1,2024-03-04T18:30:00.000Z\n"
        result = await CSVParser().parse(text.encode("utf-8-sig"), FileInfo.from_filename("x.csv"))

        assert result.columns[0] == SPREADSHEET_COLUMNS[0]
        assert result.rows[0][COLUMN_EXERCISE] == "臥推"
        assert result.rows[0][COLUMN_WEIGHT] == "50"

    @pytest.mark.asyncio
    async def test_semicolon_delimiter(self):
        text = f"{COLUMN_EXERCISE};{COLUMN_REPS}\nSquat;5\nLunge;8\n"
        result = await CSVParser().parse(text.encode(), FileInfo.from_filename("x.csv"))

        assert [r[COLUMN_EXERCISE] for r in result.rows] == ["Squat", "Lunge"]

    @pytest.mark.asyncio
    async def test_blank_lines_skipped(self):
        text = f"{COLUMN_EXERCISE},{COLUMN_REPS}\nSquat,5\n,\n\nLunge,8\n"
        result = await CSVParser().parse(text.encode(), FileInfo.from_filename("x.csv"))

        assert len(result.rows) == 2

    @pytest.mark.asyncio
    async def test_binary_content_rejected(self):
        with pytest.raises(FormatError):
            await CSVParser().parse(b"\x00\x01\x02", FileInfo.from_filename("x.csv"))

    @pytest.mark.asyncio
    async def test_whitespace_only_rejected(self):
        with pytest.raises(FormatError):
            await CSVParser().parse(b"  \n\n", FileInfo.from_filename("x.csv"))

    def test_detect_delimiter_prefers_most_common(self):
        assert CSVParser()._detect_delimiter("a\tb\tc\n1\t2\t3") == "\t"
