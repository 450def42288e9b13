"""
Excel Parser

Reads the first worksheet of an .xlsx workbook. The first row is the header;
cell values are read as stored (formulas resolved to their cached values).
"""

import io
import logging
from openpyxl import load_workbook

from .base import BaseParser, FormatError
from .models import ParseResult, FileInfo

logger = logging.getLogger(__name__)


class ExcelParser(BaseParser):
    """Parser for Excel (.xlsx) files"""

    EXTENSIONS = ['.xlsx', '.xlsm']

    def can_parse(self, file_info: FileInfo) -> bool:
        """Check if this parser can handle the file"""
        return file_info.extension.lower() in self.EXTENSIONS

    async def parse(self, content: bytes, file_info: FileInfo) -> ParseResult:
        """Parse Excel file into header-keyed rows"""
        self.warnings = []

        try:
            wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        except Exception as e:
            logger.exception(f"Failed to open Excel file {file_info.filename}: {e}")
            raise FormatError(f"Failed to parse Excel file: {e}") from e

        try:
            if not wb.sheetnames:
                raise FormatError("Workbook has no sheets")

            ws = wb[wb.sheetnames[0]]
            rows = ws.iter_rows(values_only=True)
            header = next(rows, None)
            if header is None:
                raise FormatError(f"Sheet '{wb.sheetnames[0]}' is empty")

            result = self.build_rows(header, rows)
            result.sheet_names = list(wb.sheetnames)
            result.detected_format = "excel"
            logger.info(
                f"Read {len(result.rows)} rows from sheet '{wb.sheetnames[0]}' "
                f"of {file_info.filename}"
            )
            return result
        finally:
            wb.close()
