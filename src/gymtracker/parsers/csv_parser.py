"""
CSV Parser

Parses CSV exports with the same columns as the Excel export.

Features:
- BOM-aware decoding with legacy encoding fallbacks
- Delimiter detection (comma, semicolon, tab)
"""

import io
import csv
import logging

from .base import BaseParser, FormatError
from .models import ParseResult, FileInfo

logger = logging.getLogger(__name__)

# Ties resolve to the earlier entry
DELIMITERS = (',', ';', '\t')


class CSVParser(BaseParser):
    """Parser for CSV files"""

    def can_parse(self, file_info: FileInfo) -> bool:
        """Check if this parser can handle the file"""
        return file_info.extension.lower() in ('.csv', '.tsv')

    async def parse(self, content: bytes, file_info: FileInfo) -> ParseResult:
        """Parse CSV file into header-keyed rows"""
        self.warnings = []

        if b"\x00" in content:
            raise FormatError(f"{file_info.filename} is not a text file")

        text = self._decode_content(content)
        if not text.strip():
            raise FormatError("CSV file is empty")

        delimiter = self._detect_delimiter(text)
        try:
            records = list(csv.reader(io.StringIO(text), delimiter=delimiter))
        except csv.Error as e:
            raise FormatError(f"Failed to parse CSV file: {e}") from e

        result = self.build_rows(records[0], records[1:])
        result.detected_format = "csv"
        logger.info(f"Read {len(result.rows)} rows from {file_info.filename}")
        return result

    def _decode_content(self, content: bytes) -> str:
        """Decode bytes to string, trying multiple encodings"""
        for encoding in ('utf-8-sig', 'cp1252'):
            try:
                return content.decode(encoding)
            except UnicodeDecodeError:
                continue

        # latin-1 maps every byte
        return content.decode('latin-1')

    def _detect_delimiter(self, text: str) -> str:
        """Pick the separator that occurs most often in the first lines"""
        sample = '\n'.join(text.splitlines()[:5])
        return max(DELIMITERS, key=sample.count)
