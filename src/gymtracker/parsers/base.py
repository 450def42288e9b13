"""
Base Parser

Abstract base class for spreadsheet parsers.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Sequence

from gymtracker.models import SPREADSHEET_COLUMNS
from .models import ParseResult, FileInfo

logger = logging.getLogger(__name__)

# Columns a hand-edited file must keep for rows to be usable
REQUIRED_COLUMNS = SPREADSHEET_COLUMNS[:3]


class FormatError(ValueError):
    """Raised when an import cannot be read as workout rows."""


class BaseParser(ABC):
    """Abstract base class for file parsers"""

    def __init__(self):
        self.warnings: List[str] = []

    @abstractmethod
    async def parse(self, content: bytes, file_info: FileInfo) -> ParseResult:
        """
        Read the first sheet of a file into header-keyed rows.

        Args:
            content: Raw file bytes
            file_info: Information about the file

        Returns:
            ParseResult with rows and column names

        Raises:
            FormatError: If the content is not a readable table
        """
        pass

    @abstractmethod
    def can_parse(self, file_info: FileInfo) -> bool:
        """
        Check if this parser can handle the given file.

        Args:
            file_info: Information about the file

        Returns:
            True if this parser can handle the file
        """
        pass

    def build_rows(self, header: Sequence[Any], records: Iterable[Sequence[Any]]) -> ParseResult:
        """Zip data rows onto the header row, skipping blank rows."""
        columns = [self.normalize_header(h) for h in header]
        if not any(columns):
            raise FormatError("No header row found")

        missing = [c for c in REQUIRED_COLUMNS if c not in columns]
        if missing:
            self.add_warning(f"Missing columns: {', '.join(missing)}")

        rows = []
        total = 0
        for record in records:
            total += 1
            if all(self._is_blank(v) for v in record):
                continue
            row = {}
            for name, value in zip(columns, record):
                if name:
                    row[name] = value
            rows.append(row)

        return ParseResult(
            rows=rows,
            columns=[c for c in columns if c],
            total_rows=total,
            warnings=list(self.warnings),
        )

    def normalize_header(self, value: Any) -> Optional[str]:
        """Header cell text with surrounding whitespace removed"""
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def _is_blank(value: Any) -> bool:
        return value is None or (isinstance(value, str) and not value.strip())

    def add_warning(self, warning: str):
        """Add a warning message"""
        self.warnings.append(warning)
        logger.warning(f"Parser warning: {warning}")
