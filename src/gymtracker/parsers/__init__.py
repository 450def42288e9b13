"""Spreadsheet parsers for workout imports."""
from typing import Optional

from .base import BaseParser, FormatError
from .csv_parser import CSVParser
from .excel_parser import ExcelParser
from .models import FileInfo, ParseResult


def get_parser(file_info: FileInfo) -> Optional[BaseParser]:
    """Return a fresh parser able to read the file, or None."""
    for parser_cls in (ExcelParser, CSVParser):
        parser = parser_cls()
        if parser.can_parse(file_info):
            return parser
    return None


__all__ = [
    "BaseParser",
    "CSVParser",
    "ExcelParser",
    "FileInfo",
    "FormatError",
    "ParseResult",
    "get_parser",
]
