"""
Parser Models

Pydantic models describing an uploaded file and the raw rows read from it.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class FileInfo(BaseModel):
    """Information about the file being parsed"""
    filename: str
    extension: str
    size_bytes: int = 0
    content_type: Optional[str] = None

    @classmethod
    def from_filename(
        cls,
        filename: str,
        size_bytes: int = 0,
        content_type: Optional[str] = None,
    ) -> "FileInfo":
        """Build FileInfo, deriving the lowercase extension from the name."""
        dot = filename.rfind(".")
        extension = filename[dot:].lower() if dot != -1 else ""
        return cls(
            filename=filename,
            extension=extension,
            size_bytes=size_bytes,
            content_type=content_type,
        )


class ParseResult(BaseModel):
    """Header-keyed rows read from the first sheet of a tabular file"""
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    columns: List[str] = Field(default_factory=list)
    sheet_names: List[str] = Field(default_factory=list)
    detected_format: Optional[str] = None  # 'excel', 'csv'
    total_rows: int = 0
    warnings: List[str] = Field(default_factory=list)
