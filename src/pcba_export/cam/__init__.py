"""
CAM output reading.

- :mod:`.archive`: locate the newest CAM archive and extract its CSV entries
- :mod:`.csv_table`: parse ``;``-separated CSV documents with header-resolved columns
"""

from .archive import (
    ENTRY_SUFFIXES,
    DocumentKind,
    ExtractedDocuments,
    RawDocument,
    classify_entry,
    extract_documents,
    find_latest_archive,
)
from .csv_table import ColumnSpec, CsvRow, CsvTable, parse_table, split_line, split_lines

__all__ = [
    # Archive
    "DocumentKind",
    "RawDocument",
    "ExtractedDocuments",
    "ENTRY_SUFFIXES",
    "classify_entry",
    "extract_documents",
    "find_latest_archive",
    # CSV
    "ColumnSpec",
    "CsvRow",
    "CsvTable",
    "parse_table",
    "split_line",
    "split_lines",
]
