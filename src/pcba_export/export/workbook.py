"""
Spreadsheet output tables.

An :class:`OutputTable` collects the rows of one output document under a
fixed header and is written as a single-sheet ``.xlsx`` workbook with
openpyxl.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Sequence

import openpyxl
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError

from ..exceptions import OutputWriteError

logger = logging.getLogger(__name__)

SHEET_TITLE = "Sheet1"
COLUMN_WIDTH = 25

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(start_color="FFFF00", end_color="FFFF00", fill_type="solid")
_THIN = Side(style="thin")
CELL_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)


@dataclass
class OutputTable:
    """
    Rows of one output document.

    Rows keep the order they were appended in.

    Attributes:
        document: Document kind ("BOM" or "CPL")
        headers: Fixed header row
        rows: Data rows
    """

    document: str
    headers: List[str]
    rows: List[List[Any]] = field(default_factory=list)

    def append(self, row: Sequence[Any]) -> None:
        if len(row) != len(self.headers):
            raise ValueError(
                f"{self.document} row has {len(row)} values, expected {len(self.headers)}"
            )
        self.rows.append(list(row))

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def to_rows(self) -> List[List[Any]]:
        """Header row followed by the data rows."""
        return [list(self.headers)] + [list(r) for r in self.rows]


def build_workbook(table: OutputTable) -> openpyxl.Workbook:
    """Create a workbook holding the table with a styled header row."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    for row in table.to_rows():
        ws.append(row)

    for col_idx in range(1, len(table.headers) + 1):
        header_cell = ws.cell(row=1, column=col_idx)
        header_cell.font = HEADER_FONT
        header_cell.fill = HEADER_FILL
        ws.column_dimensions[get_column_letter(col_idx)].width = COLUMN_WIDTH

    for row_cells in ws.iter_rows(min_row=1, max_row=len(table) + 1, max_col=len(table.headers)):
        for cell in row_cells:
            cell.border = CELL_BORDER

    return wb


def write_xlsx(table: OutputTable, path: str | Path) -> Path:
    """
    Write the table to an ``.xlsx`` file.

    Args:
        table: Table to write (may be empty)
        path: Output file path; the parent directory must exist

    Returns:
        Path of the written file

    Raises:
        OutputWriteError: If a value cannot be stored in a worksheet or the
            file cannot be written
    """
    out_path = Path(path)
    try:
        wb = build_workbook(table)
    except IllegalCharacterError as e:
        raise OutputWriteError(
            table.document,
            e,
            path=out_path,
            suggestions=["Remove control characters from the fields of the CAM export"],
        ) from e
    try:
        wb.save(out_path)
    except OSError as e:
        raise OutputWriteError(table.document, e, path=out_path) from e

    logger.info(f"{table.document} output file saved: {out_path} ({len(table)} rows)")
    return out_path
