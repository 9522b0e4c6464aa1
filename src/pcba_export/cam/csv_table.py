"""
Header-resolved CSV tables for CAM exports.

CAM processors write ``;``-separated UTF-8 text with every field wrapped in
double quotes. Quotes are stripped, not interpreted; the exports never
contain embedded separators.

Columns are declared up front as :class:`ColumnSpec` values. Each spec says
how its physical index is found: by header name, by fixed position, or by
header name with a positional fallback. The mapping is resolved once from
the header row.

Example::

    columns = [
        ColumnSpec("part_number", headers=("LCSC",)),
        ColumnSpec("value", headers=("Value",), position=1),
    ]
    table = parse_table(document, columns)
    for row in table.rows():
        print(row.line_number, table.get(row, "value"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..exceptions import DocumentDecodeError, MalformedRowError, MissingRequiredColumnError
from .archive import RawDocument

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ";"
QUOTE_CHAR = '"'


@dataclass(frozen=True)
class ColumnSpec:
    """
    Declaration of one logical column.

    Attributes:
        name: Logical name used to read the column
        headers: Header names that resolve the column (exact, case-sensitive)
        position: Fixed physical index used when no header name matches
        required: Missing required columns make the table unusable
    """

    name: str
    headers: Tuple[str, ...] = ()
    position: Optional[int] = None
    required: bool = True

    def resolve(self, header: Sequence[str]) -> Optional[int]:
        """Find the physical index of this column in a header row."""
        for candidate in self.headers:
            if candidate in header:
                return header.index(candidate)
        return self.position


@dataclass(frozen=True)
class CsvRow:
    """A data row with its 1-based physical line number."""

    line_number: int
    fields: List[str]


@dataclass
class CsvTable:
    """
    A parsed CSV document.

    Rows are split lazily as they are iterated; row arity is only checked
    when a field is read.
    """

    document: str
    header: List[str]
    columns: Dict[str, int]
    _lines: List[Tuple[int, str]] = field(default_factory=list, repr=False)

    def rows(self) -> Iterator[CsvRow]:
        """Iterate data rows in source order, skipping blank lines."""
        for line_number, line in self._lines:
            if not line.strip():
                continue
            yield CsvRow(line_number, split_line(line))

    def get(self, row: CsvRow, column: str) -> str:
        """
        Read a logical column from a row.

        Raises:
            MalformedRowError: If the row is too short for the column
            KeyError: If the column was not declared for this table
        """
        index = self.columns[column]
        try:
            return row.fields[index]
        except IndexError:
            raise MalformedRowError(
                row.line_number,
                f"expected at least {index + 1} fields, found {len(row.fields)}",
                document=self.document,
            ) from None

    def has_column(self, column: str) -> bool:
        return column in self.columns


def split_line(line: str) -> List[str]:
    """Split a CSV line into fields, stripping quote characters."""
    return line.replace(QUOTE_CHAR, "").split(FIELD_SEPARATOR)


def decode_document(document: RawDocument) -> str:
    """Decode a document as UTF-8, tolerating a leading byte-order mark."""
    try:
        return document.data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DocumentDecodeError(document.kind.label, e) from e


def split_lines(text: str) -> List[str]:
    """Split text on ``\\r\\n``, ``\\r`` and ``\\n`` only."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def parse_table(document: RawDocument, columns: Sequence[ColumnSpec]) -> CsvTable:
    """
    Parse a raw document into a header-resolved table.

    The first line is always the header row, even when it is blank. Other
    line separators (form feed, U+2028 and the like) are field content.

    Args:
        document: Extracted CSV document
        columns: Logical columns the consumer reads

    Returns:
        CsvTable with the resolved column mapping

    Raises:
        DocumentDecodeError: If the payload is not UTF-8
        MissingRequiredColumnError: If a required column cannot be resolved
    """
    text = decode_document(document)
    numbered = list(enumerate(split_lines(text), start=1))

    header = split_line(numbered[0][1])
    body = numbered[1:]

    resolved: Dict[str, int] = {}
    for spec in columns:
        index = spec.resolve(header)
        if index is None:
            if spec.required:
                expected = spec.headers[0] if spec.headers else spec.name
                raise MissingRequiredColumnError(expected, document=document.kind.label)
            continue
        resolved[spec.name] = index

    logger.debug(f"{document.kind.label} columns resolved: {resolved}")
    return CsvTable(
        document=document.kind.label,
        header=header,
        columns=resolved,
        _lines=body,
    )
