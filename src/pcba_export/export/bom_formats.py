"""
BOM export formats for assembly services.

Reads BOM rows from a CAM export table and converts them to the column
layout an assembly service expects.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Type, Union

from ..cam.csv_table import ColumnSpec, CsvTable
from ..exceptions import UnknownManufacturerError
from .filtering import FilterConfig, RowSkip, classify_bom_row
from .workbook import OutputTable

BOM_DOCUMENT = "BOM"


@dataclass(frozen=True)
class BomRecord:
    """One BOM line that survived filtering."""

    value: str
    designators: str  # comma-joined for grouped parts
    footprint: str
    part_number: str


def bom_columns(part_number_column: str = "LCSC") -> List[ColumnSpec]:
    """
    Column declarations for a CAM BOM export.

    The part number is found by header name only. Value, footprint and
    designators follow the CAM processor's fixed layout
    (``Qty;Value;Device;Package;Parts;Description;...``): they are matched
    by header name when the header uses a known name and otherwise read
    from their fixed positions.
    """
    return [
        ColumnSpec("part_number", headers=(part_number_column,)),
        ColumnSpec("value", headers=("Value", "Comment"), position=1),
        ColumnSpec("footprint", headers=("Package", "Footprint"), position=3),
        ColumnSpec("designators", headers=("Parts", "Designator"), position=4),
    ]


def iter_bom_rows(table: CsvTable, config: FilterConfig) -> Iterator[Union[BomRecord, RowSkip]]:
    """
    Filter BOM table rows in source order.

    Yields a BomRecord for every included row and a RowSkip for every
    excluded one.

    Raises:
        MalformedRowError: If a row is too short for a consumed column
    """
    for row in table.rows():
        value = table.get(row, "value")
        designators = table.get(row, "designators")
        footprint = table.get(row, "footprint")
        part_number = table.get(row, "part_number")

        decision = classify_bom_row(designators, part_number, config)
        if decision.included:
            yield BomRecord(value, designators, footprint, part_number)
        else:
            yield RowSkip(table.document, row.line_number, designators, decision.reason)


class BOMFormatter(ABC):
    """Abstract base class for BOM formatters."""

    # Manufacturer identifier
    manufacturer_id: str = ""
    manufacturer_name: str = ""

    @abstractmethod
    def get_headers(self) -> List[str]:
        """Get column headers for this format."""
        pass

    @abstractmethod
    def format_row(self, record: BomRecord) -> List[Any]:
        """Convert a record to an output row."""
        pass

    def new_table(self) -> OutputTable:
        """Create an empty output table with this format's headers."""
        return OutputTable(document=BOM_DOCUMENT, headers=self.get_headers())

    def build_table(self, records: Iterable[BomRecord]) -> OutputTable:
        """Build an output table from records, keeping their order."""
        table = self.new_table()
        for record in records:
            table.append(self.format_row(record))
        return table


class JLCPCBBOMFormatter(BOMFormatter):
    """BOM formatter for JLCPCB assembly service."""

    manufacturer_id = "jlcpcb"
    manufacturer_name = "JLCPCB"

    def get_headers(self) -> List[str]:
        """JLCPCB BOM column headers."""
        return ["Comment", "Designator", "Footprint", "LCSC Part #"]

    def format_row(self, record: BomRecord) -> List[Any]:
        """
        JLCPCB expects:
        - Comment: Component value
        - Designator: Reference designator(s), comma-separated for groups
        - Footprint: Footprint name
        - LCSC Part #: LCSC part number (e.g., C123456)
        """
        return [record.value, record.designators, record.footprint, record.part_number]


# Registry of available formatters
BOM_FORMATTERS: Dict[str, Type[BOMFormatter]] = {
    "jlcpcb": JLCPCBBOMFormatter,
}


def get_bom_formatter(manufacturer: str) -> BOMFormatter:
    """
    Get BOM formatter for a manufacturer.

    Args:
        manufacturer: Manufacturer ID (jlcpcb)

    Returns:
        BOMFormatter for the specified manufacturer

    Raises:
        UnknownManufacturerError: If manufacturer is not supported
    """
    formatter_class = BOM_FORMATTERS.get(manufacturer.lower())
    if formatter_class is None:
        raise UnknownManufacturerError(manufacturer, sorted(BOM_FORMATTERS))
    return formatter_class()
