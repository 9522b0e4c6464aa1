"""
Pick-and-place (CPL) formats for assembly services.

Reads placement rows from the front and back CAM exports and converts
them to the column layout an assembly service expects.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Type, Union

from ..cam.archive import DocumentKind
from ..cam.csv_table import ColumnSpec, CsvRow, CsvTable
from ..exceptions import MalformedRowError, UnknownManufacturerError
from .filtering import FilterConfig, RowSkip, classify_placement_row
from .workbook import OutputTable

CPL_DOCUMENT = "CPL"


class Layer(Enum):
    """Board side a component is placed on."""

    TOP = "Top"
    BOTTOM = "Bottom"

    @classmethod
    def for_document(cls, kind: DocumentKind) -> "Layer":
        if kind == DocumentKind.PNP_BACK:
            return cls.BOTTOM
        return cls.TOP


@dataclass(frozen=True)
class PlacementRecord:
    """Placement of one component."""

    designator: str
    mid_x: float  # mm
    mid_y: float  # mm
    layer: Layer
    rotation: float  # degrees


PNP_COLUMNS: List[ColumnSpec] = [
    ColumnSpec("designator", headers=("Designator", "Part", "Name", "Ref")),
    ColumnSpec("mid_x", headers=("Mid X", "X", "PosX")),
    ColumnSpec("mid_y", headers=("Mid Y", "Y", "PosY")),
    ColumnSpec("rotation", headers=("Rotation", "Rot", "Angle")),
]


def parse_number(text: str, row: CsvRow, column: str, document: str) -> float:
    """
    Parse a numeric CSV field.

    Accepts a trailing ``mm`` unit and ``,`` as decimal separator.

    Raises:
        MalformedRowError: If the field is not a number
    """
    cleaned = text.strip()
    if cleaned.lower().endswith("mm"):
        cleaned = cleaned[:-2].strip()
    cleaned = cleaned.replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        raise MalformedRowError(
            row.line_number,
            f"{column} value {text!r} is not a number",
            document=document,
        ) from None


def iter_placement_rows(
    table: CsvTable, layer: Layer, config: FilterConfig
) -> Iterator[Union[PlacementRecord, RowSkip]]:
    """
    Filter placement table rows in source order.

    Raises:
        MalformedRowError: If a row is too short or holds a non-numeric coordinate
    """
    for row in table.rows():
        designator = table.get(row, "designator")
        decision = classify_placement_row(designator, config)
        if not decision.included:
            yield RowSkip(table.document, row.line_number, designator, decision.reason)
            continue

        yield PlacementRecord(
            designator=designator,
            mid_x=parse_number(table.get(row, "mid_x"), row, "Mid X", table.document),
            mid_y=parse_number(table.get(row, "mid_y"), row, "Mid Y", table.document),
            layer=layer,
            rotation=parse_number(table.get(row, "rotation"), row, "Rotation", table.document),
        )


class PnPFormatter(ABC):
    """Abstract base class for pick-and-place formatters."""

    manufacturer_id: str = ""
    manufacturer_name: str = ""

    @abstractmethod
    def get_headers(self) -> List[str]:
        """Get column headers for this format."""
        pass

    @abstractmethod
    def format_row(self, record: PlacementRecord) -> List[Any]:
        """Convert a record to an output row."""
        pass

    def new_table(self) -> OutputTable:
        """Create an empty output table with this format's headers."""
        return OutputTable(document=CPL_DOCUMENT, headers=self.get_headers())

    def build_table(self, records: Iterable[PlacementRecord]) -> OutputTable:
        """Build an output table from records, keeping their order."""
        table = self.new_table()
        for record in records:
            table.append(self.format_row(record))
        return table


class JLCPCBPnPFormatter(PnPFormatter):
    """Pick-and-place formatter for JLCPCB assembly service."""

    manufacturer_id = "jlcpcb"
    manufacturer_name = "JLCPCB"

    def get_headers(self) -> List[str]:
        """JLCPCB CPL column headers."""
        return ["Designator", "Mid X", "Mid Y", "Layer", "Rotation"]

    def format_row(self, record: PlacementRecord) -> List[Any]:
        """
        JLCPCB expects:
        - Designator: Reference designator
        - Mid X, Mid Y: Component center in mm
        - Layer: Top or Bottom
        - Rotation: Rotation in degrees
        """
        return [record.designator, record.mid_x, record.mid_y, record.layer.value, record.rotation]


# Registry of available formatters
PNP_FORMATTERS: Dict[str, Type[PnPFormatter]] = {
    "jlcpcb": JLCPCBPnPFormatter,
}


def get_pnp_formatter(manufacturer: str) -> PnPFormatter:
    """
    Get pick-and-place formatter for a manufacturer.

    Args:
        manufacturer: Manufacturer ID (jlcpcb)

    Returns:
        PnPFormatter for the specified manufacturer

    Raises:
        UnknownManufacturerError: If manufacturer is not supported
    """
    formatter_class = PNP_FORMATTERS.get(manufacturer.lower())
    if formatter_class is None:
        raise UnknownManufacturerError(manufacturer, sorted(PNP_FORMATTERS))
    return formatter_class()
