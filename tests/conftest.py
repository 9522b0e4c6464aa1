"""Pytest fixtures for pcba-export tests."""

import zipfile
from pathlib import Path
from typing import Callable, Dict, Union

import pytest

from pcba_export.cam.archive import DocumentKind, RawDocument

# BOM as written by the Eagle CAM processor (fixed column layout)
EAGLE_BOM_CSV = """"Qty";"Value";"Device";"Package";"Parts";"Description";"LCSC"
"2";"100n";"C-EUC0402";"C0402";"C1,C2";"CAPACITOR";"C1525"
"1";"10k";"R-EUR0402";"R0402";"R1";"RESISTOR";"C25744"
"1";"STM32F103";"STM32F103C8";"LQFP48";"U1";"MCU";"C8734"
"1";"";"PINHD-1X4";"1X04";"J1";"HEADER";""
"""

PNP_FRONT_CSV = """"Designator";"Mid X";"Mid Y";"Rotation";"Value";"Package"
"C1";"10.5";"20.25";"90";"100n";"C0402"
"R1";"12.0";"22.0";"0";"10k";"R0402"
"U1";"30.0";"15.5";"270";"STM32F103";"LQFP48"
"""

PNP_BACK_CSV = """"Part";"X";"Y";"Angle";"Value";"Package"
"C2";"5.5mm";"7.25mm";"180";"100n";"C0402"
"""


def write_archive(path: Path, entries: Dict[str, Union[str, bytes]]) -> Path:
    """Write a zip archive with the given entry names and contents."""
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return path


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    """Factory creating a CAM archive inside tmp_path."""

    def _make(entries: Dict[str, Union[str, bytes]], name: str = "cam_output.zip") -> Path:
        return write_archive(tmp_path / name, entries)

    return _make


@pytest.fixture
def full_archive(make_archive) -> Path:
    """Archive with BOM and both pick-and-place sides, nested in a folder."""
    return make_archive(
        {
            "board/board_BOM.csv": EAGLE_BOM_CSV,
            "board/board_PnP_front.csv": PNP_FRONT_CSV,
            "board/board_PnP_back.csv": PNP_BACK_CSV,
            "board/board_copper_top.gbr": "G04 gerber*",
        }
    )


@pytest.fixture
def make_document() -> Callable[..., RawDocument]:
    """Factory wrapping CSV text as an extracted document."""

    def _make(text: Union[str, bytes], kind: DocumentKind = DocumentKind.BOM) -> RawDocument:
        data = text.encode("utf-8") if isinstance(text, str) else text
        return RawDocument(kind=kind, name=f"test_{kind.name}.csv", data=data)

    return _make


@pytest.fixture
def eagle_bom_csv() -> str:
    return EAGLE_BOM_CSV


@pytest.fixture
def pnp_front_csv() -> str:
    return PNP_FRONT_CSV


@pytest.fixture
def pnp_back_csv() -> str:
    return PNP_BACK_CSV
