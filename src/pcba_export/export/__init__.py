"""
Assembly output generation.

Turns CAM export tables into the BOM and CPL spreadsheets an assembly
service expects:
- BOM in the service's column layout (Comment, Designator, Footprint, LCSC Part #)
- Pick-and-place (CPL) with both board sides merged

Example::

    from pcba_export.export import AssemblyPipeline, FilterConfig

    config = FilterConfig.from_prefixes(["C", "R"], manufacturer="jlcpcb")
    result = AssemblyPipeline(config).run("path/to/project")
    print(result)

Supported manufacturers:
- jlcpcb: JLCPCB/LCSC
"""

from .assembly import (
    AssemblyPipeline,
    DocumentOutcome,
    OutputStatus,
    PipelineResult,
    PipelineState,
    run_pipeline,
)
from .bom_formats import (
    BOM_FORMATTERS,
    BOMFormatter,
    BomRecord,
    JLCPCBBOMFormatter,
    bom_columns,
    get_bom_formatter,
    iter_bom_rows,
)
from .filtering import (
    FilterConfig,
    FilterDecision,
    RowSkip,
    SkipReason,
    classify_bom_row,
    classify_placement_row,
    matches_prefix,
)
from .pnp import (
    PNP_COLUMNS,
    PNP_FORMATTERS,
    JLCPCBPnPFormatter,
    Layer,
    PlacementRecord,
    PnPFormatter,
    get_pnp_formatter,
    iter_placement_rows,
)
from .workbook import OutputTable, build_workbook, write_xlsx

__all__ = [
    # Pipeline
    "AssemblyPipeline",
    "DocumentOutcome",
    "OutputStatus",
    "PipelineResult",
    "PipelineState",
    "run_pipeline",
    # Filtering
    "FilterConfig",
    "FilterDecision",
    "RowSkip",
    "SkipReason",
    "classify_bom_row",
    "classify_placement_row",
    "matches_prefix",
    # BOM
    "BOMFormatter",
    "BomRecord",
    "JLCPCBBOMFormatter",
    "BOM_FORMATTERS",
    "bom_columns",
    "get_bom_formatter",
    "iter_bom_rows",
    # Pick-and-place
    "PnPFormatter",
    "PlacementRecord",
    "Layer",
    "JLCPCBPnPFormatter",
    "PNP_COLUMNS",
    "PNP_FORMATTERS",
    "get_pnp_formatter",
    "iter_placement_rows",
    # Workbook
    "OutputTable",
    "build_workbook",
    "write_xlsx",
]
