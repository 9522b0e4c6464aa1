"""
pcba-export: assembly spreadsheets from PCB CAM output archives.

Reads the zip archive a CAM processor writes (BOM plus front/back
pick-and-place CSV files) and produces the BOM and CPL spreadsheets an
assembly service expects.

Modules:
    cam: Archive location, extraction and CSV parsing
    export: Row filtering, output formats and the pipeline
    manufacturers: Assembly service profiles (JLCPCB)
    events: Structured events reported by the pipeline
    config: TOML configuration files
    cli: Command-line interface

Quick Start::

    from pcba_export import AssemblyPipeline, FilterConfig

    config = FilterConfig.from_prefixes(["C", "R", "U"], manufacturer="jlcpcb")
    result = AssemblyPipeline(config).run("path/to/project")
    print(result)
"""

__version__ = "0.1.0"

from pcba_export.events import EventCollector, EventLevel, PipelineEvent
from pcba_export.exceptions import (
    ArchiveReadError,
    DocumentError,
    MalformedRowError,
    MissingRequiredColumnError,
    NoArchiveFoundError,
    OutputWriteError,
    PcbaExportError,
)
from pcba_export.export import (
    AssemblyPipeline,
    FilterConfig,
    OutputStatus,
    PipelineResult,
    PipelineState,
    run_pipeline,
)

__all__ = [
    "__version__",
    # Pipeline
    "AssemblyPipeline",
    "FilterConfig",
    "OutputStatus",
    "PipelineResult",
    "PipelineState",
    "run_pipeline",
    # Events
    "EventCollector",
    "EventLevel",
    "PipelineEvent",
    # Errors
    "PcbaExportError",
    "NoArchiveFoundError",
    "ArchiveReadError",
    "DocumentError",
    "MissingRequiredColumnError",
    "MalformedRowError",
    "OutputWriteError",
]
