"""
Assembly output pipeline.

Turns a CAM output archive into the BOM and CPL spreadsheets an assembly
service expects.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from ..cam.archive import ExtractedDocuments, RawDocument, extract_documents, find_latest_archive
from ..cam.csv_table import parse_table
from ..events import EventHandler, EventLevel, PipelineEvent, log_event
from ..exceptions import (
    ArchiveReadError,
    DocumentError,
    NoArchiveFoundError,
    PcbaExportError,
    RunCancelledError,
)
from ..manufacturers import AssemblyProfile, get_profile
from .bom_formats import BOM_DOCUMENT, bom_columns, get_bom_formatter, iter_bom_rows
from .filtering import FilterConfig, RowSkip, SkipReason
from .pnp import CPL_DOCUMENT, PNP_COLUMNS, Layer, get_pnp_formatter, iter_placement_rows
from .workbook import write_xlsx

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """Progress of a pipeline run."""

    IDLE = "idle"
    ARCHIVE_LOCATED = "archive_located"
    EXTRACTED = "extracted"
    BOM_PROCESSED = "bom_processed"
    PNP_PROCESSED = "pnp_processed"
    DONE = "done"
    ABORTED = "aborted"


class OutputStatus(Enum):
    """Outcome of one output document."""

    PENDING = "pending"
    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class DocumentOutcome:
    """What happened to one output document."""

    document: str
    status: OutputStatus = OutputStatus.PENDING
    path: Optional[Path] = None
    rows_written: int = 0
    skips: List[RowSkip] = field(default_factory=list)
    error: Optional[DocumentError] = None

    def skipped_for(self, reason: SkipReason) -> List[RowSkip]:
        return [s for s in self.skips if s.reason == reason]


@dataclass
class PipelineResult:
    """Result of a pipeline run."""

    working_dir: Path
    state: PipelineState = PipelineState.IDLE
    archive_path: Optional[Path] = None
    output_dir: Optional[Path] = None
    bom: DocumentOutcome = field(default_factory=lambda: DocumentOutcome(BOM_DOCUMENT))
    cpl: DocumentOutcome = field(default_factory=lambda: DocumentOutcome(CPL_DOCUMENT))
    fatal_error: Optional[PcbaExportError] = None
    events: List[PipelineEvent] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True when the run was not aborted."""
        return self.state == PipelineState.DONE

    @property
    def outputs(self) -> List[Path]:
        return [o.path for o in (self.bom, self.cpl) if o.path is not None]

    def __str__(self) -> str:
        lines = [f"Assembly Output: {self.output_dir or self.working_dir}"]
        if self.archive_path:
            lines.append(f"  Archive: {self.archive_path.name}")
        for outcome in (self.bom, self.cpl):
            detail = outcome.status.value
            if outcome.status == OutputStatus.WRITTEN and outcome.path:
                detail = f"{outcome.path.name} ({outcome.rows_written} rows, {len(outcome.skips)} skipped)"
            lines.append(f"  {outcome.document}: {detail}")
        if self.fatal_error:
            lines.append(f"  Aborted: {self.fatal_error.message}")
        return "\n".join(lines)


class AssemblyPipeline:
    """
    Convert the newest CAM archive in a directory into assembly spreadsheets.

    The BOM and CPL branches are independent: a failure producing one does
    not prevent an attempt at the other. Only archive-level failures abort
    the run.

    Example::

        config = FilterConfig.from_prefixes(["C", "R", "U"], manufacturer="jlcpcb")
        result = AssemblyPipeline(config).run("path/to/project")
        print(result)
    """

    def __init__(
        self,
        config: FilterConfig,
        on_event: Optional[EventHandler] = None,
        output_dir: Optional[str | os.PathLike] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Prefix filter and manufacturer profile
            on_event: Event handler (default: log through the logging module)
            output_dir: Output directory; defaults to the profile's directory
                        below the working directory

        Raises:
            UnknownManufacturerError: If the configured manufacturer has no profile
        """
        self.config = config
        self.profile: AssemblyProfile = get_profile(config.manufacturer)
        self.bom_formatter = get_bom_formatter(self.profile.bom_format)
        self.pnp_formatter = get_pnp_formatter(self.profile.pnp_format)
        self.on_event = on_event or log_event
        self.output_dir = Path(output_dir) if output_dir else None
        self._result: Optional[PipelineResult] = None

    def run(self, working_dir: str | os.PathLike = ".") -> PipelineResult:
        """
        Run the pipeline once.

        Args:
            working_dir: Directory holding the CAM archive

        Returns:
            PipelineResult; ``success`` is False when the run aborted
        """
        result = PipelineResult(working_dir=Path(working_dir))
        self._result = result

        try:
            result.archive_path = find_latest_archive(result.working_dir)
            self._transition(PipelineState.ARCHIVE_LOCATED)

            docs = extract_documents(result.archive_path)
            self._transition(PipelineState.EXTRACTED)
            self._report_extracted(docs)

            if docs.bom or docs.pnp_front or docs.pnp_back:
                result.output_dir = self._ensure_output_dir(result.working_dir)

            self._process_bom(docs.bom)
            self._transition(PipelineState.BOM_PROCESSED)

            self._process_pnp(docs.pnp_front, docs.pnp_back)
            self._transition(PipelineState.PNP_PROCESSED)
        except (NoArchiveFoundError, ArchiveReadError, RunCancelledError) as e:
            return self._abort(e)

        self._transition(PipelineState.DONE)
        return result

    # -- helpers ---------------------------------------------------------

    def _transition(self, state: PipelineState) -> None:
        logger.debug(f"Pipeline state: {self._result.state.value} -> {state.value}")
        self._result.state = state

    def _emit(
        self,
        level: EventLevel,
        message: str,
        requires_confirmation: bool = False,
        document: Optional[str] = None,
        line: Optional[int] = None,
    ) -> None:
        event = PipelineEvent(level, message, requires_confirmation, document, line)
        self._result.events.append(event)
        self.on_event(event)

    def _abort(self, error: PcbaExportError) -> PipelineResult:
        result = self._result
        result.fatal_error = error
        result.state = PipelineState.ABORTED
        if not isinstance(error, RunCancelledError):
            self._emit(EventLevel.ERROR, error.message)
        logger.debug("Pipeline aborted")
        return result

    def _report_extracted(self, docs: ExtractedDocuments) -> None:
        for doc in (docs.bom, docs.pnp_front, docs.pnp_back):
            if doc is not None:
                self._emit(EventLevel.INFO, f"{doc.kind.label} stream extracted ({doc.name})")

    def _ensure_output_dir(self, working_dir: Path) -> Path:
        out_dir = self.output_dir or working_dir / self.profile.output_dirname
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            # Each branch reports its own OutputWriteError when saving
            self._emit(EventLevel.ERROR, f"Cannot create output directory {out_dir}: {e}")
        return out_dir

    def _report_skip(self, skip: RowSkip, outcome: DocumentOutcome) -> None:
        outcome.skips.append(skip)
        if skip.reason == SkipReason.PART_NUMBER_MISSING:
            self._emit(EventLevel.WARNING, str(skip), True, skip.document, skip.line_number)
        else:
            self._emit(EventLevel.INFO, str(skip), False, skip.document, skip.line_number)

    def _fail(self, outcome: DocumentOutcome, error: DocumentError) -> None:
        outcome.status = OutputStatus.FAILED
        outcome.error = error
        line = getattr(error, "line_number", None)
        self._emit(
            EventLevel.ERROR,
            f"{outcome.document} output not written: {error.message}",
            document=error.document or outcome.document,
            line=line,
        )

    def _process_bom(self, bom: Optional[RawDocument]) -> None:
        outcome = self._result.bom
        if bom is None:
            outcome.status = OutputStatus.SKIPPED
            self._emit(
                EventLevel.WARNING,
                "No BOM data found in CAM output, BOM output skipped",
                requires_confirmation=True,
                document=BOM_DOCUMENT,
            )
            return

        formatter = self.bom_formatter
        try:
            table = parse_table(bom, bom_columns(self.profile.part_number_column))
            output = formatter.new_table()
            for item in iter_bom_rows(table, self.config):
                if isinstance(item, RowSkip):
                    self._report_skip(item, outcome)
                else:
                    output.append(formatter.format_row(item))
            path = write_xlsx(output, self._result.output_dir / self.profile.bom_filename)
        except DocumentError as e:
            self._fail(outcome, e)
            return

        outcome.status = OutputStatus.WRITTEN
        outcome.path = path
        outcome.rows_written = len(output)
        self._emit(EventLevel.INFO, f"BOM output file saved to {path}", document=BOM_DOCUMENT)

    def _process_pnp(self, front: Optional[RawDocument], back: Optional[RawDocument]) -> None:
        outcome = self._result.cpl
        sides = [doc for doc in (front, back) if doc is not None]
        if not sides:
            outcome.status = OutputStatus.SKIPPED
            self._emit(
                EventLevel.WARNING,
                "No PnP data found in CAM output, CPL output skipped",
                requires_confirmation=True,
                document=CPL_DOCUMENT,
            )
            return
        if len(sides) == 1:
            present = "front" if front is not None else "back"
            self._emit(
                EventLevel.WARNING,
                f"Only one PnP side present ({present}), other side will be skipped",
                document=CPL_DOCUMENT,
            )

        formatter = self.pnp_formatter
        try:
            output = formatter.new_table()
            for doc in sides:
                table = parse_table(doc, PNP_COLUMNS)
                layer = Layer.for_document(doc.kind)
                for item in iter_placement_rows(table, layer, self.config):
                    if isinstance(item, RowSkip):
                        self._report_skip(item, outcome)
                    else:
                        output.append(formatter.format_row(item))
            path = write_xlsx(output, self._result.output_dir / self.profile.cpl_filename)
        except DocumentError as e:
            self._fail(outcome, e)
            return

        outcome.status = OutputStatus.WRITTEN
        outcome.path = path
        outcome.rows_written = len(output)
        self._emit(EventLevel.INFO, f"CPL output file saved to {path}", document=CPL_DOCUMENT)


def run_pipeline(
    working_dir: str | os.PathLike = ".",
    prefixes: Optional[List[str]] = None,
    manufacturer: str = "jlcpcb",
    on_event: Optional[EventHandler] = None,
) -> PipelineResult:
    """
    Convenience function to run the pipeline once.

    Args:
        working_dir: Directory holding the CAM archive
        prefixes: Designator prefixes to include (default: all parts)
        manufacturer: Manufacturer ID
        on_event: Event handler

    Returns:
        PipelineResult
    """
    config = FilterConfig.from_prefixes(prefixes or [], manufacturer=manufacturer)
    return AssemblyPipeline(config, on_event=on_event).run(working_dir)
