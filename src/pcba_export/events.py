"""
Structured events emitted by the pipeline.

The pipeline never talks to the terminal. It reports progress, notices,
skipped rows and errors as :class:`PipelineEvent` values to a handler
supplied by the caller; the CLI prints them and may ask for confirmation,
library users can collect or log them.

Example::

    from pcba_export.events import EventCollector

    collector = EventCollector()
    AssemblyPipeline(config, on_event=collector).run(".")
    for event in collector.warnings:
        print(event.message)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class EventLevel(Enum):
    """Severity of a pipeline event."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def logging_level(self) -> int:
        return {
            EventLevel.INFO: logging.INFO,
            EventLevel.WARNING: logging.WARNING,
            EventLevel.ERROR: logging.ERROR,
        }[self]


@dataclass(frozen=True)
class PipelineEvent:
    """
    A single notice from the pipeline.

    Attributes:
        level: Severity
        message: Human-readable message
        requires_confirmation: The caller may ask the user whether to continue
        document: Document kind the event relates to ("BOM", "PnP-Front", ...)
        line: Source line number for row-level events
    """

    level: EventLevel
    message: str
    requires_confirmation: bool = False
    document: Optional[str] = None
    line: Optional[int] = None

    def __str__(self) -> str:
        prefix = self.level.name
        where = ""
        if self.document and self.line is not None:
            where = f"[{self.document}:{self.line}] "
        elif self.document:
            where = f"[{self.document}] "
        return f"{prefix}: {where}{self.message}"


EventHandler = Callable[[PipelineEvent], None]


def log_event(event: PipelineEvent) -> None:
    """Default handler: forward the event to the module logger."""
    logger.log(event.level.logging_level, str(event))


@dataclass
class EventCollector:
    """Event handler that records every event it receives."""

    events: List[PipelineEvent] = field(default_factory=list)

    def __call__(self, event: PipelineEvent) -> None:
        self.events.append(event)

    def by_level(self, level: EventLevel) -> List[PipelineEvent]:
        return [e for e in self.events if e.level == level]

    @property
    def warnings(self) -> List[PipelineEvent]:
        return self.by_level(EventLevel.WARNING)

    @property
    def errors(self) -> List[PipelineEvent]:
        return self.by_level(EventLevel.ERROR)

    def messages(self) -> List[str]:
        return [e.message for e in self.events]
