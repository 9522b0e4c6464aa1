"""
Exception hierarchy for pcba-export.

Every error carries a message, a context dictionary (archive, document,
line number, ...) and a list of suggestions, so a failed run can be
diagnosed from its output alone.

Errors fall into two scopes:

- Archive-level errors (:class:`NoArchiveFoundError`, :class:`ArchiveReadError`)
  abort the whole run because no document can be recovered without the archive.
- Document-level errors (subclasses of :class:`DocumentError`) only abort the
  output of the document they were raised for.

Example::

    from pcba_export.exceptions import MissingRequiredColumnError

    raise MissingRequiredColumnError(
        "LCSC",
        document="BOM",
        suggestions=["Add an LCSC attribute to every part in the schematic"],
    )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class PcbaExportError(Exception):
    """
    Base exception for all pcba-export errors.

    Attributes:
        context: Dictionary of contextual information (archive, document, line)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class NoArchiveFoundError(PcbaExportError):
    """
    No CAM output archive was found in the working directory.

    Example::

        raise NoArchiveFoundError("/home/user/board")
    """

    def __init__(
        self,
        directory: Union[str, Path],
        suggestions: Optional[List[str]] = None,
    ):
        self.directory = Path(directory)
        super().__init__(
            "No zip archive (CAM output) found in the working directory",
            context={"directory": str(directory)},
            suggestions=suggestions
            or ["Run the CAM processor and place its zip output in this directory"],
        )


class ArchiveReadError(PcbaExportError):
    """
    The archive could not be opened or one of its entries could not be read.

    The underlying exception is available as ``cause`` and is also chained
    as ``__cause__`` by the code raising this error.
    """

    def __init__(
        self,
        archive: Union[str, Path],
        cause: BaseException,
        suggestions: Optional[List[str]] = None,
    ):
        self.archive = Path(archive)
        self.cause = cause
        super().__init__(
            f"Error while reading archive file {self.archive.name!r}: {cause}",
            context={"archive": str(archive), "cause": type(cause).__name__},
            suggestions=suggestions,
        )


class DocumentError(PcbaExportError):
    """
    Base class for errors that are fatal to a single document only.

    Attributes:
        document: Document kind the error belongs to (e.g. "BOM", "CPL")
    """

    def __init__(
        self,
        message: str,
        document: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.document = document
        ctx = context or {}
        if document and "document" not in ctx:
            ctx["document"] = document
        super().__init__(message, ctx, suggestions)


class MissingRequiredColumnError(DocumentError):
    """A column the consuming step needs is absent from the CSV header row."""

    def __init__(
        self,
        column: str,
        document: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.column = column
        super().__init__(
            f"Required column {column!r} not found in the header row",
            document=document,
            context={"column": column},
            suggestions=suggestions,
        )


class MalformedRowError(DocumentError):
    """
    A data row could not be read.

    Raised when a row has fewer fields than a consumed column index, or when
    a numeric field cannot be parsed.
    """

    def __init__(
        self,
        line_number: int,
        reason: str = "row has too few fields",
        document: Optional[str] = None,
    ):
        self.line_number = line_number
        self.reason = reason
        super().__init__(
            f"Malformed row at line {line_number}: {reason}",
            document=document,
            context={"line": line_number},
        )


class DocumentDecodeError(DocumentError):
    """The document payload is not valid UTF-8 text."""

    def __init__(self, document: Optional[str], cause: UnicodeDecodeError):
        self.cause = cause
        super().__init__(
            f"Document is not valid UTF-8 text: {cause.reason} at byte {cause.start}",
            document=document,
            suggestions=["Export the CSV files from the CAM processor with UTF-8 encoding"],
        )


class OutputWriteError(DocumentError):
    """Writing an output spreadsheet failed."""

    def __init__(
        self,
        document: str,
        cause: BaseException,
        path: Optional[Union[str, Path]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.cause = cause
        ctx: Dict[str, Any] = {}
        if path is not None:
            ctx["path"] = str(path)
        super().__init__(
            f"File error while writing {document} output file: {cause}",
            document=document,
            context=ctx,
            suggestions=suggestions
            or ["Close the file if it is open in a spreadsheet application"],
        )


class RunCancelledError(PcbaExportError):
    """
    The run was cancelled by an event handler.

    Event handlers raise this (for example when the user declines a
    confirmation prompt) to stop the pipeline.
    """

    def __init__(self, message: str = "Run cancelled by user"):
        super().__init__(message)


class ConfigError(PcbaExportError):
    """Configuration file could not be read or parsed."""

    pass


class UnknownManufacturerError(PcbaExportError, ValueError):
    """The requested manufacturer profile is not registered."""

    def __init__(self, manufacturer: str, available: List[str]):
        self.manufacturer = manufacturer
        self.available = available
        super().__init__(
            f"Unknown manufacturer: {manufacturer!r}. Available: {', '.join(available)}",
            context={"manufacturer": manufacturer},
        )


__all__ = [
    "PcbaExportError",
    "NoArchiveFoundError",
    "ArchiveReadError",
    "DocumentError",
    "MissingRequiredColumnError",
    "MalformedRowError",
    "DocumentDecodeError",
    "OutputWriteError",
    "RunCancelledError",
    "ConfigError",
    "UnknownManufacturerError",
]
