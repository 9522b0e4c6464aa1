"""
Designator prefix filtering.

Decides which components go into the assembly output. The prefix
allowlist is tested against the whole designator field with a plain
``startswith``: a grouped BOM entry ``"C1,C2,R5"`` is judged by its first
designator only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional


class SkipReason(Enum):
    """Why a row was left out of the output."""

    PART_NUMBER_MISSING = "PartNumber Missing"
    PREFIX_FILTERED = "not in the Prefix Filtering List"


@dataclass(frozen=True)
class FilterConfig:
    """
    Run configuration passed into the pipeline.

    Attributes:
        prefixes: Designator prefixes to include; empty means every part
        manufacturer: Assembly profile ID
    """

    prefixes: FrozenSet[str] = field(default_factory=frozenset)
    manufacturer: str = "jlcpcb"

    def __post_init__(self):
        cleaned = frozenset(p.strip() for p in self.prefixes if p and p.strip())
        object.__setattr__(self, "prefixes", cleaned)

    @classmethod
    def from_prefixes(cls, prefixes: Iterable[str], manufacturer: str = "jlcpcb") -> "FilterConfig":
        return cls(prefixes=frozenset(prefixes), manufacturer=manufacturer)

    @property
    def filters_enabled(self) -> bool:
        return bool(self.prefixes)


@dataclass(frozen=True)
class FilterDecision:
    """Outcome of filtering one row."""

    included: bool
    reason: Optional[SkipReason] = None


INCLUDED = FilterDecision(included=True)


def matches_prefix(designators: str, prefixes: FrozenSet[str]) -> bool:
    """Check the designator field against the allowlist (empty allows all)."""
    if not prefixes:
        return True
    return any(designators.startswith(prefix) for prefix in prefixes)


def classify_bom_row(designators: str, part_number: str, config: FilterConfig) -> FilterDecision:
    """
    Decide whether a BOM row is included.

    A missing part number always excludes the row and takes precedence
    over the prefix check.
    """
    if not part_number:
        return FilterDecision(included=False, reason=SkipReason.PART_NUMBER_MISSING)
    if not matches_prefix(designators, config.prefixes):
        return FilterDecision(included=False, reason=SkipReason.PREFIX_FILTERED)
    return INCLUDED


def classify_placement_row(designator: str, config: FilterConfig) -> FilterDecision:
    """Decide whether a placement row is included."""
    if not matches_prefix(designator, config.prefixes):
        return FilterDecision(included=False, reason=SkipReason.PREFIX_FILTERED)
    return INCLUDED


@dataclass(frozen=True)
class RowSkip:
    """A row left out of the output, for reporting."""

    document: str
    line_number: int
    designators: str
    reason: SkipReason

    def __str__(self) -> str:
        return f'Designator(s) "{self.designators}" skipped ({self.reason.value})'
