"""
Core data models for text comparison.

This module defines the data structures produced by the diff engine:
- Comparison options
- Intraline spans
- Row variants (one class per row type)
- Counts and the complete comparison result

All models are designed to be:
- UI-agnostic (can be used with any frontend)
- Immutable (recomputed wholesale on every comparison)
- Type-hinted for IDE support
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional, Union


# =============================================================================
# Constants
# =============================================================================

SIMILARITY_THRESHOLD = 0.4  # Character similarity above which a pair is MODIFIED
MIN_TOKENS = 3              # Fewer tokens than this on either side -> character diff


# =============================================================================
# Enumerations
# =============================================================================

class DiffRowType(Enum):
    """Type of row in a comparison result."""
    EQUAL = auto()      # Line exists on both sides with the same key
    ADDED = auto()      # Line exists only in right text
    REMOVED = auto()    # Line exists only in left text
    MODIFIED = auto()   # Related lines, diffed inline


class PairClassification(Enum):
    """Outcome of classifying two differing lines."""
    MODIFIED = auto()   # Similar enough for one MODIFIED row
    SPLIT = auto()      # Shown as a REMOVED row and an ADDED row


class SpanClass(Enum):
    """Classification of an intraline span."""
    EQUAL = auto()
    ADDED = auto()
    REMOVED = auto()


# =============================================================================
# Options
# =============================================================================

@dataclass(frozen=True)
class ComparisonOptions:
    """Options for a single comparison call."""
    ignore_case: bool = False
    ignore_whitespace: bool = False
    similarity_threshold: float = SIMILARITY_THRESHOLD
    min_tokens: int = MIN_TOKENS


# =============================================================================
# Spans
# =============================================================================

@dataclass(frozen=True)
class Span:
    """
    A maximal run of text within a line carrying one classification.

    Span sequences never hold two consecutive spans of the same class.
    """
    text: str
    span_class: SpanClass

    @property
    def is_change(self) -> bool:
        return self.span_class != SpanClass.EQUAL


# =============================================================================
# Row Variants
# =============================================================================

@dataclass(frozen=True)
class EqualRow:
    """Lines present on both sides whose comparison keys match."""
    index: int
    left_line_number: int
    right_line_number: int
    left_content: str
    right_content: str

    row_type = DiffRowType.EQUAL
    left_spans = None
    right_spans = None


@dataclass(frozen=True)
class RemovedRow:
    """Line present only in the left text."""
    index: int
    left_line_number: int
    left_content: str

    row_type = DiffRowType.REMOVED
    right_line_number = None
    right_content = None
    left_spans = None
    right_spans = None


@dataclass(frozen=True)
class AddedRow:
    """Line present only in the right text."""
    index: int
    right_line_number: int
    right_content: str

    row_type = DiffRowType.ADDED
    left_line_number = None
    left_content = None
    left_spans = None
    right_spans = None


@dataclass(frozen=True)
class ModifiedRow:
    """
    A left and right line that differ but are similar enough to be
    shown as one edited line.

    left_spans holds only EQUAL/REMOVED spans, right_spans only
    EQUAL/ADDED spans.
    """
    index: int
    left_line_number: int
    right_line_number: int
    left_content: str
    right_content: str
    left_spans: tuple[Span, ...]
    right_spans: tuple[Span, ...]

    row_type = DiffRowType.MODIFIED


DiffRow = Union[EqualRow, RemovedRow, AddedRow, ModifiedRow]


# =============================================================================
# Result
# =============================================================================

@dataclass(frozen=True)
class DiffCounts:
    """Per-type row tallies."""
    equal: int = 0
    added: int = 0
    removed: int = 0
    modified: int = 0

    @property
    def total_changes(self) -> int:
        """Total number of changed rows."""
        return self.added + self.removed + self.modified

    def __str__(self) -> str:
        return (f"+{self.added} -{self.removed} "
                f"~{self.modified} ={self.equal}")


@dataclass(frozen=True)
class ComparisonResult:
    """
    Complete result of a text comparison.

    Contains everything needed to render the comparison side-by-side
    or inline and to step through the changes.
    """
    rows: tuple[DiffRow, ...]
    counts: DiffCounts = field(default_factory=DiffCounts)
    changed_row_indices: tuple[int, ...] = ()

    @property
    def is_identical(self) -> bool:
        """True when every row is EQUAL."""
        return not self.changed_row_indices

    @property
    def has_differences(self) -> bool:
        return not self.is_identical

    def changed_rows(self) -> Iterator[DiffRow]:
        """Iterate over only the changed rows."""
        for index in self.changed_row_indices:
            yield self.rows[index]

    def left_lines(self) -> list[str]:
        """Left-side content of all rows, in row order."""
        return [row.left_content for row in self.rows if row.left_content is not None]

    def right_lines(self) -> list[str]:
        """Right-side content of all rows, in row order."""
        return [row.right_content for row in self.rows if row.right_content is not None]

    def get_row(self, index: int) -> Optional[DiffRow]:
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None
