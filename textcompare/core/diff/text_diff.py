"""
Text diff engine.

Provides line-by-line comparison with support for:
- Case-insensitive comparison
- Whitespace-insensitive comparison
- Similarity-based pairing of edited lines
- Intraline (word/character) spans for modified lines
"""

from __future__ import annotations

import logging
import re
import time
from typing import Optional, Sequence

from textcompare.core.diff.alignment import (
    StepKind,
    backtrack,
    lcs_length,
    lcs_table,
)
from textcompare.core.models import (
    AddedRow,
    ComparisonOptions,
    ComparisonResult,
    DiffCounts,
    DiffRow,
    DiffRowType,
    EqualRow,
    ModifiedRow,
    PairClassification,
    RemovedRow,
    Span,
    SpanClass,
)


# Word runs, whitespace runs and punctuation runs are each one token
TOKEN_PATTERN = re.compile(r'\w+|\s+|[^\w\s]+')

_WHITESPACE = re.compile(r'\s+')


def normalize(line: str, options: ComparisonOptions) -> str:
    """
    Map a line to its comparison key.

    Whitespace is removed entirely (not collapsed) when ignore_whitespace
    is set; the result is then lower-cased when ignore_case is set.
    """
    result = line
    if options.ignore_whitespace:
        result = _WHITESPACE.sub('', result)
    if options.ignore_case:
        result = result.lower()
    return result


def tokenize(text: str) -> list[str]:
    """Split text on word boundaries; the tokens concatenate back to text."""
    return TOKEN_PATTERN.findall(text)


def char_similarity(left: str, right: str, options: ComparisonOptions) -> float:
    """
    Character-level similarity in [0, 1].

    LCS length over characters divided by the longer length. Case is
    folded per options; whitespace is never stripped here.
    """
    if options.ignore_case:
        left = left.lower()
        right = right.lower()

    # Lower-casing can change length ('İ' becomes two code points)
    longest = max(len(left), len(right))
    if longest == 0:
        return 1.0

    return lcs_length(left, right) / longest


def classify(left: str, right: str, options: ComparisonOptions) -> PairClassification:
    """Decide whether two differing lines form one MODIFIED row or split."""
    if char_similarity(left, right, options) > options.similarity_threshold:
        return PairClassification.MODIFIED
    return PairClassification.SPLIT


def merge_pieces(pieces: Sequence[tuple[str, SpanClass]]) -> tuple[Span, ...]:
    """Coalesce adjacent pieces of the same class into spans."""
    spans: list[Span] = []
    buffer: list[str] = []
    current: Optional[SpanClass] = None

    for text, span_class in pieces:
        if not text:
            continue
        if span_class != current and buffer:
            spans.append(Span(''.join(buffer), current))
            buffer = []
        current = span_class
        buffer.append(text)

    if buffer:
        spans.append(Span(''.join(buffer), current))

    return tuple(spans)


def _diff_units(
    left_units: Sequence[str],
    right_units: Sequence[str],
    options: ComparisonOptions
) -> tuple[tuple[Span, ...], tuple[Span, ...]]:
    """Align two unit sequences (tokens or characters) into per-side spans."""
    if options.ignore_case:
        left_keys = [u.lower() for u in left_units]
        right_keys = [u.lower() for u in right_units]
    else:
        left_keys = list(left_units)
        right_keys = list(right_units)

    left_pieces: list[tuple[str, SpanClass]] = []
    right_pieces: list[tuple[str, SpanClass]] = []

    for step in backtrack(left_keys, right_keys, prefer_removal=False):
        if step.kind == StepKind.MATCH:
            left_pieces.append((left_units[step.left_index], SpanClass.EQUAL))
            right_pieces.append((right_units[step.right_index], SpanClass.EQUAL))
        elif step.kind == StepKind.REMOVE:
            left_pieces.append((left_units[step.left_index], SpanClass.REMOVED))
        else:
            right_pieces.append((right_units[step.right_index], SpanClass.ADDED))

    return merge_pieces(left_pieces), merge_pieces(right_pieces)


def inline_diff(
    left: str,
    right: str,
    options: ComparisonOptions
) -> tuple[tuple[Span, ...], tuple[Span, ...]]:
    """
    Compute intraline spans for a modified line pair.

    Uses word tokens, or characters when either side has fewer than
    options.min_tokens tokens.

    Returns:
        Tuple of (left_spans, right_spans)
    """
    left_tokens = tokenize(left)
    right_tokens = tokenize(right)

    if len(left_tokens) < options.min_tokens or len(right_tokens) < options.min_tokens:
        return _diff_units(list(left), list(right), options)

    return _diff_units(left_tokens, right_tokens, options)


def split_lines(text: str) -> list[str]:
    """Split on '\\n'; an empty text is one empty line."""
    return text.split('\n')


class TextDiffEngine:
    """
    Engine for comparing texts line by line.

    Stateless apart from its options; every call recomputes the
    result from scratch.
    """

    def __init__(self, options: Optional[ComparisonOptions] = None):
        self.options = options or ComparisonOptions()

    def compare(self, left_text: str, right_text: str) -> ComparisonResult:
        """
        Compare two texts.

        Args:
            left_text: The original text
            right_text: The modified text

        Returns:
            ComparisonResult with rows, counts and changed row indices
        """
        if not isinstance(left_text, str) or not isinstance(right_text, str):
            raise TypeError("compare() expects two str arguments")

        started = time.perf_counter()

        rows = self.align(split_lines(left_text), split_lines(right_text))
        result = self._assemble(rows)

        logging.debug(
            f"TextDiffEngine - Compared {len(result.left_lines())} x "
            f"{len(result.right_lines())} lines in "
            f"{(time.perf_counter() - started) * 1000:.1f} ms ({result.counts})"
        )
        return result

    def align(self, left_lines: Sequence[str], right_lines: Sequence[str]) -> list[DiffRow]:
        """Align two line sequences into ordered rows."""
        options = self.options
        left_keys = [normalize(line, options) for line in left_lines]
        right_keys = [normalize(line, options) for line in right_lines]

        def pair_lines(i: int, j: int) -> bool:
            return classify(left_lines[i], right_lines[j], options) == PairClassification.MODIFIED

        rows: list[DiffRow] = []
        steps = backtrack(
            left_keys,
            right_keys,
            lcs_table(left_keys, right_keys),
            pair_resolver=pair_lines,
            prefer_removal=True
        )

        for index, step in enumerate(steps):
            i, j = step.left_index, step.right_index
            if step.kind == StepKind.MATCH:
                rows.append(EqualRow(
                    index=index,
                    left_line_number=i + 1,
                    right_line_number=j + 1,
                    left_content=left_lines[i],
                    right_content=right_lines[j]
                ))
            elif step.kind == StepKind.PAIR:
                left_spans, right_spans = inline_diff(left_lines[i], right_lines[j], options)
                rows.append(ModifiedRow(
                    index=index,
                    left_line_number=i + 1,
                    right_line_number=j + 1,
                    left_content=left_lines[i],
                    right_content=right_lines[j],
                    left_spans=left_spans,
                    right_spans=right_spans
                ))
            elif step.kind == StepKind.REMOVE:
                rows.append(RemovedRow(
                    index=index,
                    left_line_number=i + 1,
                    left_content=left_lines[i]
                ))
            else:
                rows.append(AddedRow(
                    index=index,
                    right_line_number=j + 1,
                    right_content=right_lines[j]
                ))

        return rows

    def _assemble(self, rows: list[DiffRow]) -> ComparisonResult:
        """Package rows with counts and changed row indices."""
        tally = {row_type: 0 for row_type in DiffRowType}
        changed: list[int] = []

        for row in rows:
            tally[row.row_type] += 1
            if row.row_type != DiffRowType.EQUAL:
                changed.append(row.index)

        counts = DiffCounts(
            equal=tally[DiffRowType.EQUAL],
            added=tally[DiffRowType.ADDED],
            removed=tally[DiffRowType.REMOVED],
            modified=tally[DiffRowType.MODIFIED]
        )
        return ComparisonResult(
            rows=tuple(rows),
            counts=counts,
            changed_row_indices=tuple(changed)
        )


def compare(
    left_text: str,
    right_text: str,
    options: Optional[ComparisonOptions] = None
) -> ComparisonResult:
    """Compare two texts with the given options."""
    return TextDiffEngine(options).compare(left_text, right_text)
