"""
Longest-common-subsequence alignment shared by every diff granularity.

Lines, word tokens and characters are all aligned with the same
table-plus-backtrack routine; callers supply comparison keys and, for
line alignment, a hook that decides whether two differing elements
should be paired.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Callable, NamedTuple, Optional, Sequence


class StepKind(Enum):
    """Kind of step produced by backtracking."""
    MATCH = auto()      # Keys equal, both elements consumed
    PAIR = auto()       # Keys differ but resolver paired them
    REMOVE = auto()     # Left element only
    ADD = auto()        # Right element only


class AlignmentStep(NamedTuple):
    """One backtracked step; indices are 0-based, None for the absent side."""
    kind: StepKind
    left_index: Optional[int]
    right_index: Optional[int]


def lcs_table(left_keys: Sequence, right_keys: Sequence) -> list[list[int]]:
    """
    Build the LCS length table for two key sequences.

    table[i][j] is the LCS length of left_keys[:i] and right_keys[:j].
    O(m*n) time and space.
    """
    m = len(left_keys)
    n = len(right_keys)
    table = [[0] * (n + 1) for _ in range(m + 1)]

    for i in range(1, m + 1):
        row = table[i]
        prev = table[i - 1]
        left_key = left_keys[i - 1]
        for j in range(1, n + 1):
            if left_key == right_keys[j - 1]:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = prev[j] if prev[j] >= row[j - 1] else row[j - 1]

    return table


def lcs_length(left_keys: Sequence, right_keys: Sequence) -> int:
    """LCS length only, keeping two table rows in memory."""
    if not left_keys or not right_keys:
        return 0

    prev = [0] * (len(right_keys) + 1)
    for left_key in left_keys:
        row = [0] * (len(right_keys) + 1)
        for j, right_key in enumerate(right_keys, start=1):
            if left_key == right_key:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = prev[j] if prev[j] >= row[j - 1] else row[j - 1]
        prev = row

    return prev[-1]


def backtrack(
    left_keys: Sequence,
    right_keys: Sequence,
    table: Optional[list[list[int]]] = None,
    pair_resolver: Optional[Callable[[int, int], bool]] = None,
    prefer_removal: bool = True
) -> list[AlignmentStep]:
    """
    Walk an LCS table from the bottom-right corner into ordered steps.

    Args:
        left_keys: Comparison keys of the left sequence
        right_keys: Comparison keys of the right sequence
        table: Precomputed table from lcs_table (built if None)
        pair_resolver: Called with (left_index, right_index) when both
            elements exist but differ; returning True emits a PAIR step
            consuming both
        prefer_removal: On an unpaired mismatch, emit REMOVE when
            table[i-1][j] >= table[i][j-1]; otherwise emit ADD when
            table[i][j-1] >= table[i-1][j]

    Returns:
        Steps in forward order.
    """
    if table is None:
        table = lcs_table(left_keys, right_keys)

    steps: list[AlignmentStep] = []
    i = len(left_keys)
    j = len(right_keys)

    while i > 0 or j > 0:
        if i > 0 and j > 0:
            if left_keys[i - 1] == right_keys[j - 1]:
                steps.append(AlignmentStep(StepKind.MATCH, i - 1, j - 1))
                i -= 1
                j -= 1
                continue

            if pair_resolver is not None and pair_resolver(i - 1, j - 1):
                steps.append(AlignmentStep(StepKind.PAIR, i - 1, j - 1))
                i -= 1
                j -= 1
                continue

            if prefer_removal:
                take_left = table[i - 1][j] >= table[i][j - 1]
            else:
                take_left = not table[i][j - 1] >= table[i - 1][j]

            if take_left:
                steps.append(AlignmentStep(StepKind.REMOVE, i - 1, None))
                i -= 1
            else:
                steps.append(AlignmentStep(StepKind.ADD, None, j - 1))
                j -= 1
        elif j > 0:
            steps.append(AlignmentStep(StepKind.ADD, None, j - 1))
            j -= 1
        else:
            steps.append(AlignmentStep(StepKind.REMOVE, i - 1, None))
            i -= 1

    steps.reverse()
    return steps
