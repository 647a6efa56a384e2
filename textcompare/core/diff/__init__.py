"""
Diff module for text comparison operations.

Provides:
- The shared LCS alignment primitive
- The line/intraline text diff engine
- Output formatters (side-by-side, inline, HTML)
"""

from textcompare.core.diff.alignment import (
    AlignmentStep,
    StepKind,
    backtrack,
    lcs_length,
    lcs_table,
)
from textcompare.core.diff.text_diff import (
    TextDiffEngine,
    char_similarity,
    classify,
    compare,
    inline_diff,
    normalize,
    tokenize,
)
from textcompare.core.diff.formatter import (
    HtmlFormatter,
    InlineFormatter,
    SideBySideFormatter,
)

__all__ = [
    # Alignment
    'AlignmentStep',
    'StepKind',
    'backtrack',
    'lcs_length',
    'lcs_table',
    # Text diff
    'TextDiffEngine',
    'char_similarity',
    'classify',
    'compare',
    'inline_diff',
    'normalize',
    'tokenize',
    # Formatters
    'HtmlFormatter',
    'InlineFormatter',
    'SideBySideFormatter',
]
