"""
Line-oriented text comparison.

Aligns two texts line by line, pairs edited lines by similarity and
reports which substrings changed within them.
"""

from textcompare.core.diff.text_diff import TextDiffEngine, compare
from textcompare.core.models import (
    ComparisonOptions,
    ComparisonResult,
    DiffRowType,
    SpanClass,
)

__version__ = "1.0.0"

__all__ = [
    'TextDiffEngine',
    'compare',
    'ComparisonOptions',
    'ComparisonResult',
    'DiffRowType',
    'SpanClass',
    '__version__',
]
