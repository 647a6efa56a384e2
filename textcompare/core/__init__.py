"""
Core comparison logic: models, diff engine and change navigation.

Nothing in this package depends on Qt or on the filesystem.
"""

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
from textcompare.core.navigation import ChangeNavigator

__all__ = [
    'AddedRow',
    'ComparisonOptions',
    'ComparisonResult',
    'DiffCounts',
    'DiffRow',
    'DiffRowType',
    'EqualRow',
    'ModifiedRow',
    'PairClassification',
    'RemovedRow',
    'Span',
    'SpanClass',
    'ChangeNavigator',
]
