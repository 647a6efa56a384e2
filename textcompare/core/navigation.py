"""
Sequential navigation through the changed rows of a comparison.
"""

from __future__ import annotations

from typing import Optional, Sequence


def next_position(position: int, count: int) -> int:
    """Step forward with wrap-around."""
    return (position + 1) % count


def previous_position(position: int, count: int) -> int:
    """Step backward with wrap-around."""
    return (position - 1 + count) % count


class ChangeNavigator:
    """
    Tracks a position within a result's changed_row_indices.

    The position starts before the first change, so the first next()
    lands on change 0 and the first previous() on the last change.
    """

    def __init__(self, changed_row_indices: Sequence[int] = ()):
        self._indices: tuple[int, ...] = tuple(changed_row_indices)
        self._position: Optional[int] = None

    def reset(self, changed_row_indices: Sequence[int]) -> None:
        """Replace the indices after a new comparison."""
        self._indices = tuple(changed_row_indices)
        self._position = None

    @property
    def count(self) -> int:
        return len(self._indices)

    @property
    def position(self) -> Optional[int]:
        return self._position

    @property
    def current_row_index(self) -> Optional[int]:
        """Row index of the current change, or None before the first step."""
        if self._position is None:
            return None
        return self._indices[self._position]

    def next(self) -> Optional[int]:
        """Move to the next change and return its row index."""
        if not self._indices:
            return None
        if self._position is None:
            self._position = 0
        else:
            self._position = next_position(self._position, len(self._indices))
        return self.current_row_index

    def previous(self) -> Optional[int]:
        """Move to the previous change and return its row index."""
        if not self._indices:
            return None
        if self._position is None:
            self._position = len(self._indices) - 1
        else:
            self._position = previous_position(self._position, len(self._indices))
        return self.current_row_index

    def __len__(self) -> int:
        return len(self._indices)
