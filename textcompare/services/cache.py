"""
Memoization of comparison results.

Callers re-run comparisons on every edit; identical
(left_text, right_text, options) triples reuse the earlier result.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Callable, Optional

from textcompare.core.diff.text_diff import compare
from textcompare.core.models import ComparisonOptions, ComparisonResult


CacheKey = tuple[str, str, ComparisonOptions]


class ComparisonCache:
    """Bounded least-recently-used cache of comparison results."""

    def __init__(
        self,
        max_size: int = 32,
        compute: Callable[[str, str, ComparisonOptions], ComparisonResult] = compare
    ):
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self._compute = compute
        self._entries: OrderedDict[CacheKey, ComparisonResult] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(
        self,
        left_text: str,
        right_text: str,
        options: ComparisonOptions
    ) -> Optional[ComparisonResult]:
        """Return a cached result without computing."""
        key = (left_text, right_text, options)
        result = self._entries.get(key)
        if result is not None:
            self._entries.move_to_end(key)
        return result

    def get_or_compute(
        self,
        left_text: str,
        right_text: str,
        options: Optional[ComparisonOptions] = None
    ) -> ComparisonResult:
        """Return the cached result, computing and storing it on a miss."""
        options = options or ComparisonOptions()
        cached = self.get(left_text, right_text, options)
        if cached is not None:
            self.hits += 1
            return cached

        self.misses += 1
        result = self._compute(left_text, right_text, options)
        self._entries[(left_text, right_text, options)] = result

        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
            logging.debug("ComparisonCache - Evicted least recently used result")

        return result

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries
