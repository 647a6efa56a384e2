"""
Background workers for non-blocking comparisons.

All workers use Qt signals for thread-safe communication
with the UI thread.
"""

from textcompare.workers.base_worker import (
    BaseWorker,
    CancelledException,
    WorkerSignals,
    WorkerState,
    WorkerThread,
)
from textcompare.workers.compare_worker import (
    LiveCompareController,
    TextCompareWorker,
    TextCompareWorkerFromContent,
)

__all__ = [
    # Base
    'BaseWorker',
    'CancelledException',
    'WorkerSignals',
    'WorkerState',
    'WorkerThread',
    # Compare
    'LiveCompareController',
    'TextCompareWorker',
    'TextCompareWorkerFromContent',
]
