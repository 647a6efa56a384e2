"""
Background execution for comparisons.

A worker is a QObject that performs one job in `do_work` and reports
back through `WorkerSignals`; `WorkerThread` moves it onto a QThread.
Results, failures and cancellation each end the job with exactly one
terminal signal.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, Optional

from PyQt6.QtCore import QObject, QThread, QMutex, QMutexLocker, pyqtSignal, pyqtSlot


class WorkerState(Enum):
    """Lifecycle of a worker."""
    PENDING = auto()
    RUNNING = auto()
    CANCELLING = auto()
    CANCELLED = auto()
    COMPLETED = auto()
    FAILED = auto()


class WorkerSignals(QObject):
    """
    Signals emitted by a worker.

    Kept on a separate QObject so receivers in the GUI thread get
    queued delivery while the worker itself lives on its thread.
    """
    progress = pyqtSignal(int, int, str)    # (current, total, message)
    status = pyqtSignal(str)
    started = pyqtSignal()
    finished = pyqtSignal(object)           # ComparisonResult
    error = pyqtSignal(str, str)            # (error_type, message)
    cancelled = pyqtSignal()
    state_changed = pyqtSignal(object)      # WorkerState


class CancelledException(Exception):
    """Raised from check_cancelled() to abandon a job."""
    pass


class WorkerMeta(type(QObject), type(ABC)):
    pass


class BaseWorker(QObject, ABC, metaclass=WorkerMeta):
    """
    Base class for comparison jobs.

    Subclasses implement `do_work` and call `check_cancelled` between
    expensive steps (reading each input, before diffing).
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.signals = WorkerSignals()
        self._mutex = QMutex()
        self._state = WorkerState.PENDING
        self._cancel_requested = False
        self._result: Any = None
        self._error: Optional[tuple[str, str]] = None
        self._elapsed: Optional[float] = None

    @property
    def state(self) -> WorkerState:
        with QMutexLocker(self._mutex):
            return self._state

    def _set_state(self, state: WorkerState) -> None:
        with QMutexLocker(self._mutex):
            self._state = state
        self.signals.state_changed.emit(state)

    @property
    def is_cancelled(self) -> bool:
        with QMutexLocker(self._mutex):
            return self._cancel_requested

    @property
    def result(self) -> Any:
        """Value returned by do_work, or None until completed."""
        return self._result

    @property
    def error(self) -> Optional[tuple[str, str]]:
        """(error_type, message) after a failure."""
        return self._error

    @property
    def elapsed(self) -> Optional[float]:
        """Seconds spent in do_work, once the job has ended."""
        return self._elapsed

    def cancel(self) -> None:
        """Ask the job to stop at its next check_cancelled()."""
        with QMutexLocker(self._mutex):
            self._cancel_requested = True
            running = self._state == WorkerState.RUNNING
        if running:
            self._set_state(WorkerState.CANCELLING)

    @pyqtSlot()
    def run(self) -> None:
        """Run do_work and emit the matching terminal signal."""
        name = type(self).__name__
        self._set_state(WorkerState.RUNNING)
        self.signals.started.emit()
        started = time.perf_counter()

        try:
            result = self.do_work()
            self.check_cancelled()
        except CancelledException:
            self._elapsed = time.perf_counter() - started
            logging.info(f"{name} - Cancelled after {self._elapsed:.3f}s")
            self._set_state(WorkerState.CANCELLED)
            self.signals.cancelled.emit()
            return
        except Exception as e:
            self._elapsed = time.perf_counter() - started
            logging.error(f"{name} - {type(e).__name__}: {e}")
            self._error = (type(e).__name__, str(e))
            self._set_state(WorkerState.FAILED)
            self.signals.error.emit(type(e).__name__, str(e))
            return

        self._elapsed = time.perf_counter() - started
        logging.debug(f"{name} - Completed in {self._elapsed:.3f}s")
        self._result = result
        self._set_state(WorkerState.COMPLETED)
        self.signals.finished.emit(result)

    @abstractmethod
    def do_work(self) -> Any:
        """Perform the job and return its result."""
        pass

    def report_progress(self, current: int, total: int, message: str = "") -> None:
        self.signals.progress.emit(current, total, message)

    def report_status(self, message: str) -> None:
        self.signals.status.emit(message)

    def check_cancelled(self) -> None:
        """Raise CancelledException if cancel() has been called."""
        if self.is_cancelled:
            raise CancelledException("Comparison cancelled")


class WorkerThread(QThread):
    """
    QThread that owns a single worker.

    The thread starts the worker's run() and quits on any terminal
    signal; call wait() to join it.
    """

    def __init__(self, worker: BaseWorker, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.worker = worker
        self.worker.moveToThread(self)

        self.started.connect(self.worker.run)
        for terminal in (worker.signals.finished, worker.signals.error, worker.signals.cancelled):
            terminal.connect(self.quit)

    def cancel(self) -> None:
        self.worker.cancel()

    @property
    def result(self) -> Any:
        return self.worker.result

    @property
    def error(self) -> Optional[tuple[str, str]]:
        return self.worker.error
