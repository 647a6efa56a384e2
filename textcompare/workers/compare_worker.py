"""
Workers and controllers for text comparison.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from textcompare.core.diff.text_diff import TextDiffEngine
from textcompare.core.models import ComparisonOptions, ComparisonResult
from textcompare.core.navigation import ChangeNavigator
from textcompare.services.cache import ComparisonCache
from textcompare.services.file_io import FileIOService
from textcompare.services.settings import ComparisonSettings
from textcompare.workers.base_worker import BaseWorker


class TextCompareWorker(BaseWorker):
    """
    Worker for comparing two text files.

    Reads both files through FileIOService, then runs the diff engine.
    """

    def __init__(
        self,
        left_path: str | Path,
        right_path: str | Path,
        options: Optional[ComparisonOptions] = None,
        encoding: Optional[str] = None,
        file_io: Optional[FileIOService] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent=parent)
        self.left_path = Path(left_path)
        self.right_path = Path(right_path)
        self.options = options or ComparisonOptions()
        self.encoding = encoding
        self.file_io = file_io or FileIOService()

    def do_work(self) -> ComparisonResult:
        """Read both files and compare them."""
        self.report_status(f"Comparing {self.left_path.name}...")

        self.report_progress(0, 100, "Reading left file...")
        left_text = self._read(self.left_path, "left")
        self.check_cancelled()

        self.report_progress(50, 100, "Reading right file...")
        right_text = self._read(self.right_path, "right")
        self.check_cancelled()

        self.report_status("Computing differences...")
        result = TextDiffEngine(self.options).compare(left_text, right_text)

        self.report_progress(100, 100, "Complete")
        self.report_status("Complete")
        return result

    def _read(self, path: Path, side: str) -> str:
        read_result = self.file_io.read_file(path, encoding=self.encoding)
        if not read_result.success:
            if read_result.is_binary:
                raise IOError(f"File appears to be binary and cannot be compared as text: {path}")
            raise IOError(f"Failed to read {side} file: {read_result.error}")
        return read_result.content.content


class TextCompareWorkerFromContent(BaseWorker):
    """
    Worker for comparing text content directly.

    Useful when content is already in memory.
    """

    def __init__(
        self,
        left_content: str,
        right_content: str,
        options: Optional[ComparisonOptions] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent=parent)
        self.left_content = left_content
        self.right_content = right_content
        self.options = options or ComparisonOptions()

    def do_work(self) -> ComparisonResult:
        self.report_status("Computing differences...")
        return TextDiffEngine(self.options).compare(self.left_content, self.right_content)


class LiveCompareController(QObject):
    """
    Re-runs the comparison whenever either text changes.

    Edits are debounced with a single-shot timer and results are
    memoized, so bursts of keystrokes trigger one comparison and
    returning to earlier text is free.
    """

    # New result after a (debounced) change
    result_ready = pyqtSignal(object)  # ComparisonResult

    # Comparison failed: (error_type, message)
    error = pyqtSignal(str, str)

    def __init__(
        self,
        options: Optional[ComparisonOptions] = None,
        debounce_ms: int = 300,
        cache: Optional[ComparisonCache] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self._options = options or ComparisonOptions()
        self._left_text = ""
        self._right_text = ""
        self._result: Optional[ComparisonResult] = None
        self.cache = cache if cache is not None else ComparisonCache()
        self.navigator = ChangeNavigator()

        self._delay_timer = QTimer(self)
        self._delay_timer.setSingleShot(True)
        self._delay_timer.setInterval(debounce_ms)
        self._delay_timer.timeout.connect(self.compare_now)

    @classmethod
    def from_settings(
        cls,
        settings: ComparisonSettings,
        parent: Optional[QObject] = None
    ) -> 'LiveCompareController':
        """Build a controller with the persisted delay, cache size and options."""
        return cls(
            options=settings.to_options(),
            debounce_ms=settings.debounce_ms,
            cache=ComparisonCache(max_size=settings.cache_size),
            parent=parent
        )

    @property
    def debounce_ms(self) -> int:
        return self._delay_timer.interval()

    @property
    def options(self) -> ComparisonOptions:
        return self._options

    @property
    def left_text(self) -> str:
        return self._left_text

    @property
    def right_text(self) -> str:
        return self._right_text

    @property
    def result(self) -> Optional[ComparisonResult]:
        """Latest result, or None before the first comparison."""
        return self._result

    @property
    def is_pending(self) -> bool:
        """True while a debounced comparison is scheduled."""
        return self._delay_timer.isActive()

    def set_left_text(self, text: str) -> None:
        self._left_text = text
        self._schedule()

    def set_right_text(self, text: str) -> None:
        self._right_text = text
        self._schedule()

    def set_options(self, options: ComparisonOptions) -> None:
        self._options = options
        self._schedule()

    def clear_all(self) -> None:
        """Clear both texts and compare immediately."""
        self._delay_timer.stop()
        self._left_text = ""
        self._right_text = ""
        self.compare_now()

    def compare_now(self) -> Optional[ComparisonResult]:
        """Run the comparison immediately, cancelling any pending one."""
        self._delay_timer.stop()
        try:
            result = self.cache.get_or_compute(self._left_text, self._right_text, self._options)
        except Exception as e:
            logging.error(f"LiveCompareController - Comparison failed: {e}")
            self.error.emit(type(e).__name__, str(e))
            return None

        self._result = result
        self.navigator.reset(result.changed_row_indices)
        self.result_ready.emit(result)
        return result

    def _schedule(self) -> None:
        """Restart the debounce timer."""
        self._delay_timer.stop()
        self._delay_timer.start()
