"""
Tests for the Qt comparison workers and the live comparison controller.
"""

import pytest

from textcompare.core.models import ComparisonOptions, DiffRowType
from textcompare.services.cache import ComparisonCache
from textcompare.services.settings import ComparisonSettings
from textcompare.workers.base_worker import WorkerState, WorkerThread
from textcompare.workers.compare_worker import (
    LiveCompareController,
    TextCompareWorker,
    TextCompareWorkerFromContent,
)


@pytest.fixture
def text_files(tmp_path):
    left = tmp_path / "left.txt"
    right = tmp_path / "right.txt"
    left.write_text("a\nhello world\nc", encoding="utf-8")
    right.write_text("a\nhello there\nc\nd", encoding="utf-8")
    return left, right


class TestTextCompareWorkerFromContent:
    """Tests for TextCompareWorkerFromContent."""

    def test_emits_result(self, qtbot):
        worker = TextCompareWorkerFromContent("Hello", "hello", ComparisonOptions(ignore_case=True))
        with qtbot.waitSignal(worker.signals.finished) as blocker:
            worker.run()
        assert blocker.args[0].is_identical
        assert worker.state == WorkerState.COMPLETED
        assert worker.result is blocker.args[0]


class TestTextCompareWorker:
    """Tests for TextCompareWorker."""

    def test_compares_files(self, qtbot, text_files):
        worker = TextCompareWorker(*text_files)
        with qtbot.waitSignal(worker.signals.finished) as blocker:
            worker.run()
        result = blocker.args[0]
        assert [row.row_type for row in result.rows] == [
            DiffRowType.EQUAL, DiffRowType.MODIFIED, DiffRowType.EQUAL, DiffRowType.ADDED
        ]

    def test_reports_progress(self, qtbot, text_files):
        worker = TextCompareWorker(*text_files)
        progress = []
        worker.signals.progress.connect(lambda current, total, message: progress.append(current))
        worker.run()
        assert progress == [0, 50, 100]

    def test_missing_file_emits_error(self, qtbot, tmp_path, text_files):
        worker = TextCompareWorker(text_files[0], tmp_path / "missing.txt")
        with qtbot.waitSignal(worker.signals.error) as blocker:
            worker.run()
        error_type, message = blocker.args
        assert error_type == "OSError"
        assert "right" in message
        assert worker.state == WorkerState.FAILED

    def test_cancelled_before_run(self, qtbot, text_files):
        worker = TextCompareWorker(*text_files)
        worker.cancel()
        with qtbot.waitSignal(worker.signals.cancelled):
            worker.run()
        assert worker.state == WorkerState.CANCELLED
        assert worker.result is None

    def test_runs_in_thread(self, qtbot, text_files):
        worker = TextCompareWorker(*text_files)
        thread = WorkerThread(worker)
        with qtbot.waitSignal(worker.signals.finished, timeout=5000):
            thread.start()
        thread.wait(5000)
        assert thread.result.counts.modified == 1
        assert thread.error is None


class TestLiveCompareController:
    """Tests for LiveCompareController."""

    def test_debounced_comparison(self, qtbot):
        controller = LiveCompareController(debounce_ms=10)
        with qtbot.waitSignal(controller.result_ready, timeout=2000) as blocker:
            controller.set_left_text("hello world")
            controller.set_right_text("hello there")
            assert controller.is_pending
        result = blocker.args[0]
        assert result.counts.modified == 1
        assert controller.result is result
        assert not controller.is_pending

    def test_burst_of_edits_compares_once(self, qtbot):
        cache = ComparisonCache()
        controller = LiveCompareController(debounce_ms=20, cache=cache)
        with qtbot.waitSignal(controller.result_ready, timeout=2000):
            for text in ("h", "he", "hel", "hell", "hello"):
                controller.set_left_text(text)
        assert cache.misses == 1
        assert controller.result.left_lines() == ["hello"]

    def test_uses_supplied_empty_cache(self, qtbot):
        cache = ComparisonCache(max_size=4)
        controller = LiveCompareController(cache=cache)
        assert controller.cache is cache
        controller.compare_now()
        assert len(cache) == 1

    def test_from_settings(self, qtbot):
        settings = ComparisonSettings(ignore_case=True, debounce_ms=25, cache_size=5)
        controller = LiveCompareController.from_settings(settings)
        assert controller.debounce_ms == 25
        assert controller.cache.max_size == 5
        assert controller.options == ComparisonOptions(ignore_case=True)

    def test_repeat_text_hits_cache(self, qtbot):
        controller = LiveCompareController(debounce_ms=10)
        controller.set_left_text("a")
        controller.compare_now()
        controller.set_left_text("b")
        controller.compare_now()
        controller.set_left_text("a")
        controller.compare_now()
        assert controller.cache.hits == 1
        assert controller.cache.misses == 2

    def test_options_change_triggers_comparison(self, qtbot):
        controller = LiveCompareController(debounce_ms=10)
        controller.set_left_text("Hello")
        controller.set_right_text("hello")
        assert controller.compare_now().has_differences
        with qtbot.waitSignal(controller.result_ready, timeout=2000) as blocker:
            controller.set_options(ComparisonOptions(ignore_case=True))
        assert blocker.args[0].is_identical

    def test_navigator_reset_on_result(self, qtbot):
        controller = LiveCompareController()
        controller.set_left_text("a\nb\nc")
        controller.set_right_text("a\nx\nc\nd")
        result = controller.compare_now()
        assert controller.navigator.count == len(result.changed_row_indices)
        assert controller.navigator.next() == result.changed_row_indices[0]

    def test_clear_all(self, qtbot):
        controller = LiveCompareController(debounce_ms=1000)
        controller.set_left_text("something")
        with qtbot.waitSignal(controller.result_ready, timeout=500) as blocker:
            controller.clear_all()
        result = blocker.args[0]
        assert controller.left_text == controller.right_text == ""
        assert result.is_identical
        assert len(result.rows) == 1
        assert not controller.is_pending
