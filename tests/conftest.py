"""
Shared fixtures for the textcompare test suite.
"""

import os

# Run Qt headless so the suite works without a display server.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from textcompare.core.models import ComparisonOptions


@pytest.fixture
def default_options() -> ComparisonOptions:
    """Options with every flag off."""
    return ComparisonOptions()


@pytest.fixture
def ignore_case_options() -> ComparisonOptions:
    return ComparisonOptions(ignore_case=True)


@pytest.fixture
def ignore_whitespace_options() -> ComparisonOptions:
    return ComparisonOptions(ignore_whitespace=True)


@pytest.fixture
def sample_texts() -> list[tuple[str, str]]:
    """Pairs of texts covering inserts, deletes, edits and unrelated lines."""
    return [
        ("", ""),
        ("", "one line"),
        ("one line", ""),
        ("a\nb\nc", "a\nb\nc"),
        ("a\nb\nc", "a\nx\nb\nc"),
        ("a\nb\nc", "a\nc"),
        ("foo", "bar"),
        ("hello world", "hello there"),
        ("alpha\nthe quick brown fox\nomega", "alpha\nthe quick red fox\nomega"),
        ("def f(x):\n    return x + 1\n", "def f(x, y):\n    return x + y\n\n# done"),
        ("line 1\nline 2\nline 3\nline 4", "line 4\nline 3\nline 2\nline 1"),
        ("Same\nsame\nSAME", "same\nSame"),
        ("\n\n\n", "\n"),
        ("trailing   \nspaces\t\there", "trailing\nspaces here"),
    ]
