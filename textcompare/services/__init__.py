"""Services: file reading, settings persistence and result caching."""

from textcompare.services.cache import ComparisonCache
from textcompare.services.file_io import FileContent, FileIOService, LineEnding, ReadResult
from textcompare.services.settings import (
    ApplicationSettings,
    ComparisonSettings,
    DiffStyle,
    DisplaySettings,
    SettingsManager,
)

__all__ = [
    'ComparisonCache',
    'FileContent',
    'FileIOService',
    'LineEnding',
    'ReadResult',
    'ApplicationSettings',
    'ComparisonSettings',
    'DiffStyle',
    'DisplaySettings',
    'SettingsManager',
]
