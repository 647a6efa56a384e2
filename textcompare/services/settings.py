"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from enum import Enum, auto
from pathlib import Path
from typing import Any, Callable, Optional

from textcompare.core.models import ComparisonOptions, MIN_TOKENS, SIMILARITY_THRESHOLD


class DiffStyle(Enum):
    """Diff display style."""
    SIDE_BY_SIDE = auto()
    INLINE = auto()
    HTML = auto()

    @classmethod
    def from_string(cls, value: str) -> 'DiffStyle':
        """Create from a CLI or settings string such as 'side-by-side'."""
        try:
            return cls[value.upper().replace('-', '_')]
        except (KeyError, AttributeError):
            return cls.SIDE_BY_SIDE


@dataclass
class ComparisonSettings:
    """Settings for text comparison."""
    ignore_case: bool = False
    ignore_whitespace: bool = False
    similarity_threshold: float = SIMILARITY_THRESHOLD
    min_tokens: int = MIN_TOKENS
    normalize_line_endings: bool = True
    debounce_ms: int = 300
    cache_size: int = 32

    def to_options(self) -> ComparisonOptions:
        """Build the engine options for these settings."""
        return ComparisonOptions(
            ignore_case=self.ignore_case,
            ignore_whitespace=self.ignore_whitespace,
            similarity_threshold=self.similarity_threshold,
            min_tokens=self.min_tokens,
        )


@dataclass
class DisplaySettings:
    """Settings for rendering comparison results."""
    style: DiffStyle = DiffStyle.SIDE_BY_SIDE
    wrap_long_lines: bool = True
    width: int = 160
    tab_size: int = 4
    show_line_numbers: bool = True
    use_colors: bool = True


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    comparison: ComparisonSettings = field(default_factory=ComparisonSettings)
    display: DisplaySettings = field(default_factory=DisplaySettings)


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None
        self._observers: list[Callable[[ApplicationSettings], None]] = []

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'TextCompare' / 'settings.json'
        config_home = os.environ.get('XDG_CONFIG_HOME',
                                     os.path.expanduser('~/.config'))
        return Path(config_home) / 'textcompare' / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logging.warning(f"SettingsManager - Could not load {self.settings_path}: {e}")
            return ApplicationSettings()

        if not isinstance(data, dict):
            logging.warning(f"SettingsManager - Ignoring malformed settings in {self.settings_path}")
            return ApplicationSettings()

        return self._from_dict(data)

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(self._to_dict(settings), f, indent=2)
        except OSError as e:
            logging.error(f"SettingsManager - Failed to save {self.settings_path}: {e}")
            return False

        self._settings = settings
        self._notify_observers()
        return True

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def add_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Remove a settings change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        for callback in self._observers:
            try:
                callback(self._settings)
            except Exception as e:
                logging.warning(f"SettingsManager - Observer {callback!r} failed: {e}")

    def _to_dict(self, settings: ApplicationSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        def convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.name
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert(item) for item in obj]
            return obj

        return convert(asdict(settings))

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        def section(name: str) -> dict:
            value = data.get(name, {})
            return value if isinstance(value, dict) else {}

        def typed(source: dict, key: str, default: Any) -> Any:
            value = source.get(key, default)
            if isinstance(default, bool):
                return value if isinstance(value, bool) else default
            if isinstance(default, (int, float)) and not isinstance(value, bool):
                return value if isinstance(value, (int, float)) else default
            return default

        comparison_data = section('comparison')
        defaults = ComparisonSettings()
        comparison = ComparisonSettings(
            ignore_case=typed(comparison_data, 'ignore_case', defaults.ignore_case),
            ignore_whitespace=typed(comparison_data, 'ignore_whitespace', defaults.ignore_whitespace),
            similarity_threshold=float(typed(comparison_data, 'similarity_threshold',
                                             defaults.similarity_threshold)),
            min_tokens=int(typed(comparison_data, 'min_tokens', defaults.min_tokens)),
            normalize_line_endings=typed(comparison_data, 'normalize_line_endings',
                                         defaults.normalize_line_endings),
            debounce_ms=max(0, int(typed(comparison_data, 'debounce_ms', defaults.debounce_ms))),
            cache_size=max(1, int(typed(comparison_data, 'cache_size', defaults.cache_size))),
        )

        display_data = section('display')
        display_defaults = DisplaySettings()
        style = display_data.get('style', display_defaults.style.name)
        display = DisplaySettings(
            style=DiffStyle.from_string(style) if isinstance(style, str) else display_defaults.style,
            wrap_long_lines=typed(display_data, 'wrap_long_lines', display_defaults.wrap_long_lines),
            width=int(typed(display_data, 'width', display_defaults.width)),
            tab_size=int(typed(display_data, 'tab_size', display_defaults.tab_size)),
            show_line_numbers=typed(display_data, 'show_line_numbers',
                                    display_defaults.show_line_numbers),
            use_colors=typed(display_data, 'use_colors', display_defaults.use_colors),
        )

        return ApplicationSettings(comparison=comparison, display=display)
