"""
Main entry point for the Text Compare command line tool.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings loading
- Reading both inputs
- Rendering the comparison
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, TextIO

from textcompare import __version__
from textcompare.core.diff.formatter import HtmlFormatter, InlineFormatter, SideBySideFormatter
from textcompare.core.diff.text_diff import TextDiffEngine
from textcompare.core.models import ComparisonResult
from textcompare.services.file_io import FileIOService, ReadResult
from textcompare.services.settings import ApplicationSettings, DiffStyle, SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "textcompare"
APP_DISPLAY_NAME = "Text Compare"
APP_VERSION = __version__

# Exit codes follow diff(1)
EXIT_IDENTICAL = 0
EXIT_DIFFERENT = 1
EXIT_TROUBLE = 2

STDIN_PATH = '-'


@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    left_path: str = ""
    right_path: str = ""
    config_file: Optional[str] = None
    ignore_case: Optional[bool] = None
    ignore_whitespace: Optional[bool] = None
    style: Optional[DiffStyle] = None
    width: Optional[int] = None
    wrap_long_lines: Optional[bool] = None
    use_colors: Optional[bool] = None
    encoding: Optional[str] = None
    show_stats: bool = False
    log_level: str = "WARNING"
    log_file: Optional[Path] = None


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, stream: Optional[TextIO] = None):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        stream = stream or sys.stderr
        self.use_colors = use_colors and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Console output goes to stderr so it never mixes with the rendered diff.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True, stream=sys.stderr))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    # Reduce noise from encoding detection
    logging.getLogger('chardet').setLevel(logging.WARNING)

    return root_logger


# =============================================================================
# Command Line Parsing
# =============================================================================

def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Line-by-line text comparison with inline change highlighting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s old.txt new.txt               Side-by-side comparison
  %(prog)s -i -w old.txt new.txt         Ignore case and whitespace
  %(prog)s --style inline old.txt -      Compare a file against stdin
  %(prog)s --style html a.txt b.txt > diff.html
        """
    )

    parser.add_argument('left', help="Left (original) file, or '-' for stdin")
    parser.add_argument('right', help="Right (modified) file, or '-' for stdin")

    # Comparison options
    parser.add_argument(
        '-i', '--ignore-case',
        action='store_true',
        default=None,
        help='Ignore case differences'
    )
    parser.add_argument(
        '-w', '--ignore-whitespace',
        action='store_true',
        default=None,
        help='Ignore all whitespace when matching lines'
    )
    parser.add_argument(
        '--encoding',
        help='Force input encoding (auto-detected by default)'
    )

    # Display options
    parser.add_argument(
        '--style',
        choices=['side-by-side', 'inline', 'html'],
        default=None,
        help='Output style'
    )
    parser.add_argument(
        '--width',
        type=int,
        default=None,
        help='Total output width for side-by-side style'
    )
    parser.add_argument(
        '--no-wrap',
        action='store_true',
        help='Truncate long lines instead of wrapping them'
    )
    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable ANSI colors'
    )
    parser.add_argument(
        '--stats',
        action='store_true',
        help='Print row counts after the comparison'
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Configuration file path'
    )

    # Logging
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='WARNING',
        help='Log level'
    )
    parser.add_argument(
        '--log-file',
        help='Also write log output to this file'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {APP_VERSION}'
    )

    parsed = parser.parse_args(args)

    if parsed.left == STDIN_PATH and parsed.right == STDIN_PATH:
        parser.error("only one side can be read from stdin")

    result = CommandLineArgs()
    result.left_path = parsed.left
    result.right_path = parsed.right
    result.config_file = parsed.config
    result.ignore_case = parsed.ignore_case
    result.ignore_whitespace = parsed.ignore_whitespace
    result.encoding = parsed.encoding
    result.width = parsed.width
    result.show_stats = parsed.stats
    result.log_file = Path(parsed.log_file) if parsed.log_file else None

    if parsed.style:
        result.style = DiffStyle.from_string(parsed.style)
    if parsed.no_wrap:
        result.wrap_long_lines = False
    if parsed.no_color:
        result.use_colors = False

    result.log_level = 'DEBUG' if parsed.verbose else parsed.log_level

    return result


# =============================================================================
# Setup
# =============================================================================

def setup_settings(args: CommandLineArgs) -> ApplicationSettings:
    """Load persisted settings and apply command line overrides."""
    manager = SettingsManager(Path(args.config_file) if args.config_file else None)
    settings = manager.settings
    logging.debug(f"Loaded settings from {manager.settings_path}")

    comparison = settings.comparison
    display = settings.display

    if args.ignore_case is not None:
        comparison.ignore_case = args.ignore_case
    if args.ignore_whitespace is not None:
        comparison.ignore_whitespace = args.ignore_whitespace
    if args.style is not None:
        display.style = args.style
    if args.width is not None:
        display.width = args.width
    if args.wrap_long_lines is not None:
        display.wrap_long_lines = args.wrap_long_lines
    if args.use_colors is not None:
        display.use_colors = args.use_colors

    return settings


def read_input(
    path: str,
    file_io: FileIOService,
    settings: ApplicationSettings,
    encoding: Optional[str] = None
) -> ReadResult:
    """Read one side of the comparison from a file or stdin."""
    normalize = settings.comparison.normalize_line_endings
    if path == STDIN_PATH:
        return file_io.read_stream(sys.stdin, normalize_line_endings=normalize)
    return file_io.read_file(path, encoding=encoding, normalize_line_endings=normalize)


def render(
    result: ComparisonResult,
    settings: ApplicationSettings,
    use_colors: bool
) -> Iterator[str]:
    """Render a result in the configured style."""
    display = settings.display

    if display.style == DiffStyle.HTML:
        return HtmlFormatter().format(result)
    if display.style == DiffStyle.INLINE:
        return InlineFormatter(
            use_colors=use_colors,
            tab_size=display.tab_size,
            show_line_numbers=display.show_line_numbers
        ).format(result)
    return SideBySideFormatter(
        width=display.width,
        tab_size=display.tab_size,
        wrap_long_lines=display.wrap_long_lines,
        show_line_numbers=display.show_line_numbers,
        use_colors=use_colors
    ).format(result)


# =============================================================================
# Main Function
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Command line entry point.

    Returns:
        0 if the inputs are identical, 1 if they differ, 2 on trouble
    """
    args = parse_arguments(argv)

    logger = setup_logging(args.log_level, args.log_file)
    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")

    try:
        settings = setup_settings(args)
        file_io = FileIOService()

        left = read_input(args.left_path, file_io, settings, args.encoding)
        if not left.success:
            logger.error(f"Cannot read {args.left_path}: {left.error}")
            return EXIT_TROUBLE

        right = read_input(args.right_path, file_io, settings, args.encoding)
        if not right.success:
            logger.error(f"Cannot read {args.right_path}: {right.error}")
            return EXIT_TROUBLE

        engine = TextDiffEngine(settings.comparison.to_options())
        result = engine.compare(left.content.content, right.content.content)

        use_colors = settings.display.use_colors and sys.stdout.isatty()
        for line in render(result, settings, use_colors):
            print(line)

        if args.show_stats:
            print(f"{result.counts} ({result.counts.total_changes} changed rows)")

        logger.info(f"Comparison complete: {result.counts}")
        return EXIT_DIFFERENT if result.has_differences else EXIT_IDENTICAL

    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        return EXIT_TROUBLE


if __name__ == "__main__":
    sys.exit(main())
