"""
Formatters projecting a ComparisonResult onto text output.

The engine emits abstract spans; escaping and colouring belong here.
"""

from __future__ import annotations

import html
import textwrap
from itertools import groupby
from typing import Iterator, Optional, Sequence

from textcompare.core.models import (
    ComparisonResult,
    DiffRow,
    DiffRowType,
    Span,
    SpanClass,
)


class AnsiStyle:
    """ANSI escape sequences for terminal output."""
    RESET = '\033[0m'
    ADDED = '\033[32m'
    REMOVED = '\033[31m'
    MODIFIED = '\033[33m'
    ADDED_SPAN = '\033[1;42;30m'
    REMOVED_SPAN = '\033[1;41;30m'
    LINE_NUMBER = '\033[90m'


ROW_MARKERS = {
    DiffRowType.EQUAL: '   ',
    DiffRowType.ADDED: ' > ',
    DiffRowType.REMOVED: ' < ',
    DiffRowType.MODIFIED: ' | ',
}

ROW_PREFIXES = {
    DiffRowType.EQUAL: ' ',
    DiffRowType.ADDED: '+',
    DiffRowType.REMOVED: '-',
}


def _expand(text: str, tab_size: int) -> str:
    return text.rstrip('\r').replace('\t', ' ' * tab_size)


def _bracket(span: Span, text: str) -> str:
    if span.span_class == SpanClass.ADDED:
        return f"{{+{text}+}}"
    if span.span_class == SpanClass.REMOVED:
        return f"[-{text}-]"
    return text


Piece = tuple[str, Optional[SpanClass]]


class SideBySideFormatter:
    """
    Format comparison results as two columns.

    Modified rows are drawn from their spans: changed substrings are
    highlighted with ANSI colours, or bracketed as [-x-] / {+x+} when
    colours are off.
    """

    def __init__(
        self,
        width: int = 160,
        tab_size: int = 4,
        wrap_long_lines: bool = True,
        show_line_numbers: bool = True,
        use_colors: bool = False
    ):
        self.width = width
        self.tab_size = tab_size
        self.wrap_long_lines = wrap_long_lines
        self.show_line_numbers = show_line_numbers
        self.use_colors = use_colors

    @property
    def column_width(self) -> int:
        return max(10, (self.width - len(ROW_MARKERS[DiffRowType.EQUAL])) // 2)

    def format(self, result: ComparisonResult) -> Iterator[str]:
        """Yield one output line per display line."""
        for row in result.rows:
            yield from self.format_row(row)

    def format_row(self, row: DiffRow) -> Iterator[str]:
        """
        Format a single row.

        Yields more than one line when wrapping is enabled and either
        side is longer than its column.
        """
        left = self._cells(row.left_line_number, self._pieces(row.left_content, row.left_spans))
        right = self._cells(row.right_line_number, self._pieces(row.right_content, row.right_spans))
        marker = ROW_MARKERS[row.row_type]
        blank = ' ' * self.column_width

        for index in range(max(len(left), len(right))):
            left_cell = left[index] if index < len(left) else blank
            right_cell = right[index] if index < len(right) else ''
            yield f"{left_cell}{marker if index == 0 else '   '}{right_cell}".rstrip()

    def _pieces(
        self,
        content: Optional[str],
        spans: Optional[Sequence[Span]]
    ) -> Optional[list[Piece]]:
        if content is None:
            return None
        if spans is None:
            return [(_expand(content, self.tab_size), None)]
        if self.use_colors:
            return [(_expand(span.text, self.tab_size), span.span_class if span.is_change else None)
                    for span in spans]
        return [(_bracket(span, _expand(span.text, self.tab_size)), None) for span in spans]

    def _cells(self, line_number: Optional[int], pieces: Optional[list[Piece]]) -> list[str]:
        if pieces is None:
            return [' ' * self.column_width]

        text = ''.join(piece for piece, _ in pieces)
        classes = [span_class for piece, span_class in pieces for _ in piece]
        prefix = f"{line_number:4d}: " if self.show_line_numbers else ""
        max_content = self.column_width - len(prefix)

        suffix = ""
        if len(text) <= max_content:
            chunks = [text]
        elif self.wrap_long_lines:
            chunks = textwrap.wrap(
                text, max_content, drop_whitespace=False, replace_whitespace=False
            ) or ['']
        else:
            chunks = [text[:max_content - 3]]
            suffix = "..."

        cells = []
        offset = 0
        for index, chunk in enumerate(chunks):
            lead = prefix if index == 0 else ' ' * len(prefix)
            body = self._paint(chunk, classes[offset:offset + len(chunk)]) + suffix
            offset += len(chunk)
            padding = ' ' * max(0, self.column_width - len(lead) - len(chunk) - len(suffix))
            cells.append(f"{lead}{body}{padding}")
        return cells

    @staticmethod
    def _paint(chunk: str, classes: Sequence[Optional[SpanClass]]) -> str:
        """Wrap runs of changed characters in ANSI highlight codes."""
        parts = []
        for span_class, run in groupby(zip(chunk, classes), key=lambda pair: pair[1]):
            text = ''.join(char for char, _ in run)
            if span_class == SpanClass.ADDED:
                parts.append(f"{AnsiStyle.ADDED_SPAN}{text}{AnsiStyle.RESET}")
            elif span_class == SpanClass.REMOVED:
                parts.append(f"{AnsiStyle.REMOVED_SPAN}{text}{AnsiStyle.RESET}")
            else:
                parts.append(text)
        return ''.join(parts)


class InlineFormatter:
    """
    Format comparison results as a single prefixed column.

    Modified rows print the left then the right line, with changed
    spans highlighted when colours are enabled.
    """

    def __init__(self, use_colors: bool = True, tab_size: int = 4, show_line_numbers: bool = True):
        self.use_colors = use_colors
        self.tab_size = tab_size
        self.show_line_numbers = show_line_numbers

    def format(self, result: ComparisonResult) -> Iterator[str]:
        for row in result.rows:
            yield from self.format_row(row)

    def format_row(self, row: DiffRow) -> Iterator[str]:
        equal = ROW_PREFIXES[DiffRowType.EQUAL]
        removed = ROW_PREFIXES[DiffRowType.REMOVED]
        added = ROW_PREFIXES[DiffRowType.ADDED]

        if row.row_type == DiffRowType.EQUAL:
            yield self._line(equal, row.left_line_number, row.right_line_number,
                             _expand(row.left_content, self.tab_size), '')
        elif row.row_type == DiffRowType.REMOVED:
            yield self._line(removed, row.left_line_number, None,
                             _expand(row.left_content, self.tab_size), AnsiStyle.REMOVED)
        elif row.row_type == DiffRowType.ADDED:
            yield self._line(added, None, row.right_line_number,
                             _expand(row.right_content, self.tab_size), AnsiStyle.ADDED)
        else:
            yield self._line(removed, row.left_line_number, None,
                             self._spans(row.left_spans), AnsiStyle.MODIFIED)
            yield self._line(added, None, row.right_line_number,
                             self._spans(row.right_spans), AnsiStyle.MODIFIED)

    def _spans(self, spans: Sequence[Span]) -> str:
        parts = []
        for span in spans:
            text = _expand(span.text, self.tab_size)
            if not self.use_colors:
                parts.append(_bracket(span, text))
            elif span.span_class == SpanClass.EQUAL:
                parts.append(text)
            elif span.span_class == SpanClass.ADDED:
                parts.append(f"{AnsiStyle.ADDED_SPAN}{text}{AnsiStyle.RESET}{AnsiStyle.MODIFIED}")
            else:
                parts.append(f"{AnsiStyle.REMOVED_SPAN}{text}{AnsiStyle.RESET}{AnsiStyle.MODIFIED}")
        return ''.join(parts)

    def _line(
        self,
        prefix: str,
        left_number: Optional[int],
        right_number: Optional[int],
        text: str,
        color: str
    ) -> str:
        numbers = ""
        if self.show_line_numbers:
            left = f"{left_number:4d}" if left_number is not None else "    "
            right = f"{right_number:4d}" if right_number is not None else "    "
            numbers = f"{left} {right} "
            if self.use_colors:
                numbers = f"{AnsiStyle.LINE_NUMBER}{numbers}{AnsiStyle.RESET}"

        if self.use_colors and color:
            return f"{numbers}{color}{prefix} {text}{AnsiStyle.RESET}"
        return f"{numbers}{prefix} {text}"


class HtmlFormatter:
    """Format comparison results as an HTML table fragment."""

    ROW_CLASSES = {
        DiffRowType.EQUAL: 'equal',
        DiffRowType.ADDED: 'added',
        DiffRowType.REMOVED: 'removed',
        DiffRowType.MODIFIED: 'modified',
    }

    SPAN_CLASSES = {
        SpanClass.EQUAL: 'span-equal',
        SpanClass.ADDED: 'span-added',
        SpanClass.REMOVED: 'span-removed',
    }

    STYLE = """<style>
table.textcompare { border-collapse: collapse; font-family: monospace; width: 100%; }
table.textcompare td { padding: 0 4px; white-space: pre-wrap; vertical-align: top; }
table.textcompare td.num { color: #999999; background: #f5f5f5; text-align: right; }
tr.added td.right { background: #e6ffe6; }
tr.removed td.left { background: #ffe6e6; }
tr.modified td.left, tr.modified td.right { background: #fffde6; }
span.span-added { background: #96ff96; }
span.span-removed { background: #ff9696; }
</style>"""

    def __init__(self, include_style: bool = True):
        self.include_style = include_style

    def format(self, result: ComparisonResult) -> Iterator[str]:
        if self.include_style:
            yield self.STYLE
        yield '<table class="textcompare">'
        for row in result.rows:
            yield self.format_row(row)
        yield '</table>'

    def format_row(self, row: DiffRow) -> str:
        if row.row_type == DiffRowType.MODIFIED:
            left = self._spans(row.left_spans)
            right = self._spans(row.right_spans)
        else:
            left = html.escape(row.left_content) if row.left_content is not None else ''
            right = html.escape(row.right_content) if row.right_content is not None else ''

        left_number = row.left_line_number if row.left_line_number is not None else ''
        right_number = row.right_line_number if row.right_line_number is not None else ''

        return (
            f'<tr class="{self.ROW_CLASSES[row.row_type]}" data-index="{row.index}">'
            f'<td class="num">{left_number}</td><td class="left">{left}</td>'
            f'<td class="num">{right_number}</td><td class="right">{right}</td></tr>'
        )

    def _spans(self, spans: Sequence[Span]) -> str:
        return ''.join(
            f'<span class="{self.SPAN_CLASSES[span.span_class]}">{html.escape(span.text)}</span>'
            for span in spans
        )
