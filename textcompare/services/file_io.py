"""
File I/O service for reading texts to compare.

Handles:
- Encoding detection
- Byte order marks
- Binary file detection
- Line ending normalization
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional, TextIO

import chardet


class LineEnding(Enum):
    """Line ending style."""
    LF = auto()      # Unix: \n
    CRLF = auto()    # Windows: \r\n
    CR = auto()      # Old Mac: \r
    MIXED = auto()   # Mixed endings
    NONE = auto()    # No line endings (single line)


@dataclass
class FileContent:
    """Container for file content with metadata."""
    content: str
    encoding: str
    line_ending: LineEnding
    bom: bool
    size: int

    @property
    def line_count(self) -> int:
        return self.content.count('\n') + 1


@dataclass
class ReadResult:
    """Result of a file read operation."""
    success: bool
    content: Optional[FileContent] = None
    error: Optional[str] = None
    is_binary: bool = False


class FileIOService:
    """Service for reading text files safely."""

    # Binary file signatures (magic bytes)
    BINARY_SIGNATURES = [
        b'\x89PNG',        # PNG
        b'\xff\xd8\xff',   # JPEG
        b'GIF8',           # GIF
        b'PK\x03\x04',     # ZIP
        b'\x1f\x8b',       # GZIP
        b'%PDF',           # PDF
        b'\x7fELF',        # ELF
    ]

    BYTE_ORDER_MARKS = [
        (b'\xef\xbb\xbf', 'utf-8-sig'),
        (b'\xff\xfe', 'utf-16'),
        (b'\xfe\xff', 'utf-16'),
    ]

    def __init__(
        self,
        default_encoding: str = 'utf-8',
        fallback_encoding: str = 'latin-1',
        binary_check_size: int = 8192,
        max_text_size: int = 50 * 1024 * 1024
    ):
        self.default_encoding = default_encoding
        self.fallback_encoding = fallback_encoding
        self.binary_check_size = binary_check_size
        self.max_text_size = max_text_size

    def read_file(
        self,
        path: Path | str,
        encoding: Optional[str] = None,
        normalize_line_endings: bool = True
    ) -> ReadResult:
        """
        Read a text file with automatic encoding detection.

        Args:
            path: Path to the file
            encoding: Force specific encoding (auto-detect if None)
            normalize_line_endings: Convert all line endings to \\n

        Returns:
            ReadResult with content or error information
        """
        path = Path(path)

        if not path.exists():
            return ReadResult(success=False, error=f"File not found: {path}")

        if not path.is_file():
            return ReadResult(success=False, error=f"Not a file: {path}")

        try:
            file_size = path.stat().st_size
            if file_size > self.max_text_size:
                return ReadResult(
                    success=False,
                    error=(f"File too large for text comparison ({file_size / 1024 / 1024:.2f} MB). "
                           f"Max size is {self.max_text_size / 1024 / 1024:.2f} MB.")
                )

            raw_content = path.read_bytes()
        except PermissionError:
            return ReadResult(success=False, error=f"Permission denied: {path}")
        except OSError as e:
            return ReadResult(success=False, error=f"OS error: {e}")

        if self.is_binary(raw_content[:self.binary_check_size]):
            logging.warning(f"FileIOService - Refusing binary file {path}")
            return ReadResult(success=False, is_binary=True,
                              error="File appears to be binary")

        return ReadResult(
            success=True,
            content=self.decode(raw_content, encoding, normalize_line_endings)
        )

    def read_stream(
        self,
        stream: Optional[TextIO] = None,
        normalize_line_endings: bool = True
    ) -> ReadResult:
        """Read all of a text stream (stdin by default)."""
        stream = stream or sys.stdin
        try:
            content = stream.read()
        except (OSError, UnicodeDecodeError) as e:
            return ReadResult(success=False, error=f"Could not read input: {e}")

        line_ending = self.detect_line_ending(content)
        if normalize_line_endings:
            content = self.normalize_line_endings(content)

        return ReadResult(
            success=True,
            content=FileContent(
                content=content,
                encoding=getattr(stream, 'encoding', None) or self.default_encoding,
                line_ending=line_ending,
                bom=False,
                size=len(content.encode('utf-8', errors='replace'))
            )
        )

    def decode(
        self,
        raw_content: bytes,
        encoding: Optional[str] = None,
        normalize_line_endings: bool = True
    ) -> FileContent:
        """Decode raw bytes into FileContent."""
        bom_encoding = self.bom_encoding(raw_content)
        bom = bom_encoding is not None
        detected_encoding = bom_encoding or encoding or self.detect_encoding(raw_content)

        try:
            content = raw_content.decode(detected_encoding)
        except (UnicodeDecodeError, LookupError):
            logging.warning(
                f"FileIOService - Could not decode as {detected_encoding}, "
                f"falling back to {self.fallback_encoding}"
            )
            content = raw_content.decode(self.fallback_encoding, errors='replace')
            detected_encoding = self.fallback_encoding

        line_ending = self.detect_line_ending(content)
        if normalize_line_endings:
            content = self.normalize_line_endings(content)

        return FileContent(
            content=content,
            encoding=detected_encoding,
            line_ending=line_ending,
            bom=bom,
            size=len(raw_content)
        )

    def bom_encoding(self, raw_content: bytes) -> Optional[str]:
        """Codec implied by a leading byte order mark, if any."""
        for mark, codec in self.BYTE_ORDER_MARKS:
            if raw_content.startswith(mark):
                return codec
        return None

    def is_binary(self, chunk: bytes) -> bool:
        """Check whether a leading chunk of a file looks binary."""
        if not chunk:
            return False

        # UTF-16 text carries null bytes but starts with a BOM
        if self.bom_encoding(chunk) is not None:
            return False

        if chunk.startswith(tuple(self.BINARY_SIGNATURES)) or b'\x00' in chunk:
            return True

        control = sum(1 for b in chunk if b < 9 or (13 < b < 32))
        return control / len(chunk) > 0.3

    def detect_encoding(self, content: bytes) -> str:
        """Detect encoding of content."""
        if not content:
            return self.default_encoding

        result = chardet.detect(content)

        if result['confidence'] > 0.7 and result['encoding']:
            encoding = result['encoding'].lower()
            if encoding == 'ascii':
                return 'utf-8'  # ASCII is subset of UTF-8
            return encoding

        return self.default_encoding

    @staticmethod
    def detect_line_ending(content: str) -> LineEnding:
        """Detect line ending style in content."""
        crlf = content.count('\r\n')
        counts = {
            LineEnding.CRLF: crlf,
            LineEnding.LF: content.count('\n') - crlf,
            LineEnding.CR: content.count('\r') - crlf,
        }
        present = [ending for ending, count in counts.items() if count]

        if not present:
            return LineEnding.NONE
        if len(present) > 1:
            return LineEnding.MIXED
        return present[0]

    @staticmethod
    def normalize_line_endings(content: str) -> str:
        """Convert \\r\\n and lone \\r to \\n."""
        return content.replace('\r\n', '\n').replace('\r', '\n')
