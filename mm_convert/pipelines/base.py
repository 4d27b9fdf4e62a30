"""
Pipeline base classes and enums for document conversion.

Supported source types:
- TXT: whole file transcoded, no font scoping
- DOCX: runs in word/document.xml that declare the legacy font
- PPTX: runs in ppt/slides/*.xml that declare the legacy font
- XLSX: shared strings resolved to the legacy font through styles
"""

from __future__ import annotations

import zipfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from utils.font_utils import DEFAULT_SOURCE_FONT, TARGET_FONT, FontMapper


class FileType(Enum):
    """Source file types the converter accepts."""
    TXT = "txt"
    DOCX = "docx"
    XLSX = "xlsx"
    PPTX = "pptx"

    @classmethod
    def from_path(cls, path: Path) -> Optional[FileType]:
        """Classify a path by its (case-insensitive) extension."""
        ext = Path(path).suffix.lower().lstrip(".")
        for file_type in cls:
            if file_type.value == ext:
                return file_type
        return None

    @property
    def is_package(self) -> bool:
        return self is not FileType.TXT


@dataclass
class ConversionConfig:
    """Configuration shared by every conversion pipeline."""

    # Fonts
    source_font: str = DEFAULT_SOURCE_FONT
    target_font: str = TARGET_FONT

    # Output package settings
    compression: int = zipfile.ZIP_DEFLATED

    # Plain text sources; output is always UTF-8
    text_encoding: Optional[str] = None

    # Headers/footers/notes/layouts in addition to the main parts
    include_extra_parts: bool = False

    # Cooperative yield point for long XML streams (no cancellation)
    yield_every: int = 2000
    yield_hook: Optional[Callable[[], None]] = None

    @property
    def font_mapper(self) -> FontMapper:
        return FontMapper(self.source_font, self.target_font)


@dataclass
class PartOutcome:
    """Rewritten bytes of one package part."""
    data: bytes
    texts_converted: int = 0


@dataclass
class ConversionResult:
    """Result of a conversion."""
    output_path: Path
    parts_converted: list[str] = field(default_factory=list)
    parts_copied: int = 0
    parts_failed: list[str] = field(default_factory=list)  # fell back to original bytes
    texts_converted: int = 0
    warnings: list[str] = field(default_factory=list)

    def record(self, name: str, outcome: PartOutcome) -> None:
        self.parts_converted.append(name)
        self.texts_converted += outcome.texts_converted

    def summary(self) -> str:
        return (
            f"{len(self.parts_converted)} part(s) converted, "
            f"{self.texts_converted} text node(s) transcoded, "
            f"{self.parts_copied} copied, {len(self.parts_failed)} failed"
        )


@dataclass
class ProgressEvent:
    """Coarse progress notification for a caller's UI."""
    step: int
    total: int
    percent: float
    message: str


ProgressCallback = Callable[[ProgressEvent], None]


class ProgressReporter:
    """
    Forwards progress to an optional callback.

    Steps may restart between phases (analysis, then rewrite), but the
    reported percentage never decreases.
    """

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.callback = callback
        self._percent = 0.0

    def report(self, step: int, total: int, message: str) -> None:
        if self.callback is None:
            return
        percent = 100.0 if total <= 0 else min(100.0, step * 100.0 / total)
        self._percent = max(self._percent, round(percent, 1))
        self.callback(ProgressEvent(step, total, self._percent, message))

    def finish(self, message: str = "Done") -> None:
        self.report(1, 1, message)
