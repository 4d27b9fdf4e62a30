"""
Source Format Detection Utility.

Classifies a source file as txt/docx/xlsx/pptx and lists the fonts it
declares, so the user can find the legacy font name to convert.
"""

from __future__ import annotations

import zipfile
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import SourceNotFoundError
from .pipelines.base import ConversionConfig, FileType
from .pipelines.office_xml import get_handler


@dataclass
class SourceInfo:
    """Information about a conversion source."""
    file_type: Optional[FileType]
    confidence: float = 0.0  # 0.0 to 1.0
    entries: int = 0
    details: str = ""


def detect_source_format(path: Path) -> SourceInfo:
    """
    Detect the type of a source file.

    Uses two signals:
    1. File extension (case-insensitive)
    2. For packages, whether the expected main part is present

    Args:
        path: Path to the source file.

    Returns:
        SourceInfo with detected type and confidence.

    Raises:
        SourceNotFoundError: If the path does not exist.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceNotFoundError()

    file_type = FileType.from_path(path)
    if file_type is None:
        return SourceInfo(None, details=f"Unsupported extension: {path.suffix or '(none)'}")
    if file_type is FileType.TXT:
        return SourceInfo(file_type, confidence=1.0, details="Plain text, converted as a whole")

    try:
        with zipfile.ZipFile(path) as zf:
            names = zf.namelist()
    except (zipfile.BadZipFile, OSError) as e:
        return SourceInfo(file_type, confidence=0.0, details=f"Not a readable zip package: {e}")

    main_part = get_handler(file_type).main_part
    if main_part in names:
        return SourceInfo(
            file_type,
            confidence=1.0,
            entries=len(names),
            details=f"Found {main_part}",
        )
    return SourceInfo(
        file_type,
        confidence=0.5,
        entries=len(names),
        details=f"Zip package without {main_part}",
    )


def collect_font_names(path: Path, config: Optional[ConversionConfig] = None) -> Counter:
    """
    Count the font names declared in the parts a conversion would touch.

    Args:
        path: Source package.
        config: Decides which parts are scanned (``include_extra_parts``).

    Returns:
        Counter of font name -> number of declarations. Empty for text
        files, which carry no font information.
    """
    file_type = FileType.from_path(path)
    if file_type is None or not file_type.is_package:
        return Counter()
    return get_handler(file_type, config).collect_font_names(Path(path))


def print_source_info(path: Path, config: Optional[ConversionConfig] = None) -> None:
    """Print detection results and the font inventory for a source file."""
    info = detect_source_format(path)

    print(f"Source Detection for: {path}")
    print(f"  Detected Type: {info.file_type.value if info.file_type else 'unsupported'}")
    print(f"  Confidence: {info.confidence:.0%}")
    print(f"  Details: {info.details}")
    if info.file_type is None or not info.file_type.is_package or info.confidence == 0.0:
        return

    print(f"  Entries: {info.entries}")
    fonts = collect_font_names(path, config)
    if not fonts:
        print("  Fonts: (none declared)")
        return
    print("  Fonts:")
    for name, count in fonts.most_common():
        print(f"    {name}: {count}")
