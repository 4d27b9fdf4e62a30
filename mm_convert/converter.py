"""
Conversion entry points.

``convert`` is the one call a caller (CLI, UI command layer) needs: it
checks the source, picks the pipeline for the file type and returns a
``ConversionResult``. Every failure surfaces as a ``ConversionError``
whose message is meant to be shown to the user as-is.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Optional

from .errors import SourceNotFoundError, UnsupportedFileTypeError
from .pipelines.archive import write_bytes_atomic
from .pipelines.base import (
    ConversionConfig,
    ConversionResult,
    FileType,
    ProgressCallback,
    ProgressReporter,
)
from .pipelines.office_xml import get_handler
from .transcoder import transcode

logger = logging.getLogger(__name__)

# Tried in order after a BOM and the preferred encoding
ENCODING_CANDIDATES = ("utf-8", "cp1252")

_BOM_ENCODINGS = (
    (b"\xef\xbb\xbf", "utf-8-sig"),
    (b"\xff\xfe", "utf-16"),
    (b"\xfe\xff", "utf-16"),
)


def detect_bom(data: bytes) -> Optional[str]:
    """Return the encoding declared by a byte order mark, if any."""
    for bom, encoding in _BOM_ENCODINGS:
        if data.startswith(bom):
            return encoding
    return None


def decode_text(data: bytes, preferred_encoding: Optional[str] = None) -> tuple[str, str]:
    """
    Decode a text file.

    Detection order:
    1. BOM
    2. Preferred encoding (if given)
    3. Candidate list (utf-8, cp1252)
    4. latin-1 (always succeeds)

    Returns:
        (content, encoding) tuple.
    """
    bom_encoding = detect_bom(data)
    if bom_encoding:
        try:
            return data.decode(bom_encoding), bom_encoding
        except UnicodeDecodeError:
            logger.debug("BOM says %s but decoding failed", bom_encoding)

    if preferred_encoding:
        try:
            return data.decode(preferred_encoding), preferred_encoding
        except (UnicodeDecodeError, LookupError) as e:
            logger.warning("Cannot decode with %s (%s), detecting encoding", preferred_encoding, e)

    for encoding in ENCODING_CANDIDATES:
        try:
            return data.decode(encoding), encoding
        except UnicodeDecodeError:
            continue

    logger.warning("Falling back to latin-1")
    return data.decode("latin-1"), "latin-1"


def convert_text_file(
    source_path: Path,
    target_path: Path,
    config: Optional[ConversionConfig] = None,
    reporter: Optional[ProgressReporter] = None,
) -> ConversionResult:
    """
    Transcode a whole text file.

    Text files carry no font information, so the legacy font is assumed
    for all of it. Line endings are kept as they are; the output is
    written as UTF-8.

    Raises:
        SourceNotFoundError: If the source cannot be read.
        TargetWriteError: If the target cannot be written.
    """
    config = config or ConversionConfig()
    reporter = reporter or ProgressReporter()
    source_path = Path(source_path)

    try:
        data = source_path.read_bytes()
    except OSError as e:
        raise SourceNotFoundError(f"Cannot read source file: {e}") from e
    reporter.report(1, 3, "Read text file")

    text, encoding = decode_text(data, config.text_encoding)
    logger.debug("Decoded %s as %s", source_path.name, encoding)
    converted = transcode(text)
    reporter.report(2, 3, "Transcoded text")

    write_bytes_atomic(Path(target_path), converted.encode("utf-8"))
    reporter.report(3, 3, "Wrote text file")

    result = ConversionResult(output_path=Path(target_path))
    result.parts_converted.append(source_path.name)
    result.texts_converted = 1 if converted != text else 0
    return result


def convert(
    source_path: Path,
    target_path: Path,
    source_font: Optional[str] = None,
    progress: Optional[ProgressCallback] = None,
    config: Optional[ConversionConfig] = None,
) -> ConversionResult:
    """
    Convert a legacy-font document to Unicode Myanmar.

    Args:
        source_path: txt, docx, xlsx or pptx file.
        target_path: Where to write the converted file.
        source_font: Legacy font name; overrides ``config.source_font``.
        progress: Optional callback receiving ProgressEvent objects.
        config: Conversion configuration.

    Returns:
        ConversionResult with statistics and warnings.

    Raises:
        SourceNotFoundError: Source file does not exist.
        UnsupportedFileTypeError: Extension is not txt/docx/xlsx/pptx.
        ContainerError: Source package is not a readable zip.
        TargetWriteError: Target could not be written.
    """
    source_path = Path(source_path)
    target_path = Path(target_path)
    config = config or ConversionConfig()
    if source_font is not None:
        config = dataclasses.replace(config, source_font=source_font)

    if not source_path.is_file():
        raise SourceNotFoundError()
    file_type = FileType.from_path(source_path)
    if file_type is None:
        raise UnsupportedFileTypeError()

    logger.info(
        "Converting %s (%s) with font %r -> %r",
        source_path, file_type.value, config.source_font, config.target_font,
    )
    reporter = ProgressReporter(progress)

    if file_type is FileType.TXT:
        result = convert_text_file(source_path, target_path, config, reporter)
    else:
        result = get_handler(file_type, config).convert(source_path, target_path, reporter)

    reporter.finish(f"Converted {source_path.name}")
    logger.info("Finished %s: %s", target_path, result.summary())
    return result
