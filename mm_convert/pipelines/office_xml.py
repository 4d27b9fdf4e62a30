"""
Office XML Handler - convert legacy-font text inside Office packages.

Office documents (DOCX, PPTX, XLSX) are ZIP archives containing XML files.
Each handler:
1. Decides which parts are in scope for its format
2. Streams those parts through a run-scoped rewriter
3. Copies every other part byte-for-byte into the new package
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from pathlib import Path
from typing import Optional

from ..errors import MalformedXMLError, UnsupportedFileTypeError
from .archive import ArchiveEntry, ArchiveRewriter
from .base import (
    ConversionConfig,
    ConversionResult,
    FileType,
    PartOutcome,
    ProgressReporter,
)
from .run_scope import DOCX_RUN_RULE, PPTX_RUN_RULE, RunFontRule, RunScopedRewriter
from .xlsx_fonts import (
    SHARED_STRINGS_PART,
    STYLES_PART,
    SharedStringsRewriter,
    StyleIndex,
    collect_shared_string_indices,
    collect_style_fonts,
    is_worksheet_part,
    parse_styles,
    rewrite_styles,
)

logger = logging.getLogger(__name__)


class OfficeXMLHandler:
    """Base class for Office package conversion."""

    run_rule: RunFontRule
    # Part that must exist for a package to really be of its claimed type
    main_part: str = ""

    def __init__(self, config: Optional[ConversionConfig] = None):
        self.config = config or ConversionConfig()
        self.font_mapper = self.config.font_mapper

    def is_scoped_part(self, name: str) -> bool:
        """Check whether a package entry is rewritten by this handler."""
        raise NotImplementedError

    def make_rewriter(self) -> RunScopedRewriter:
        return RunScopedRewriter(
            self.run_rule,
            self.font_mapper,
            yield_every=self.config.yield_every,
            yield_hook=self.config.yield_hook,
        )

    def transform_part(self, name: str, data: bytes) -> Optional[PartOutcome]:
        """Rewrite a scoped part; None means copy it unchanged."""
        if not self.is_scoped_part(name):
            return None
        logger.debug("Rewriting %s", name)
        return self.make_rewriter().rewrite(data)

    def convert(
        self,
        source_path: Path,
        target_path: Path,
        reporter: Optional[ProgressReporter] = None,
    ) -> ConversionResult:
        """
        Convert a package, streaming one entry at a time.

        Args:
            source_path: Source Office document.
            target_path: Output document path.
            reporter: Optional progress reporter.

        Returns:
            ConversionResult with per-part statistics.
        """
        rewriter = ArchiveRewriter(self.config, reporter)
        return rewriter.rewrite(source_path, target_path, self.transform_part)

    def collect_font_names(self, source_path: Path) -> Counter:
        """
        Count font names declared inside runs of the scoped parts.

        Parts that cannot be tokenized are skipped.
        """
        fonts: Counter = Counter()
        rewriter = self.make_rewriter()
        for entry in ArchiveRewriter(self.config).read_entries(source_path):
            if entry.is_dir or not self.is_scoped_part(entry.name):
                continue
            try:
                fonts.update(rewriter.collect_fonts(entry.data))
            except MalformedXMLError as e:
                logger.warning("Skipping %s while collecting fonts: %s", entry.name, e)
        return fonts


class DocxXMLHandler(OfficeXMLHandler):
    """Handler for DOCX (Word) documents."""

    run_rule = DOCX_RUN_RULE
    main_part = "word/document.xml"

    EXTRA_PART_RE = re.compile(r"word/(header\d*|footer\d*|footnotes|endnotes)\.xml")

    def is_scoped_part(self, name: str) -> bool:
        if name == self.main_part:
            return True
        return self.config.include_extra_parts and bool(self.EXTRA_PART_RE.fullmatch(name))


class PptxXMLHandler(OfficeXMLHandler):
    """Handler for PPTX (PowerPoint) presentations."""

    run_rule = PPTX_RUN_RULE
    main_part = "ppt/presentation.xml"

    SLIDES_PREFIX = "ppt/slides/"
    EXTRA_PREFIXES = ("ppt/notesSlides/", "ppt/slideLayouts/", "ppt/slideMasters/")

    def is_scoped_part(self, name: str) -> bool:
        if not name.endswith(".xml"):
            return False
        if name.startswith(self.SLIDES_PREFIX):
            return True
        return self.config.include_extra_parts and name.startswith(self.EXTRA_PREFIXES)


class XlsxXMLHandler(OfficeXMLHandler):
    """
    Handler for XLSX (Excel) spreadsheets.

    The whole package is buffered: which shared strings to transcode is
    only known after the styles and every worksheet have been read, and
    the shared-string part may come before them in the archive.
    """

    main_part = "xl/workbook.xml"

    def __init__(self, config: Optional[ConversionConfig] = None):
        super().__init__(config)
        self.style_index = StyleIndex()
        self.shared_indices: set[int] = set()

    def is_scoped_part(self, name: str) -> bool:
        return name in (STYLES_PART, SHARED_STRINGS_PART)

    def analyse(self, entries: list[ArchiveEntry]) -> None:
        """
        Run both resolver passes over buffered entries.

        A styles part or worksheet that cannot be tokenized contributes
        nothing; it will be reported again when rewritten or copied.
        """
        by_name = {entry.name: entry for entry in entries}
        self.style_index = StyleIndex()
        self.shared_indices = set()

        styles = by_name.get(STYLES_PART)
        if styles is not None:
            try:
                self.style_index = parse_styles(styles.data, self.font_mapper)
            except MalformedXMLError as e:
                logger.warning("Cannot index %s: %s", STYLES_PART, e)

        sheets = [entry for entry in entries if not entry.is_dir and is_worksheet_part(entry.name)]
        for sheet in sheets:
            try:
                collect_shared_string_indices(sheet.data, self.style_index, self.shared_indices)
            except MalformedXMLError as e:
                logger.warning("Cannot scan worksheet %s: %s", sheet.name, e)

        logger.info(
            "%d shared string(s) resolve to font %r",
            len(self.shared_indices), self.font_mapper.source_font,
        )

    def transform_part(self, name: str, data: bytes) -> Optional[PartOutcome]:
        if name == SHARED_STRINGS_PART:
            rewriter = SharedStringsRewriter(
                self.shared_indices,
                self.font_mapper,
                yield_every=self.config.yield_every,
                yield_hook=self.config.yield_hook,
            )
            return rewriter.rewrite(data)
        if name == STYLES_PART:
            return rewrite_styles(data, self.font_mapper)
        return None

    def convert(
        self,
        source_path: Path,
        target_path: Path,
        reporter: Optional[ProgressReporter] = None,
    ) -> ConversionResult:
        """Convert a workbook: read everything, resolve fonts, then write."""
        rewriter = ArchiveRewriter(self.config, reporter)
        entries = rewriter.read_entries(source_path)
        self.analyse(entries)
        return rewriter.write_entries(target_path, entries, self.transform_part)

    def collect_font_names(self, source_path: Path) -> Counter:
        """Count font names in the style part (font records and rich text)."""
        fonts: Counter = Counter()
        for entry in ArchiveRewriter(self.config).read_entries(source_path):
            if entry.name != STYLES_PART:
                continue
            try:
                fonts.update(collect_style_fonts(entry.data))
            except MalformedXMLError as e:
                logger.warning("Skipping %s while collecting fonts: %s", entry.name, e)
        return fonts


def get_handler(file_type: FileType, config: Optional[ConversionConfig] = None) -> OfficeXMLHandler:
    """
    Get appropriate handler for Office file type.

    Args:
        file_type: Detected package type.
        config: Conversion configuration.

    Returns:
        Appropriate handler instance.

    Raises:
        UnsupportedFileTypeError: For a type that is not an Office package.
    """
    if file_type is FileType.DOCX:
        return DocxXMLHandler(config)
    elif file_type is FileType.PPTX:
        return PptxXMLHandler(config)
    elif file_type is FileType.XLSX:
        return XlsxXMLHandler(config)
    else:
        raise UnsupportedFileTypeError()
