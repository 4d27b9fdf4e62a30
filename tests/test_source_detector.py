"""
Tests for source detection and the font inventory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import CONTENT_TYPES, LEGACY_FONT
from mm_convert.errors import SourceNotFoundError
from mm_convert.pipelines import ConversionConfig, FileType
from mm_convert.source_detector import (
    collect_font_names,
    detect_source_format,
    print_source_info,
)


class TestDetectSourceFormat:
    """Tests for detect_source_format."""

    def test_docx_with_main_part(self, sample_docx: Path):
        info = detect_source_format(sample_docx)
        assert info.file_type is FileType.DOCX
        assert info.confidence == 1.0
        assert info.entries == 6

    def test_package_without_main_part(self, make_package):
        path = make_package("odd.pptx", [("[Content_Types].xml", CONTENT_TYPES)])
        info = detect_source_format(path)
        assert info.file_type is FileType.PPTX
        assert info.confidence == 0.5

    def test_xlsx_with_workbook_part(self, make_package):
        path = make_package("book.xlsx", [
            ("[Content_Types].xml", CONTENT_TYPES),
            ("xl/workbook.xml", "<workbook/>"),
        ])
        info = detect_source_format(path)
        assert info.file_type is FileType.XLSX
        assert info.confidence == 1.0
        assert info.details == "Found xl/workbook.xml"

    def test_not_a_zip(self, tmp_path: Path):
        path = tmp_path / "fake.docx"
        path.write_text("plain")
        info = detect_source_format(path)
        assert info.file_type is FileType.DOCX
        assert info.confidence == 0.0

    def test_text_file(self, tmp_path: Path):
        path = tmp_path / "notes.Txt"
        path.write_text("u")
        info = detect_source_format(path)
        assert info.file_type is FileType.TXT
        assert info.confidence == 1.0

    def test_unsupported(self, tmp_path: Path):
        path = tmp_path / "scan.pdf"
        path.write_bytes(b"%PDF")
        info = detect_source_format(path)
        assert info.file_type is None
        assert info.confidence == 0.0

    def test_missing(self, tmp_path: Path):
        with pytest.raises(SourceNotFoundError):
            detect_source_format(tmp_path / "missing.docx")


class TestCollectFontNames:
    """Tests for the font inventory."""

    def test_run_fonts_of_main_document(self, sample_docx: Path):
        assert collect_font_names(sample_docx) == {LEGACY_FONT: 2, "Arial": 2}

    def test_extra_parts_included_on_request(self, sample_docx: Path):
        fonts = collect_font_names(sample_docx, ConversionConfig(include_extra_parts=True))
        assert fonts == {LEGACY_FONT: 4, "Arial": 2}

    def test_text_files_have_no_fonts(self, tmp_path: Path):
        path = tmp_path / "notes.txt"
        path.write_text("u")
        assert collect_font_names(path) == {}

    def test_print_source_info(self, sample_docx: Path, capsys):
        print_source_info(sample_docx)
        out = capsys.readouterr().out
        assert "Detected Type: docx" in out
        assert "Confidence: 100%" in out
        assert f"{LEGACY_FONT}: 2" in out
