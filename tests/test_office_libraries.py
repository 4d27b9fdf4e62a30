"""
Integration tests against documents written by the Office libraries.

Tests:
- Word and PowerPoint files saved by python-docx and python-pptx
  convert and open again in the same libraries
- A workbook with a shared-string table converts and opens in openpyxl
- Legacy-font text is transcoded and its font renamed
- Text in other fonts is left alone
"""

from __future__ import annotations

from pathlib import Path

import pytest
from docx import Document
from openpyxl import load_workbook
from pptx import Presentation
from pptx.util import Inches

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import LEGACY_FONT, X_NS
from mm_convert import convert
from utils.font_utils import TARGET_FONT


R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_RELS_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
SHEET_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml"

WORKBOOK_CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    f'<Override PartName="/xl/workbook.xml" ContentType="{SHEET_CONTENT_TYPE}.sheet.main+xml"/>'
    f'<Override PartName="/xl/worksheets/sheet1.xml" ContentType="{SHEET_CONTENT_TYPE}.worksheet+xml"/>'
    f'<Override PartName="/xl/styles.xml" ContentType="{SHEET_CONTENT_TYPE}.styles+xml"/>'
    f'<Override PartName="/xl/sharedStrings.xml" ContentType="{SHEET_CONTENT_TYPE}.sharedStrings+xml"/>'
    "</Types>"
)

WORKBOOK_PACKAGE_RELS = (
    f'<Relationships xmlns="{PACKAGE_RELS_NS}">'
    f'<Relationship Id="rId1" Type="{R_NS}/officeDocument" Target="xl/workbook.xml"/>'
    "</Relationships>"
)

WORKBOOK = (
    f'<workbook xmlns="{X_NS}" xmlns:r="{R_NS}">'
    '<sheets><sheet name="Sheet1" sheetId="1" r:id="rId1"/></sheets>'
    "</workbook>"
)

WORKBOOK_RELS = (
    f'<Relationships xmlns="{PACKAGE_RELS_NS}">'
    f'<Relationship Id="rId1" Type="{R_NS}/worksheet" Target="worksheets/sheet1.xml"/>'
    f'<Relationship Id="rId2" Type="{R_NS}/styles" Target="styles.xml"/>'
    f'<Relationship Id="rId3" Type="{R_NS}/sharedStrings" Target="sharedStrings.xml"/>'
    "</Relationships>"
)

WORKBOOK_STYLES = (
    f'<styleSheet xmlns="{X_NS}">'
    '<fonts count="2">'
    '<font><sz val="11"/><name val="Calibri"/></font>'
    f'<font><sz val="11"/><name val="{LEGACY_FONT}"/></font>'
    "</fonts>"
    '<fills count="2"><fill><patternFill patternType="none"/></fill>'
    '<fill><patternFill patternType="gray125"/></fill></fills>'
    '<borders count="1"><border><left/><right/><top/><bottom/><diagonal/></border></borders>'
    '<cellStyleXfs count="1"><xf numFmtId="0" fontId="0" fillId="0" borderId="0"/></cellStyleXfs>'
    '<cellXfs count="2">'
    '<xf numFmtId="0" fontId="0" fillId="0" borderId="0" xfId="0"/>'
    '<xf numFmtId="0" fontId="1" fillId="0" borderId="0" xfId="0" applyFont="1"/>'
    "</cellXfs>"
    '<cellStyles count="1"><cellStyle name="Normal" xfId="0" builtinId="0"/></cellStyles>'
    "</styleSheet>"
)




class TestWordDocument:
    """Tests with a python-docx document."""

    @pytest.fixture
    def word_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "letter.docx"
        document = Document()
        paragraph = document.add_paragraph()
        legacy = paragraph.add_run("ausm;")
        legacy.font.name = LEGACY_FONT
        other = paragraph.add_run(" Hello")
        other.font.name = "Arial"
        document.save(str(path))
        return path

    def test_convert_and_reopen(self, word_file: Path, tmp_path: Path):
        target = tmp_path / "letter-unicode.docx"
        result = convert(word_file, target, source_font=LEGACY_FONT)

        runs = Document(str(target)).paragraphs[-1].runs
        assert [run.text for run in runs] == ["\u1000\u103B\u1031\u102C\u1038", " Hello"]
        assert [run.font.name for run in runs] == [TARGET_FONT, "Arial"]
        assert result.parts_failed == []


class TestPresentation:
    """Tests with a python-pptx presentation."""

    @pytest.fixture
    def slide_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "deck.pptx"
        presentation = Presentation()
        slide = presentation.slides.add_slide(presentation.slide_layouts[6])
        box = slide.shapes.add_textbox(Inches(1), Inches(1), Inches(4), Inches(1))
        paragraph = box.text_frame.paragraphs[0]
        for text, font in (("jum", LEGACY_FONT), ("jum", "Calibri")):
            run = paragraph.add_run()
            run.text = text
            run.font.name = font
        presentation.save(str(path))
        return path

    def test_convert_and_reopen(self, slide_file: Path, tmp_path: Path):
        target = tmp_path / "deck-unicode.pptx"
        convert(slide_file, target, source_font=LEGACY_FONT)

        slide = Presentation(str(target)).slides[0]
        runs = slide.shapes[0].text_frame.paragraphs[0].runs
        assert [run.text for run in runs] == ["\u1000\u103C\u102C", "jum"]
        assert [run.font.name for run in runs] == [TARGET_FONT, "Calibri"]


class TestWorkbook:
    """Tests with a workbook opened again in openpyxl."""

    @pytest.fixture
    def workbook_file(self, make_package) -> Path:
        # openpyxl stores strings inline, so the package is written by hand
        return make_package("book.xlsx", [
            ("[Content_Types].xml", WORKBOOK_CONTENT_TYPES),
            ("_rels/.rels", WORKBOOK_PACKAGE_RELS),
            ("xl/workbook.xml", WORKBOOK),
            ("xl/_rels/workbook.xml.rels", WORKBOOK_RELS),
            ("xl/styles.xml", WORKBOOK_STYLES),
            ("xl/sharedStrings.xml", (
                f'<sst xmlns="{X_NS}" count="2" uniqueCount="2">'
                "<si><t>tcifk</t></si><si><t>Total</t></si></sst>"
            )),
            ("xl/worksheets/sheet1.xml", (
                f'<worksheet xmlns="{X_NS}"><sheetData><row r="1">'
                '<c r="A1" s="1" t="s"><v>0</v></c>'
                '<c r="B1" t="s"><v>1</v></c>'
                '<c r="C1" s="1"><v>42</v></c>'
                "</row></sheetData></worksheet>"
            )),
        ])

    def test_convert_and_reopen(self, workbook_file: Path, tmp_path: Path):
        target = tmp_path / "book-unicode.xlsx"
        result = convert(workbook_file, target, source_font=LEGACY_FONT)

        sheet = load_workbook(str(target)).active
        assert sheet["A1"].value == "\u1021\u1001\u1004\u103A\u102F"
        assert sheet["A1"].font.name == TARGET_FONT
        assert sheet["B1"].value == "Total"
        assert sheet["B1"].font.name == "Calibri"
        assert sheet["C1"].value == 42
        assert result.parts_converted == ["xl/styles.xml", "xl/sharedStrings.xml"]
