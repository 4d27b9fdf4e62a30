"""
Tests for run-scoped font tracking.

Tests:
- State transitions of the run scope
- Font declarations outside runs are ignored
- Streaming rewrite of a Word part
"""

from __future__ import annotations

from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import LEGACY_FONT, docx_document, docx_run, pptx_run, pptx_slide
from mm_convert.errors import MalformedXMLError
from mm_convert.pipelines.run_scope import (
    DOCX_RUN_RULE,
    PPTX_RUN_RULE,
    SHARED_STRING_RUN_RULE,
    RunScope,
    RunScopedRewriter,
    RunState,
)
from mm_convert.pipelines.xml_stream import XMLEvent, iter_events
from utils.font_utils import FontMapper


def element(raw: str) -> XMLEvent:
    return next(event for event in iter_events(raw) if event.is_element)


@pytest.fixture
def mapper() -> FontMapper:
    return FontMapper(LEGACY_FONT)


class TestRunScope:
    """Tests for the run state machine."""

    def test_starts_outside(self, mapper):
        scope = RunScope(DOCX_RUN_RULE, mapper)
        assert scope.state is RunState.OUTSIDE_RUN
        assert not scope.in_scope

    def test_run_start_and_end(self, mapper):
        scope = RunScope(DOCX_RUN_RULE, mapper)
        scope.on_start("w:r")
        assert scope.state is RunState.IN_RUN
        scope.on_end("w:r")
        assert scope.state is RunState.OUTSIDE_RUN

    def test_legacy_declaration_matches_run(self, mapper):
        scope = RunScope(DOCX_RUN_RULE, mapper)
        scope.on_start("w:r")
        assert scope.is_font_declaration("w:rFonts")
        declaration = element(f'<w:rFonts w:ascii="{LEGACY_FONT}" w:cs="{LEGACY_FONT}"/>')
        raw = scope.rewrite_font_declaration(declaration)
        assert raw == f'<w:rFonts w:ascii="Myanmar Text" w:cs="{LEGACY_FONT}"/>'
        assert scope.in_scope
        scope.on_end("w:r")
        assert not scope.in_scope

    def test_new_run_resets_match(self, mapper):
        scope = RunScope(DOCX_RUN_RULE, mapper)
        scope.on_start("w:r")
        scope.rewrite_font_declaration(element(f'<w:rFonts w:ascii="{LEGACY_FONT}"/>'))
        scope.on_start("w:r")
        assert scope.state is RunState.IN_RUN

    def test_other_font_does_not_match(self, mapper):
        scope = RunScope(DOCX_RUN_RULE, mapper)
        scope.on_start("w:r")
        raw = '<w:rFonts w:ascii="Arial" w:hAnsi="Arial"/>'
        assert scope.rewrite_font_declaration(element(raw)) == raw
        assert scope.state is RunState.IN_RUN

    def test_declaration_outside_run_is_ignored(self, mapper):
        scope = RunScope(DOCX_RUN_RULE, mapper)
        assert not scope.is_font_declaration("w:rFonts")

    def test_run_properties_are_not_a_run(self, mapper):
        scope = RunScope(DOCX_RUN_RULE, mapper)
        scope.on_start("w:rPr")
        assert scope.state is RunState.OUTSIDE_RUN

    def test_bare_names_match(self, mapper):
        scope = RunScope(SHARED_STRING_RUN_RULE, mapper)
        scope.on_start("r")
        assert scope.is_font_declaration("rFont")
        scope.rewrite_font_declaration(element(f'<rFont val="{LEGACY_FONT}"/>'))
        assert scope.in_scope


class TestRunScopedRewriter:
    """Tests for streaming part rewrites."""

    def test_only_legacy_runs_are_transcoded(self, mapper):
        source = docx_document(docx_run(LEGACY_FONT, "u"), docx_run("Arial", "u"))
        outcome = RunScopedRewriter(DOCX_RUN_RULE, mapper).rewrite(source.encode("utf-8"))

        expected = docx_document(
            '<w:r><w:rPr><w:rFonts w:ascii="Myanmar Text" w:hAnsi="Myanmar Text"/></w:rPr>'
            '<w:t>\u1000</w:t></w:r>',
            docx_run("Arial", "u"),
        )
        assert outcome.data.decode("utf-8") == expected
        assert outcome.texts_converted == 1

    def test_paragraph_mark_properties_untouched(self, mapper):
        source = docx_document(
            f'<w:pPr><w:rPr><w:rFonts w:ascii="{LEGACY_FONT}"/></w:rPr></w:pPr>',
            docx_run("Arial", "u"),
        )
        outcome = RunScopedRewriter(DOCX_RUN_RULE, mapper).rewrite(source.encode("utf-8"))
        assert outcome.data.decode("utf-8") == source
        assert outcome.texts_converted == 0

    def test_converted_text_is_escaped(self, mapper):
        source = docx_document(docx_run(LEGACY_FONT, "a &lt; b"))
        rewriter = RunScopedRewriter(DOCX_RUN_RULE, mapper, convert_text=lambda text: text + " & c")
        outcome = rewriter.rewrite(source.encode("utf-8"))
        assert "<w:t>a &lt; b &amp; c</w:t>" in outcome.data.decode("utf-8")

    def test_unchanged_text_keeps_original_spelling(self, mapper):
        source = docx_document(docx_run(LEGACY_FONT, "&#32;"))
        outcome = RunScopedRewriter(DOCX_RUN_RULE, mapper).rewrite(source.encode("utf-8"))
        assert "<w:t>&#32;</w:t>" in outcome.data.decode("utf-8")
        assert outcome.texts_converted == 0

    def test_drawingml_runs(self, mapper):
        source = pptx_slide(pptx_run(LEGACY_FONT, "c"), pptx_run("Calibri", "c"))
        outcome = RunScopedRewriter(PPTX_RUN_RULE, mapper).rewrite(source.encode("utf-8"))
        text = outcome.data.decode("utf-8")
        assert '<a:latin typeface="Myanmar Text"/></a:rPr><a:t>\u1001</a:t>' in text
        assert '<a:latin typeface="Calibri"/></a:rPr><a:t>c</a:t>' in text

    def test_yield_hook_called(self, mapper):
        calls = []
        source = docx_document(docx_run(LEGACY_FONT, "u"))
        rewriter = RunScopedRewriter(
            DOCX_RUN_RULE, mapper, yield_every=3, yield_hook=lambda: calls.append(1)
        )
        rewriter.rewrite(source.encode("utf-8"))
        assert calls

    def test_malformed_part_raises(self, mapper):
        with pytest.raises(MalformedXMLError):
            RunScopedRewriter(DOCX_RUN_RULE, mapper).rewrite(b"<w:document><w:body>")

    def test_collect_fonts(self, mapper):
        source = docx_document(
            '<w:pPr><w:rPr><w:rFonts w:ascii="Ignored"/></w:rPr></w:pPr>',
            docx_run(LEGACY_FONT, "u"),
            docx_run("Arial", "u"),
        )
        fonts = RunScopedRewriter(DOCX_RUN_RULE, mapper).collect_fonts(source.encode("utf-8"))
        assert fonts == [LEGACY_FONT, LEGACY_FONT, "Arial", "Arial"]
