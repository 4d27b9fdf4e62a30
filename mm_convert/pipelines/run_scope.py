"""
Run-scoped font tracking and the streaming part rewriter.

A run is the smallest span of text sharing one set of formatting
properties (``w:r`` in Word, ``a:r`` in DrawingML, ``r`` in shared
strings). Whether a text node gets transcoded depends only on the run
it sits in:

    OUTSIDE_RUN --run start--> IN_RUN --legacy font decl--> FONT_MATCHED
         ^                        |                              |
         +-------- run end -------+------------ run end ---------+

A new run start always begins again at IN_RUN. Font declarations seen
outside a run (paragraph defaults, end-of-paragraph properties) are
neither rewritten nor counted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from utils.font_utils import FontMapper, name_matches_any, tag_matches

from ..transcoder import transcode
from .base import PartOutcome
from .xml_stream import (
    EventKind,
    XMLEvent,
    decode_part,
    encode_part,
    escape_text,
    iter_events,
    rewrite_attributes,
)

logger = logging.getLogger(__name__)


class RunState(Enum):
    OUTSIDE_RUN = "outside"
    IN_RUN = "in_run"
    FONT_MATCHED = "font_matched"


@dataclass(frozen=True)
class RunFontRule:
    """Which element is a run and where a run declares its font."""
    run_tag: str
    font_tags: tuple[str, ...]
    font_attrs: tuple[str, ...]


# Word: <w:r><w:rPr><w:rFonts w:ascii=".." w:hAnsi=".."/></w:rPr><w:t>..</w:t></w:r>
DOCX_RUN_RULE = RunFontRule("r", ("rFonts",), ("ascii", "hAnsi"))

# DrawingML: <a:r><a:rPr><a:latin typeface=".."/></a:rPr><a:t>..</a:t></a:r>
PPTX_RUN_RULE = RunFontRule("r", ("rPr", "latin"), ("typeface",))

# Shared strings: <r><rPr><rFont val=".."/></rPr><t>..</t></r>
SHARED_STRING_RUN_RULE = RunFontRule("r", ("rFont",), ("val",))


class RunScope:
    """State machine deciding whether text is inside a legacy-font run."""

    def __init__(self, rule: RunFontRule, font_mapper: FontMapper):
        self.rule = rule
        self.font_mapper = font_mapper
        self.state = RunState.OUTSIDE_RUN

    @property
    def in_scope(self) -> bool:
        return self.state is RunState.FONT_MATCHED

    def on_start(self, name: str) -> None:
        if tag_matches(name, self.rule.run_tag):
            self.state = RunState.IN_RUN

    def on_end(self, name: str) -> None:
        if tag_matches(name, self.rule.run_tag):
            self.state = RunState.OUTSIDE_RUN

    def is_font_declaration(self, name: str) -> bool:
        return (
            self.state is not RunState.OUTSIDE_RUN
            and name_matches_any(name, self.rule.font_tags)
        )

    def rewrite_font_declaration(self, event: XMLEvent) -> str:
        """
        Rename the legacy font on the watched attributes of a declaration.

        Marks the run as matched when at least one attribute named the
        legacy font. Other attributes are left byte-identical.
        """
        matched = False

        def replace(attr: str, value: str) -> Optional[str]:
            nonlocal matched
            if name_matches_any(attr, self.rule.font_attrs) and self.font_mapper.is_legacy(value):
                matched = True
                return self.font_mapper.target_font
            return None

        new_raw = rewrite_attributes(event, replace)
        if matched:
            self.state = RunState.FONT_MATCHED
        return new_raw


class RunScopedRewriter:
    """
    Stream one XML part, transcoding text inside legacy-font runs.

    Subclasses widen the scope through ``should_convert`` and observe
    elements through ``on_element``.
    """

    def __init__(
        self,
        rule: RunFontRule,
        font_mapper: FontMapper,
        convert_text: Callable[[str], str] = transcode,
        yield_every: int = 0,
        yield_hook: Optional[Callable[[], None]] = None,
    ):
        self.rule = rule
        self.font_mapper = font_mapper
        self.convert_text = convert_text
        self.yield_every = yield_every
        self.yield_hook = yield_hook

    def on_element(self, event: XMLEvent) -> None:
        """Hook called for every START/END/EMPTY event."""

    def should_convert(self, scope: RunScope) -> bool:
        return scope.in_scope

    def rewrite(self, data: bytes) -> PartOutcome:
        """
        Rewrite a part.

        Args:
            data: Original part bytes.

        Returns:
            PartOutcome with the new bytes and the number of text nodes
            that changed.

        Raises:
            MalformedXMLError: If the part cannot be tokenized to the end.
        """
        text, encoding = decode_part(data)
        scope = RunScope(self.rule, self.font_mapper)
        out: list[str] = []
        converted = 0

        for count, event in enumerate(iter_events(text), 1):
            if self.yield_hook and self.yield_every and count % self.yield_every == 0:
                self.yield_hook()

            kind = event.kind
            raw = event.raw
            if kind is EventKind.START:
                scope.on_start(event.name)
                self.on_element(event)
                if scope.is_font_declaration(event.name):
                    raw = scope.rewrite_font_declaration(event)
            elif kind is EventKind.EMPTY:
                self.on_element(event)
                if scope.is_font_declaration(event.name):
                    raw = scope.rewrite_font_declaration(event)
            elif kind is EventKind.END:
                scope.on_end(event.name)
                self.on_element(event)
            elif kind is EventKind.TEXT and self.should_convert(scope):
                original = event.text
                new_text = self.convert_text(original)
                if new_text != original:
                    raw = escape_text(new_text)
                    converted += 1
            out.append(raw)

        logger.debug("Transcoded %d text node(s)", converted)
        return PartOutcome(encode_part("".join(out), encoding), converted)

    def collect_fonts(self, data: bytes) -> list[str]:
        """List font names declared on watched attributes inside runs."""
        text, _ = decode_part(data)
        scope = RunScope(self.rule, self.font_mapper)
        fonts = []
        for event in iter_events(text):
            if event.kind is EventKind.START:
                scope.on_start(event.name)
            elif event.kind is EventKind.END:
                scope.on_end(event.name)
            if event.is_element and scope.is_font_declaration(event.name):
                fonts.extend(_watched_values(event, self.rule.font_attrs))
        return fonts


def _watched_values(event: XMLEvent, attrs: tuple[str, ...]) -> list[str]:
    return [value for name, value in event.attributes if name_matches_any(name, attrs)]
