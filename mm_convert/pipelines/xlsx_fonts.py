"""
Spreadsheet font-reference resolver and rewriters.

A worksheet cell never names its font. It points at a cell format
(``s`` -> ``<cellXfs>/<xf>``), the format points at a font record
(``fontId`` -> ``<fonts>/<font>``), and the font record holds the name.
Text of shared-string cells lives in a separate, workbook-wide table.

Deciding which shared strings to transcode therefore takes two passes
over the whole package:

1. ``parse_styles``: font records naming the legacy font, and the font
   id of every cell format.
2. ``collect_shared_string_indices``: every worksheet cell of type
   shared string whose format resolves to a legacy font.

``SharedStringsRewriter`` then transcodes those entries (plus any rich
text run that names the legacy font itself), and ``rewrite_styles``
renames the legacy font without touching any index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from utils.font_utils import FontMapper, name_matches_any, tag_matches

from ..transcoder import transcode
from .base import PartOutcome
from .run_scope import SHARED_STRING_RUN_RULE, RunScope, RunScopedRewriter
from .xml_stream import (
    EventKind,
    XMLEvent,
    decode_part,
    encode_part,
    get_attribute,
    iter_events,
    rewrite_attributes,
)

logger = logging.getLogger(__name__)

STYLES_PART = "xl/styles.xml"
SHARED_STRINGS_PART = "xl/sharedStrings.xml"
WORKSHEETS_PREFIX = "xl/worksheets/"

# Elements whose ``val`` attribute names a font
FONT_NAME_TAGS = ("name", "rFont")


def _int_attribute(event: XMLEvent, local: str, default: int) -> int:
    value = get_attribute(event, lambda name: tag_matches(name, local))
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _font_name(event: XMLEvent) -> Optional[str]:
    return get_attribute(event, lambda name: tag_matches(name, "val"))


def is_worksheet_part(name: str) -> bool:
    return name.startswith(WORKSHEETS_PREFIX) and name.endswith(".xml")


@dataclass
class StyleIndex:
    """Font records that name the legacy font, and the font of each cell format."""
    legacy_font_ids: set[int] = field(default_factory=set)
    format_font_ids: list[int] = field(default_factory=list)

    def is_legacy_format(self, format_index: int) -> bool:
        """Check whether a cell format resolves to a legacy font record."""
        if 0 <= format_index < len(self.format_font_ids):
            return self.format_font_ids[format_index] in self.legacy_font_ids
        return False


def parse_styles(data: bytes, font_mapper: FontMapper) -> StyleIndex:
    """
    Pass 1: index the style part.

    Font records are numbered in document order inside ``<fonts>``; a
    self-closing ``<font/>`` still takes a number. Cell formats are
    read from ``<cellXfs>`` only, ``fontId`` defaulting to 0.

    Raises:
        MalformedXMLError: If the style part cannot be tokenized.
    """
    text, _ = decode_part(data)
    index = StyleIndex()
    in_fonts = False
    in_cell_xfs = False
    font_id = 0

    for event in iter_events(text):
        kind = event.kind
        name = event.name
        if kind is EventKind.START:
            if tag_matches(name, "fonts"):
                in_fonts = True
                font_id = 0
            elif tag_matches(name, "cellXfs"):
                in_cell_xfs = True
        elif kind is EventKind.END:
            if tag_matches(name, "fonts"):
                in_fonts = False
            elif tag_matches(name, "cellXfs"):
                in_cell_xfs = False
            elif in_fonts and tag_matches(name, "font"):
                font_id += 1
            continue
        elif kind is not EventKind.EMPTY:
            continue

        if in_fonts and kind is EventKind.EMPTY and tag_matches(name, "font"):
            font_id += 1
        elif in_fonts and name_matches_any(name, FONT_NAME_TAGS):
            if font_mapper.is_legacy(_font_name(event) or ""):
                index.legacy_font_ids.add(font_id)
        elif in_cell_xfs and tag_matches(name, "xf"):
            index.format_font_ids.append(_int_attribute(event, "fontId", 0))

    logger.debug(
        "Styles: legacy font ids %s, %d cell format(s)",
        sorted(index.legacy_font_ids), len(index.format_font_ids),
    )
    return index


def collect_shared_string_indices(
    data: bytes,
    style_index: StyleIndex,
    indices: Optional[set[int]] = None,
) -> set[int]:
    """
    Pass 2: shared-string indices referenced by legacy-font cells.

    Args:
        data: One worksheet part.
        style_index: Result of ``parse_styles``.
        indices: Set to add to (shared across worksheets).

    Returns:
        The updated index set.

    Raises:
        MalformedXMLError: If the worksheet cannot be tokenized.
    """
    if indices is None:
        indices = set()
    if not style_index.legacy_font_ids:
        return indices

    text, _ = decode_part(data)
    cell_wanted = False
    in_value = False
    value = []

    for event in iter_events(text):
        kind = event.kind
        if kind is EventKind.START and tag_matches(event.name, "c"):
            cell_type = get_attribute(event, lambda name: tag_matches(name, "t"))
            format_index = _int_attribute(event, "s", 0)
            cell_wanted = cell_type == "s" and style_index.is_legacy_format(format_index)
        elif kind is EventKind.END and tag_matches(event.name, "c"):
            cell_wanted = False
        elif cell_wanted and kind is EventKind.START and tag_matches(event.name, "v"):
            in_value = True
            value = []
        elif in_value and kind is EventKind.TEXT:
            value.append(event.text)
        elif in_value and kind is EventKind.END and tag_matches(event.name, "v"):
            in_value = False
            try:
                indices.add(int("".join(value).strip()))
            except ValueError:
                logger.debug("Ignoring non-numeric shared string reference %r", "".join(value))

    return indices


class SharedStringsRewriter(RunScopedRewriter):
    """
    Rewrite ``xl/sharedStrings.xml``.

    Text is transcoded inside a rich text run whose ``rFont`` names the
    legacy font, or anywhere inside an ``<si>`` entry whose position is
    in ``indices``.
    """

    def __init__(
        self,
        indices: set[int],
        font_mapper: FontMapper,
        convert_text: Callable[[str], str] = transcode,
        yield_every: int = 0,
        yield_hook: Optional[Callable[[], None]] = None,
    ):
        super().__init__(
            SHARED_STRING_RUN_RULE, font_mapper, convert_text, yield_every, yield_hook
        )
        self.indices = indices
        self.si_index = -1
        self.in_si = False

    def rewrite(self, data: bytes) -> PartOutcome:
        self.si_index = -1
        self.in_si = False
        return super().rewrite(data)

    def on_element(self, event: XMLEvent) -> None:
        if not tag_matches(event.name, "si"):
            return
        if event.kind is EventKind.START:
            self.si_index += 1
            self.in_si = True
        elif event.kind is EventKind.EMPTY:
            self.si_index += 1
        else:
            self.in_si = False

    def should_convert(self, scope: RunScope) -> bool:
        return scope.in_scope or (self.in_si and self.si_index in self.indices)


def rewrite_styles(data: bytes, font_mapper: FontMapper) -> PartOutcome:
    """
    Rename the legacy font in ``xl/styles.xml``.

    Every ``name``/``rFont`` whose ``val`` is the legacy font gets the
    target font. Font record order, and so every ``fontId``, is kept.

    Raises:
        MalformedXMLError: If the style part cannot be tokenized.
    """
    text, encoding = decode_part(data)
    out = []
    renamed = 0

    def replace(attr: str, value: str) -> Optional[str]:
        if tag_matches(attr, "val") and font_mapper.is_legacy(value):
            return font_mapper.target_font
        return None

    for event in iter_events(text):
        raw = event.raw
        if event.is_element and name_matches_any(event.name, FONT_NAME_TAGS):
            new_raw = rewrite_attributes(event, replace)
            if new_raw != raw:
                renamed += 1
                raw = new_raw
        out.append(raw)

    logger.debug("Styles: renamed %d font reference(s)", renamed)
    return PartOutcome(encode_part("".join(out), encoding))


def collect_style_fonts(data: bytes) -> list[str]:
    """List every font name declared in a style part."""
    text, _ = decode_part(data)
    fonts = []
    for event in iter_events(text):
        if event.is_element and name_matches_any(event.name, FONT_NAME_TAGS):
            name = _font_name(event)
            if name is not None:
                fonts.append(name)
    return fonts
