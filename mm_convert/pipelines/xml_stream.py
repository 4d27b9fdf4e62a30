"""
Byte-preserving XML event stream.

Office parts are rewritten as a stream of events whose ``raw`` slices
concatenate back to the exact input text. Only events a rewriter
explicitly replaces change; namespaces, attribute order, quoting,
whitespace and entity spelling of everything else survive untouched.

Well-formedness, attribute values and character data come from expat
(``xml.parsers.expat``), the parser behind ``xml.etree``. Once expat
has accepted a part, a lexical walk over the same bytes cuts it into
events at the byte offsets expat reported. Anything expat rejects
raises ``MalformedXMLError`` so the caller can fall back to the part's
original bytes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional
from xml.parsers import expat
from xml.sax.saxutils import escape

from ..errors import MalformedXMLError


class EventKind(Enum):
    """Kinds of XML events produced by ``iter_events``."""
    START = "start"
    END = "end"
    EMPTY = "empty"  # self-closing element
    TEXT = "text"
    CDATA = "cdata"
    COMMENT = "comment"
    DECL = "decl"  # <?xml ...?>
    PI = "pi"
    DOCTYPE = "doctype"


Attributes = tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class XMLEvent:
    """
    One event with its exact source text.

    Attributes:
        kind: Event kind.
        raw: Source text of the event.
        name: Element name for START/END/EMPTY, prefix included.
        offset: Character offset of ``raw`` in the document.
        text: Character data of a TEXT event with references resolved.
        attributes: (name, value) pairs of a START/EMPTY event in
            document order, values as the parser reports them.
    """
    kind: EventKind
    raw: str
    name: str = ""
    offset: int = 0
    text: str = ""
    attributes: Attributes = ()

    @property
    def is_element(self) -> bool:
        return self.kind in (EventKind.START, EventKind.EMPTY)


_NAME = r"(?:[^\W\d]|:)[\w.:-]*"

_START_TAG_RE = re.compile(
    rf"<({_NAME})((?:\s+{_NAME}\s*=\s*(?:\"[^\"<]*\"|'[^'<]*'))*)\s*(/?)>"
)
_ATTRIBUTE_RE = re.compile(
    rf"({_NAME})(\s*=\s*)(?:\"([^\"]*)\"|'([^']*)')"
)

# Markup boundaries over bytes expat has already accepted
_TAG_BYTES_RE = re.compile(
    rb"""<[^\s/>]+(?:\s+[^\s=]+\s*=\s*(?:"[^"]*"|'[^']*'))*\s*/?>"""
)
_TAG_NAME_BYTES_RE = re.compile(rb"</?([^\s/>]+)")
_DOCTYPE_BYTES_RE = re.compile(rb"<!DOCTYPE[^\[>]*(?:\[.*?\])?\s*>", re.DOTALL)
_DECL_BYTES_RE = re.compile(rb"<\?xml\s")

_UTF8_BOM = b"\xef\xbb\xbf"

_BOMS = (
    (_UTF8_BOM, "utf-8"),
    (b"\xff\xfe", "utf-16-le"),
    (b"\xfe\xff", "utf-16-be"),
)


def decode_part(data: bytes) -> tuple[str, str]:
    """
    Decode an XML part, keeping any byte order mark as a character.

    Returns:
        (text, encoding) such that ``text.encode(encoding) == data``.

    Raises:
        MalformedXMLError: If the bytes are not valid in the detected
            encoding.
    """
    encoding = "utf-8"
    for bom, name in _BOMS:
        if data.startswith(bom):
            encoding = name
            break
    try:
        return data.decode(encoding), encoding
    except UnicodeDecodeError as e:
        raise MalformedXMLError(f"Cannot decode part as {encoding}: {e}", e.start)


def encode_part(text: str, encoding: str) -> bytes:
    return text.encode(encoding)


def _char_offset(data: bytes, byte_offset: int) -> int:
    return len(data[:byte_offset].decode("utf-8", "ignore"))


def _parse(data: bytes, skip: int) -> tuple[dict[int, Attributes], list[tuple[int, str]]]:
    """
    Run expat over ``data[skip:]``.

    Returns:
        Attributes keyed by the byte offset of their tag, and character
        data pieces with their byte offsets, both relative to ``data``.

    Raises:
        MalformedXMLError: If expat rejects the document.
    """
    attributes: dict[int, Attributes] = {}
    chardata: list[tuple[int, str]] = []

    # The document is always handed over as UTF-8, whatever it declares
    parser = expat.ParserCreate("utf-8")
    parser.ordered_attributes = True
    parser.specified_attributes = True

    def on_start(name: str, attrs: list[str]) -> None:
        attributes[parser.CurrentByteIndex + skip] = tuple(zip(attrs[::2], attrs[1::2]))

    def on_data(piece: str) -> None:
        chardata.append((parser.CurrentByteIndex + skip, piece))

    parser.StartElementHandler = on_start
    parser.CharacterDataHandler = on_data
    try:
        parser.Parse(data[skip:], True)
    except expat.ExpatError as e:
        offset = _char_offset(data, parser.ErrorByteIndex + skip)
        raise MalformedXMLError(str(e), offset) from e
    return attributes, chardata


def _find_close(data: bytes, pos: int, terminator: bytes, what: str) -> int:
    end = data.find(terminator, pos)
    if end < 0:
        raise MalformedXMLError(f"Unterminated {what}", pos)
    return end + len(terminator)


def _scan_markup(data: bytes, pos: int) -> tuple[EventKind, int]:
    """Return the kind and end offset of the markup starting at ``pos``."""
    if data.startswith(b"</", pos):
        return EventKind.END, _find_close(data, pos, b">", "end tag")
    if data.startswith(b"<!--", pos):
        return EventKind.COMMENT, _find_close(data, pos + 4, b"-->", "comment")
    if data.startswith(b"<![CDATA[", pos):
        return EventKind.CDATA, _find_close(data, pos + 9, b"]]>", "CDATA section")
    if data.startswith(b"<!DOCTYPE", pos):
        match = _DOCTYPE_BYTES_RE.match(data, pos)
        if not match:
            raise MalformedXMLError("Unterminated DOCTYPE", pos)
        return EventKind.DOCTYPE, match.end()
    if data.startswith(b"<?", pos):
        end = _find_close(data, pos + 2, b"?>", "processing instruction")
        kind = EventKind.DECL if _DECL_BYTES_RE.match(data, pos) else EventKind.PI
        return kind, end
    match = _TAG_BYTES_RE.match(data, pos)
    if not match:
        raise MalformedXMLError("Invalid start tag", pos)
    end = match.end()
    return (EventKind.EMPTY if data.endswith(b"/>", pos, end) else EventKind.START), end


def iter_events(text: str) -> Iterator[XMLEvent]:
    """
    Tokenize XML text into events.

    Args:
        text: Decoded XML document.

    Returns:
        Iterator over XMLEvent objects in document order. Joining their
        ``raw`` fields reproduces ``text`` exactly.

    Raises:
        MalformedXMLError: If expat finds the document not well-formed,
            including character references outside the XML character
            range. Raised before any event is produced.
    """
    data = text.encode("utf-8")
    skip = len(_UTF8_BOM) if data.startswith(_UTF8_BOM) else 0
    attributes, chardata = _parse(data, skip)
    return _walk(data, attributes, chardata)


def _walk(
    data: bytes,
    attributes: dict[int, Attributes],
    chardata: list[tuple[int, str]],
) -> Iterator[XMLEvent]:
    pos = 0
    offset = 0
    cursor = 0
    length = len(data)

    while pos < length:
        if data[pos:pos + 1] != b"<":
            end = data.find(b"<", pos)
            if end < 0:
                end = length
            # Pieces before ``pos`` belong to CDATA sections
            while cursor < len(chardata) and chardata[cursor][0] < pos:
                cursor += 1
            pieces = []
            while cursor < len(chardata) and chardata[cursor][0] < end:
                pieces.append(chardata[cursor][1])
                cursor += 1
            raw = data[pos:end].decode("utf-8")
            yield XMLEvent(EventKind.TEXT, raw, offset=offset, text="".join(pieces))
        else:
            kind, end = _scan_markup(data, pos)
            raw = data[pos:end].decode("utf-8")
            if kind in (EventKind.START, EventKind.EMPTY, EventKind.END):
                name = _TAG_NAME_BYTES_RE.match(data, pos).group(1).decode("utf-8")
                yield XMLEvent(kind, raw, name, offset, attributes=attributes.get(pos, ()))
            else:
                yield XMLEvent(kind, raw, offset=offset)
        offset += len(raw)
        pos = end


def escape_text(text: str) -> str:
    return escape(text)


def escape_attribute(value: str, quote: str = '"') -> str:
    if quote == '"':
        return escape(value, {'"': "&quot;"})
    return escape(value, {"'": "&apos;"})


def get_attribute(event: XMLEvent, match_name: Callable[[str], bool]) -> Optional[str]:
    """Return the value of the first attribute whose name satisfies ``match_name``."""
    for name, value in event.attributes:
        if match_name(name):
            return value
    return None


def rewrite_attributes(
    event: XMLEvent,
    replace: Callable[[str, str], Optional[str]],
) -> str:
    """
    Rewrite attribute values of a start or empty tag in place.

    Args:
        event: A START or EMPTY event.
        replace: Called with (name, value); returns the new value, or
            None to leave the attribute untouched.

    Returns:
        The tag text with only the replaced values changed.
    """
    raw = event.raw
    match = _START_TAG_RE.match(raw)
    if not match:
        return raw

    attrs_start = match.start(2)
    pieces = []
    last = 0
    spans = _ATTRIBUTE_RE.finditer(match.group(2))
    for attr, (name, value) in zip(spans, event.attributes):
        new_value = replace(name, value)
        if new_value is None:
            continue
        double = attr.group(3) is not None
        group = 3 if double else 4
        value_start = attrs_start + attr.start(group)
        value_end = attrs_start + attr.end(group)
        pieces.append(raw[last:value_start])
        pieces.append(escape_attribute(new_value, '"' if double else "'"))
        last = value_end

    if not pieces:
        return raw
    pieces.append(raw[last:])
    return "".join(pieces)
