"""
Win Innwa to Unicode Myanmar transcoder.

Legacy text is stored in the order it was typed and drawn: a pre-posed
vowel "e" or a ra-medial comes *before* its consonant, a kinzi comes
*after* it. Unicode stores syllables in logical order instead. The
conversion is a fixed chain of pure ``str -> str`` stages:

1. pre-cleanup of stray spaces left by legacy typing habits
2. literal substitution through the mapping table
3. kinzi reassembly
4. ra-medial cluster moved behind its consonant
5. zero/wa and seven/ra disambiguation
6. canonical storage-order assembly
7. ``correction1``
8. post-cleanup of placeholder characters

The chain never raises. Input that is not legacy text (including text
that was already converted) produces undefined, but never failing,
output.
"""

from __future__ import annotations

import re

from .corrections import correction1
from .mapping_table import map_legacy_glyphs
from .myanmar import (
    ANUSVARA,
    DIGIT_SEVEN,
    DIGIT_ZERO,
    DOT_BELOW,
    KINZI,
    RA,
    VISARGA,
    WA,
    is_myanmar_context,
)

# Spaces typed around these glyphs are artefacts, not word breaks
_PRE_CLEANUP: tuple[tuple[str, str], ...] = (
    (" f", "f"),
    (" m", "m"),
    ("  ;", ";"),
    ("a ", "a"),
    (" D", "D"),
    (" d", "d"),
    (" F", "F"),
    (" S", "S"),
)

_POST_CLEANUP: tuple[tuple[str, str], ...] = (
    ("«", "["),
    ("»", "]"),
    ("ç", ","),
)

# Consonants (already mapped) that can carry a kinzi, incl. the stacked
# ta-tha ligature, independent U, great sa and the zero/wa glyph.
_KINZI_BASE = (
    "[\u1000-\u1007\u1009-\u101C\u101E-\u1021\u1025\u103F\u1040]"
    "(?:\u1039[\u1000-\u1021])?"
)
_KINZI_PREFIX = "(?P<E>\u1031)?(?P<R>\u103C)?"

_KINZI_RE = re.compile(f"{_KINZI_PREFIX}(?<!\u1039)(?P<con>{_KINZI_BASE}){KINZI}")
_KINZI_ANUSVARA_RE = re.compile(
    f"{_KINZI_PREFIX}(?<!\u1039)(?P<con>{_KINZI_BASE}){ANUSVARA}{KINZI}"
)

_RA_CLUSTER_RE = re.compile(
    "(?P<R>\u103C)(?P<Wa>\u103D)?(?P<Ha>\u103E)?(?P<U>\u102F)?"
    "(?P<con>[\u1000-\u1021])(?P<scon>\u1039[\u1000-\u1021])?"
)

_SYLLABLE_RE = re.compile(
    "(?P<E>\u1031)?"
    "(?P<con>[\u1000-\u1021])"
    "(?P<scon>\u1039[\u1000-\u1021])?"
    "(?P<upper>[\u102D\u102E\u1032\u1036])?"
    "(?P<DVs>[\u1037\u1038]{0,2})"
    "(?P<M>[\u103B-\u103E]*)"
    "(?P<lower>[\u102F\u1030])?"
    "(?P<upper2>[\u102D\u102E\u1032])?"
)


def _replace_pairs(text: str, pairs: tuple[tuple[str, str], ...]) -> str:
    for old, new in pairs:
        text = text.replace(old, new)
    return text


def pre_cleanup(text: str) -> str:
    return _replace_pairs(text, _PRE_CLEANUP)


def post_cleanup(text: str) -> str:
    """Turn the placeholder glyphs back into the brackets and comma they stand for."""
    return _replace_pairs(text, _POST_CLEANUP)


def reassemble_kinzi(text: str) -> str:
    """
    Move a kinzi typed after its consonant to the front of the syllable.

    A pre-posed "e" and ra-medial typed before the consonant travel with
    it and keep their relative order; an anusvara drawn together with
    the kinzi ends up after the consonant.
    """
    text = _KINZI_ANUSVARA_RE.sub(
        lambda m: KINZI + (m.group("E") or "") + (m.group("R") or "")
        + m.group("con") + ANUSVARA,
        text,
    )
    return _KINZI_RE.sub(
        lambda m: KINZI + (m.group("E") or "") + (m.group("R") or "")
        + m.group("con"),
        text,
    )


def reorder_ra_medial(text: str) -> str:
    return _RA_CLUSTER_RE.sub(r"\g<con>\g<scon>\g<R>\g<Wa>\g<Ha>\g<U>", text)


def resolve_zero_wa(text: str) -> str:
    """
    Decide whether each 0/7 glyph is a digit or the letter wa/ra.

    A glyph reads as the letter when the character right before it OR
    right after it is Myanmar letter context (see ``is_myanmar_context``).
    The string boundaries never count as context.
    """
    if DIGIT_ZERO not in text and DIGIT_SEVEN not in text:
        return text

    letters = {DIGIT_ZERO: WA, DIGIT_SEVEN: RA}
    out = []
    last = len(text) - 1
    for i, ch in enumerate(text):
        letter = letters.get(ch)
        if letter is not None and (
            (i > 0 and is_myanmar_context(text[i - 1]))
            or (i < last and is_myanmar_context(text[i + 1]))
        ):
            out.append(letter)
        else:
            out.append(ch)
    return "".join(out)


def _storage_order(m: re.Match) -> str:
    # One of each sign mark, dot below first
    signs = "".join(sign for sign in (DOT_BELOW, VISARGA) if sign in m.group("DVs"))
    return (
        m.group("con") + (m.group("scon") or "") + m.group("M") + (m.group("E") or "")
        + (m.group("upper") or "") + (m.group("lower") or "") + signs + (m.group("upper2") or "")
    )


def assemble_storage_order(text: str) -> str:
    """Rebuild each syllable as consonant, stack, medials, e, upper, lower, signs."""
    return _SYLLABLE_RE.sub(_storage_order, text)


def win_to_unicode(text: str) -> str:
    """
    Convert Win Innwa legacy text to Unicode Myanmar.

    Args:
        text: Text typed in the legacy font (visual order).

    Returns:
        Unicode Myanmar text in storage order.
    """
    if not text:
        return text
    text = pre_cleanup(text)
    text = map_legacy_glyphs(text)
    text = reassemble_kinzi(text)
    text = reorder_ra_medial(text)
    text = resolve_zero_wa(text)
    text = assemble_storage_order(text)
    text = correction1(text)
    return post_cleanup(text)


def transcode(text: str) -> str:
    """Public ad-hoc conversion entry point; same as ``win_to_unicode``."""
    return win_to_unicode(text)
