"""
Post-assembly corrections for transcoded Myanmar text.

``correction1`` runs a fixed list of passes over text that is already in
Unicode but may still carry artefacts of visual-order typing:

- duplicated combining marks
- sequences the generic reordering misclassifies (independent vowels,
  contracted words)
- medial and vowel sign order
- digits 0/7/8 that are really the consonants wa/ra/ga
- upper vowels typed before medials, lower vowels typed after tone marks

The literal sequences below are fixed input -> output pairs; each pass
sees the output of the previous one.
"""

from __future__ import annotations

import re

from .myanmar import (
    AA,
    ANUSVARA,
    ASAT,
    DIGIT_EIGHT,
    DIGIT_FOUR,
    DIGIT_SEVEN,
    DIGIT_ZERO,
    DOT_BELOW,
    GA,
    IV_AU,
    IV_O,
    IV_U,
    IV_UU,
    JHA,
    KA,
    LOCATIVE,
    MEDIAL_HA,
    MEDIAL_RA,
    MEDIAL_RANGE,
    MEDIAL_WA,
    MEDIAL_YA,
    NA,
    NGA,
    NYA,
    RA,
    SA,
    THA,
    VIRAMA,
    VISARGA,
    VOWEL_AI,
    VOWEL_E,
    VOWEL_I,
    VOWEL_II,
    VOWEL_SIGN_RANGE,
    VOWEL_U,
    WA,
    YA,
)


Replacement = tuple[str, str]


_DUPLICATE_MARKS_RE = re.compile(
    "\u102D+|\u102E+|\u103D+|\u103E+|\u1032+|\u1037+|\u1036+|\u103A+"
)

# Order-dependent: the THA + RA + E + AA + ASAT entry never fires because
# the entry before it has already consumed THA + RA.
_STRUCTURAL_FIXES: tuple[Replacement, ...] = (
    (SA + MEDIAL_YA, JHA),
    (THA + MEDIAL_RA, IV_O),
    (THA + MEDIAL_RA + VOWEL_E + AA + ASAT, IV_AU),
    (IV_O + VOWEL_E + AA + ASAT, IV_AU),
    (IV_U + VOWEL_II, IV_UU),
    (IV_U + VIRAMA, NYA + VIRAMA),
    (IV_U + ASAT, NYA + ASAT),
    (IV_U + AA, NYA + AA),
    (DIGIT_FOUR + NGA + ASAT + VISARGA, LOCATIVE + NGA + ASAT + VISARGA),
    (DOT_BELOW + ASAT, ASAT + DOT_BELOW),
    (VISARGA + ASAT, ASAT + VISARGA),
)

_MEDIAL_PAIRS: tuple[Replacement, ...] = (
    (MEDIAL_HA + MEDIAL_YA, MEDIAL_YA + MEDIAL_HA),
    (MEDIAL_HA + MEDIAL_RA, MEDIAL_RA + MEDIAL_HA),
    (MEDIAL_HA + MEDIAL_WA, MEDIAL_WA + MEDIAL_HA),
    (MEDIAL_WA + MEDIAL_YA, MEDIAL_YA + MEDIAL_WA),
    (MEDIAL_WA + MEDIAL_RA, MEDIAL_RA + MEDIAL_WA),
)


def _permutations_re(first: str, second: str, third: str) -> re.Pattern:
    """Match the out-of-order arrangements of a three-medial cluster."""
    return re.compile("|".join((
        third + second + first,
        third + first + second,
        second + third + first,
        second + first + third,
        first + third + second,
    )))


_RA_WA_HA_RE = _permutations_re(MEDIAL_RA, MEDIAL_WA, MEDIAL_HA)
_YA_WA_HA_RE = _permutations_re(MEDIAL_YA, MEDIAL_WA, MEDIAL_HA)

_VOWEL_PAIRS: tuple[Replacement, ...] = (
    (ANUSVARA + VOWEL_U, VOWEL_U + ANUSVARA),
    (VOWEL_U + VOWEL_I, VOWEL_I + VOWEL_U),
    (ANUSVARA + VOWEL_I, VOWEL_I + ANUSVARA),
    (DOT_BELOW + VOWEL_U, VOWEL_U + DOT_BELOW),
    (DOT_BELOW + VOWEL_AI, VOWEL_AI + DOT_BELOW),
    (DOT_BELOW + ANUSVARA, ANUSVARA + DOT_BELOW),
)

_CONTRACTED_WORDS: tuple[Replacement, ...] = (
    (
        YA + VOWEL_E + AA + KA + MEDIAL_YA + ASAT + AA,
        YA + VOWEL_E + AA + KA + ASAT + MEDIAL_YA + AA,
    ),
    (NA + VOWEL_U + ASAT, NA + ASAT + VOWEL_U),
    (ASAT + ASAT, ASAT),
)

# Digit glyph -> consonant it stands for when followed by a sign
_DIGIT_LETTERS: tuple[Replacement, ...] = (
    (DIGIT_ZERO, WA),
    (DIGIT_SEVEN, RA),
    (DIGIT_EIGHT, GA),
)

# Vowel sign, medial, or consonant + asat/virama cluster after the digit
_DIGIT_CONTEXT_RES: tuple[tuple[re.Pattern, str], ...] = tuple(
    (re.compile(f"{digit}(?={follower})"), letter)
    for follower in (
        f"[{VOWEL_SIGN_RANGE}]",
        f"[{MEDIAL_RANGE}]",
        "[\u1000-\u1031][\u1039-\u103A]",
    )
    for digit, letter in _DIGIT_LETTERS
)

_UPPER_BEFORE_MEDIAL_RE = re.compile(
    "(?P<upper>[\u102D\u102E\u1036\u1032])(?P<M>[\u103B-\u103E]+)"
)
_SIGNS_BEFORE_LOWER_RE = re.compile(
    "(?P<DVs>[\u1036\u1037\u1038]+)(?P<lower>[\u102F\u1030])"
)


def _replace_all(text: str, replacements: tuple[Replacement, ...]) -> str:
    for old, new in replacements:
        text = text.replace(old, new)
    return text


def remove_duplicate_marks(text: str) -> str:
    """Collapse runs of one repeated combining mark to its first occurrence."""
    return _DUPLICATE_MARKS_RE.sub(lambda match: match.group(0)[0], text)


def fix_structural_sequences(text: str) -> str:
    return _replace_all(text, _STRUCTURAL_FIXES)


def reorder_medials(text: str) -> str:
    """Put medial signs into canonical order (ya, ra, wa, ha)."""
    text = _replace_all(text, _MEDIAL_PAIRS)
    text = _RA_WA_HA_RE.sub(MEDIAL_RA + MEDIAL_WA + MEDIAL_HA, text)
    return _YA_WA_HA_RE.sub(MEDIAL_YA + MEDIAL_WA + MEDIAL_HA, text)


def reorder_vowels(text: str) -> str:
    text = _replace_all(text, _VOWEL_PAIRS)
    return _replace_all(text, _CONTRACTED_WORDS)


def recognise_digit_consonants(text: str) -> str:
    """
    Read digits 0/7/8 as wa/ra/ga where only a consonant makes sense.

    Applies when the digit is followed by asat or virama, by any vowel
    sign, by any medial, or by a consonant + asat/virama cluster.
    """
    for digit, letter in _DIGIT_LETTERS:
        text = text.replace(digit + ASAT, letter + ASAT)
    for digit, letter in _DIGIT_LETTERS:
        text = text.replace(digit + VIRAMA, letter + VIRAMA)

    for pattern, letter in _DIGIT_CONTEXT_RES:
        text = pattern.sub(letter, text)
    return text


def reorder_final_signs(text: str) -> str:
    """Move medials ahead of upper vowels and lower vowels ahead of tone marks."""
    text = _UPPER_BEFORE_MEDIAL_RE.sub(r"\g<M>\g<upper>", text)
    text = _SIGNS_BEFORE_LOWER_RE.sub(r"\g<lower>\g<DVs>", text)
    return text.replace(ASAT + DOT_BELOW, DOT_BELOW + ASAT)


def correction1(text: str) -> str:
    """
    Apply every correction pass in order.

    Args:
        text: Unicode text after storage-order assembly.

    Returns:
        Corrected text. Never raises; unknown sequences pass through.
    """
    text = remove_duplicate_marks(text)
    text = fix_structural_sequences(text)
    text = reorder_medials(text)
    text = reorder_vowels(text)
    text = recognise_digit_consonants(text)
    return reorder_final_signs(text)
