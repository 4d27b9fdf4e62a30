"""Named Myanmar code points and character classes used by the transcoder."""

from __future__ import annotations


# Consonants
KA = "\u1000"
GA = "\u1002"
NGA = "\u1004"
SA = "\u1005"
JHA = "\u1008"
NYA = "\u1009"
NA = "\u1014"
YA = "\u101A"
RA = "\u101B"
WA = "\u101D"
THA = "\u101E"

# Independent vowels and symbols
IV_U = "\u1025"
IV_UU = "\u1026"
IV_O = "\u1029"
IV_AU = "\u102A"
LOCATIVE = "\u104E"

# Dependent vowel signs
TALL_AA = "\u102B"
AA = "\u102C"
VOWEL_I = "\u102D"
VOWEL_II = "\u102E"
VOWEL_U = "\u102F"
VOWEL_UU = "\u1030"
VOWEL_E = "\u1031"
VOWEL_AI = "\u1032"
ANUSVARA = "\u1036"

# Tone marks and killers
DOT_BELOW = "\u1037"
VISARGA = "\u1038"
VIRAMA = "\u1039"
ASAT = "\u103A"

# Medials
MEDIAL_YA = "\u103B"
MEDIAL_RA = "\u103C"
MEDIAL_WA = "\u103D"
MEDIAL_HA = "\u103E"

# Digits that share a glyph slot with a letter
DIGIT_ZERO = "\u1040"
DIGIT_FOUR = "\u1044"
DIGIT_SEVEN = "\u1047"
DIGIT_EIGHT = "\u1048"

KINZI = NGA + ASAT + VIRAMA

# Regex character-class bodies
MEDIAL_RANGE = "\u103B-\u103E"
VOWEL_SIGN_RANGE = "\u102B-\u1036"


def is_myanmar_context(ch: str) -> bool:
    """
    Check whether a neighbouring character makes "0"/"7" read as a letter.

    Myanmar block characters other than wa, tall AA, vowel sign I and the
    digits and punctuation (U+1040-U+104B) count as letter context, and so
    does a plain space.
    """
    code = ord(ch)
    return (
        0x1000 <= code <= 0x101C
        or 0x101E <= code <= 0x102A
        or code == 0x102C
        or 0x102E <= code <= 0x103F
        or 0x104C <= code <= 0x109F
        or code == 0x0020
    )
