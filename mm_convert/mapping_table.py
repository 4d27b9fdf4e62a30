"""
Legacy font mapping table.

Win Innwa style fonts draw Myanmar glyphs on ordinary 8-bit code points
(Windows-1252 slots), so a document "looks" Burmese only when viewed in
that font. This module holds the ordered glyph table that turns those
code points into Unicode Myanmar characters.

Order matters:
- multi-character combinations (kinzi forms, ligatures) come first
- stacked consonants come before the plain consonants
- digits and punctuation come last, so "0" and "7" never shadow a
  letter mapping that shares the same glyph slot

Each entry is applied to the *whole* current string before the next
entry is considered (see ``apply_mapping``).
"""

from __future__ import annotations

from typing import Iterable


MappingEntry = tuple[str, str]


FONT_MAPPING_ENTRIES: tuple[MappingEntry, ...] = (
    # Kinzi and special combinations (longer combinations first)
    ("ps", "\u1008"),
    ("Bo", "\u1029"),
    ("Mo", "\u1029"),
    ("OD", "\u1026"),
    ("ÍD", "\u1026"),
    ("aBomf", "\u102A"),
    ("aMomf", "\u102A"),

    # Two-character combinations
    ("F", "\u1004\u103A\u1039"),  # kinzi
    ("ø", "\u1036\u1004\u103A\u1039"),
    ("Ð", "\u1004\u103A\u1039\u102E"),
    ("Ø", "\u1004\u103A\u1039\u102D"),
    ("ð", "\u102D\u1036"),
    ("R", "\u103B\u103D"),  # ya + wa
    ("Q", "\u103B\u103E"),  # ya + ha
    ("W", "\u103B\u103D\u103E"),  # ya + wa + ha
    ("<", "\u103C\u103D"),  # ra + wa
    (">", "\u103C\u103D"),
    ("ê", "\u103C\u102F"),  # ra + u
    ("û", "\u103C\u102F"),
    ("Bu", "\u1000\u103C"),
    ("T", "\u103D\u103D\u103E"),
    ("I", "\u103E\u102F"),  # ha + u
    ("ª", "\u103E\u1030"),  # ha + uu
    (":", "\u102B\u103A"),  # tall aa + asat

    # Special characters
    ("þ", "\u1024"),
    ("£", "\u1023"),
    ("O", "\u1025"),
    ("Í", "\u1025"),
    ("Ó", "\u1009\u102C"),
    ("ó", "\u103F"),
    ("@", "\u100F\u1039\u100D"),
    ("|", "\u100B\u1039\u100C"),
    ("¥", "\u100B\u1039\u100B"),
    ("×", "\u100D\u1039\u100D"),
    ("¹", "\u100E\u1039\u100D"),
    ("¿", "?"),
    ("\u00B5", "!"),  # micro sign
    ("\u03BC", "!"),  # greek mu
    ("$", "\u1000\u1019\u1015\u103A"),  # kyat
    ("_", "*"),
    ("ƒ", "\u1041\u2044\u1042"),  # 1/2
    ("„", "\u1041\u2044\u1043"),
    ("…", "\u1042\u2044\u1043"),
    ("†", "\u1041\u2044\u1044"),
    ("‡", "\u1043\u2044\u1044"),
    ("ˆ", "\u1041\u2044\u1045"),
    ("‰", "\u1042\u2044\u1045"),
    ("Š", "\u1043\u2044\u1045"),
    ("‹", "\u1044\u2044\u1045"),
    ("ü", "\u104C"),
    ("í", "\u104D"),
    ("¤", "\u104E"),
    ("\\", "\u104F"),

    # Stacked consonants (virama + consonant)
    ("ú", "\u1039\u1000"),
    ("©", "\u1039\u1001"),
    ("¾", "\u1039\u1002"),
    ("¢", "\u1039\u1003"),
    ("ö", "\u1039\u1005"),
    ("ä", "\u1039\u1006"),
    ("Æ", "\u1039\u1007"),
    ("Ñ", "\u1039\u1008"),
    ("³", "\u1039\u100C"),
    ("²", "\u1039\u100D"),
    ("Ü", "\u1039\u1015"),
    ("Ö", "\u1039\u100F"),
    ("Å", "\u1039\u1010"),
    ("å", "\u1039\u1010"),
    ("¦", "\u1039\u1011"),
    ("¬", "\u1039\u1011"),
    ("´", "\u1039\u1012"),
    ("¨", "\u1039\u1013"),
    ("é", "\u1039\u1014"),
    ("æ", "\u1039\u1016"),
    ("Ç", "\u1039\u1018"),
    ("®", "\u1039\u1019"),

    # Consonants
    ("u", "\u1000"),
    ("c", "\u1001"),
    ("*", "\u1002"),
    ("C", "\u1003"),
    ("i", "\u1004"),
    ("p", "\u1005"),
    ("q", "\u1006"),
    ("Z", "\u1007"),
    ("Ú", "\u1009"),
    ("n", "\u100A"),
    ("ñ", "\u100A"),
    ("#", "\u100B"),
    ("X", "\u100C"),
    ("!", "\u100D"),
    ("¡", "\u100E"),
    ("P", "\u100F"),
    ("w", "\u1010"),
    ("x", "\u1011"),
    ("'", "\u1012"),
    ('"', "\u1013"),
    ("e", "\u1014"),
    ("E", "\u1014"),
    ("y", "\u1015"),
    ("z", "\u1016"),
    ("A", "\u1017"),
    ("b", "\u1018"),
    ("r", "\u1019"),
    (",", "\u101A"),
    ("&", "\u101B"),
    ("½", "\u101B"),
    ("v", "\u101C"),
    ("o", "\u101E"),
    ("[", "\u101F"),
    ("V", "\u1020"),
    ("t", "\u1021"),

    # Medial consonants
    ("s", "\u103B"),
    ("ß", "\u103B"),
    ("`", "\u103C"),
    ("j", "\u103C"),
    ("~", "\u103C"),
    ("B", "\u103C"),
    ("M", "\u103C"),
    ("N", "\u103C"),
    ("G", "\u103D"),
    ("S", "\u103E"),
    ("§", "\u103E"),

    # Independent vowels
    ("{", "\u1027"),

    # Dependent vowels
    ("g", "\u102B"),
    ("m", "\u102C"),
    ("d", "\u102D"),
    ("D", "\u102E"),
    ("k", "\u102F"),
    ("K", "\u102F"),
    ("l", "\u1030"),
    ("L", "\u1030"),
    ("a", "\u1031"),
    ("J", "\u1032"),
    ("H", "\u1036"),

    # Tone marks and signs
    ("f", "\u103A"),
    ("Y", "\u1037"),
    ("U", "\u1037"),
    ("h", "\u1037"),
    (";", "\u1038"),

    # Digits ("0" and "7" are resolved to wa/ra later by context)
    ("0", "\u1040"),
    ("1", "\u1041"),
    ("2", "\u1042"),
    ("3", "\u1043"),
    ("4", "\u1044"),
    ("5", "\u1045"),
    ("6", "\u1046"),
    ("7", "\u1047"),
    ("8", "\u1048"),
    ("9", "\u1049"),

    # Punctuation
    ("/", "\u104B"),
    ("?", "\u104A"),
    ("]", "'"),
    ("}", "'"),
    ("^", "/"),
)


def apply_mapping(table: Iterable[MappingEntry], text: str) -> str:
    """
    Replace every legacy pattern with its Unicode counterpart.

    Entries are applied one at a time, in table order, each one to the
    whole string produced by the previous entry. A replacement can be
    re-matched by a later entry (``"_" -> "*" -> U+1002``), so the table
    order is part of the observable behaviour.

    Args:
        table: Ordered (legacy pattern, replacement) pairs.
        text: Text in legacy glyph encoding.

    Returns:
        Text with all table entries substituted.
    """
    for pattern, replacement in table:
        if pattern in text:
            text = text.replace(pattern, replacement)
    return text


def map_legacy_glyphs(text: str) -> str:
    """Apply the built-in ``FONT_MAPPING_ENTRIES`` table."""
    return apply_mapping(FONT_MAPPING_ENTRIES, text)
