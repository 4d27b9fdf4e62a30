"""
Font Utilities Module.

Provides the legacy-to-Unicode font name mapping and the name matching
rules shared by every Office XML rewriter.

Office parts spell the same element or attribute either bare
(``rFont``, ``val``) or namespace-prefixed (``w:rFonts``, ``w:ascii``).
Matching is case-sensitive and accepts both spellings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


# Unicode font written in place of the legacy font
TARGET_FONT = "Myanmar Text"

# Legacy visual-order font most archives were typed with
DEFAULT_SOURCE_FONT = "Win Innwa"


def tag_matches(name: str, local: str) -> bool:
    """
    Check whether a (possibly prefixed) XML name has the given local name.

    Args:
        name: Qualified name as written in the document (e.g. ``w:r``).
        local: Local name to match (e.g. ``r``).

    Returns:
        True for ``local`` itself or ``<prefix>:local``.
    """
    if name == local:
        return True
    return name.endswith(":" + local) and len(name) > len(local) + 1


def name_matches_any(name: str, locals_: Iterable[str]) -> bool:
    """Check a qualified name against several local names."""
    return any(tag_matches(name, local) for local in locals_)


@dataclass(frozen=True)
class FontMapper:
    """
    Maps the configured legacy font name to the target Unicode font.

    Only an exact (case-sensitive) match of the whole font name counts;
    ``"Win Innwa Bold"`` is a different font from ``"Win Innwa"``.
    """

    source_font: str = DEFAULT_SOURCE_FONT
    target_font: str = TARGET_FONT

    def is_legacy(self, font_name: str) -> bool:
        """Return True when ``font_name`` names the legacy font."""
        return font_name == self.source_font

    def map_font(self, font_name: str) -> str:
        """
        Map a font name to its replacement.

        Args:
            font_name: Font name found in the document.

        Returns:
            The target font for the legacy font, the input otherwise.
        """
        if self.is_legacy(font_name):
            return self.target_font
        return font_name


def map_font_name(
    font_name: str,
    source_font: str = DEFAULT_SOURCE_FONT,
    target_font: str = TARGET_FONT,
) -> str:
    """
    Convenience function to map a single font name.

    Args:
        font_name: Original font name.
        source_font: Legacy font name to replace.
        target_font: Replacement font name.

    Returns:
        Replacement font name, or the original when it is not the legacy font.
    """
    return FontMapper(source_font, target_font).map_font(font_name)
