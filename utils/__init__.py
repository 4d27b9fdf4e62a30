"""Utility modules for font handling."""

from .font_utils import (
    DEFAULT_SOURCE_FONT,
    TARGET_FONT,
    FontMapper,
    map_font_name,
    name_matches_any,
    tag_matches,
)

__all__ = [
    "DEFAULT_SOURCE_FONT",
    "TARGET_FONT",
    "FontMapper",
    "map_font_name",
    "name_matches_any",
    "tag_matches",
]
