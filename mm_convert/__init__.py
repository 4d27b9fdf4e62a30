"""Win Innwa legacy font to Unicode Myanmar conversion modules."""

from .converter import convert, convert_text_file, decode_text
from .errors import (
    ConversionError,
    SourceNotFoundError,
    UnsupportedFileTypeError,
    ContainerError,
    TargetWriteError,
    MalformedXMLError,
)
from .mapping_table import FONT_MAPPING_ENTRIES, apply_mapping
from .source_detector import SourceInfo, detect_source_format, collect_font_names
from .transcoder import transcode, win_to_unicode

__all__ = [
    "convert",
    "convert_text_file",
    "decode_text",
    "ConversionError",
    "SourceNotFoundError",
    "UnsupportedFileTypeError",
    "ContainerError",
    "TargetWriteError",
    "MalformedXMLError",
    "FONT_MAPPING_ENTRIES",
    "apply_mapping",
    "SourceInfo",
    "detect_source_format",
    "collect_font_names",
    "transcode",
    "win_to_unicode",
]
