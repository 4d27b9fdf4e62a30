"""
Document conversion pipelines.

Building blocks:
- ArchiveRewriter: entry-by-entry copy-or-transform of zip packages
- RunScopedRewriter: streaming rewrite of text inside legacy-font runs
- XML event stream: byte-preserving tokenizer used by every rewriter

Office XML Handlers:
- DocxXMLHandler: word/document.xml (plus headers/footers on request)
- PptxXMLHandler: ppt/slides/*.xml (plus notes/layouts on request)
- XlsxXMLHandler: shared strings resolved through styles and worksheets
"""

from .base import (
    FileType,
    ConversionConfig,
    ConversionResult,
    PartOutcome,
    ProgressEvent,
    ProgressCallback,
    ProgressReporter,
)
from .archive import (
    ArchiveEntry,
    ArchiveRewriter,
)
from .run_scope import (
    RunState,
    RunFontRule,
    RunScope,
    RunScopedRewriter,
    DOCX_RUN_RULE,
    PPTX_RUN_RULE,
    SHARED_STRING_RUN_RULE,
)
from .office_xml import (
    OfficeXMLHandler,
    DocxXMLHandler,
    PptxXMLHandler,
    XlsxXMLHandler,
    get_handler,
)
from .xlsx_fonts import (
    StyleIndex,
    SharedStringsRewriter,
    parse_styles,
    collect_shared_string_indices,
    rewrite_styles,
)

__all__ = [
    "FileType",
    "ConversionConfig",
    "ConversionResult",
    "PartOutcome",
    "ProgressEvent",
    "ProgressCallback",
    "ProgressReporter",
    "ArchiveEntry",
    "ArchiveRewriter",
    "RunState",
    "RunFontRule",
    "RunScope",
    "RunScopedRewriter",
    "DOCX_RUN_RULE",
    "PPTX_RUN_RULE",
    "SHARED_STRING_RUN_RULE",
    "OfficeXMLHandler",
    "DocxXMLHandler",
    "PptxXMLHandler",
    "XlsxXMLHandler",
    "get_handler",
    "StyleIndex",
    "SharedStringsRewriter",
    "parse_styles",
    "collect_shared_string_indices",
    "rewrite_styles",
]
