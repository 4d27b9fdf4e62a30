#!/usr/bin/env python3
"""
Win Innwa to Unicode Myanmar Converter.

Converts documents typed with the legacy "Win Innwa" visual-order font
to Unicode Myanmar text rendered with "Myanmar Text".

Supported sources:
- txt: the whole file is transcoded
- docx: runs in the main document that use the legacy font
- pptx: runs in slides that use the legacy font
- xlsx: shared strings whose cells (or rich text runs) use the legacy font
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from mm_convert.converter import convert
from mm_convert.errors import ConversionError
from mm_convert.pipelines.base import ConversionConfig, ProgressEvent
from mm_convert.source_detector import print_source_info
from mm_convert.transcoder import transcode
from utils.font_utils import DEFAULT_SOURCE_FONT, TARGET_FONT


LOG_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
}


def configure_logging(verbosity: int) -> None:
    logging.basicConfig(
        level=LOG_LEVELS.get(verbosity, logging.DEBUG),
        format="%(levelname)s %(name)s: %(message)s",
    )


def print_progress(event: ProgressEvent) -> None:
    print(f"  [{event.percent:5.1f}%] {event.message}")


def info_command(args: argparse.Namespace) -> int:
    """Show detected type and the fonts declared in a source file."""
    input_path = Path(args.input)

    try:
        config = ConversionConfig(include_extra_parts=args.include_extra_parts)
        print_source_info(input_path, config)
    except ConversionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def convert_command(args: argparse.Namespace) -> int:
    """Convert a document to Unicode Myanmar."""
    source = Path(args.source)
    target = Path(args.target)

    config = ConversionConfig(
        source_font=args.font,
        target_font=args.target_font,
        text_encoding=args.encoding,
        include_extra_parts=args.include_extra_parts,
    )

    print(f"Converting: {source}")
    print(f"  Font: {config.source_font} -> {config.target_font}")

    try:
        result = convert(source, target, progress=print_progress, config=config)
    except ConversionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"  {result.summary()}")
    for warning in result.warnings:
        print(f"  Warning: {warning}")
    print(f"Done: {result.output_path}")
    return 0


def transcode_command(args: argparse.Namespace) -> int:
    """Transcode text given on the command line or read from stdin."""
    if args.text is not None:
        print(transcode(args.text))
    else:
        sys.stdout.write(transcode(sys.stdin.read()))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Win Innwa to Unicode Myanmar Converter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Workflow:
  1. mm-convert info document.docx
     Shows the detected type and every font the document declares

  2. mm-convert convert document.docx converted.docx --font "{DEFAULT_SOURCE_FONT}"
     Transcodes text in runs using that font and renames the font
     to "{TARGET_FONT}"

Examples:
  # Plain text (whole file, any line endings kept)
  mm-convert convert notes.txt notes-unicode.txt

  # Spreadsheet typed with a renamed copy of the font
  mm-convert convert book.xlsx book-unicode.xlsx --font "Win Innwa 2"

  # Headers, footers, notes and slide masters too
  mm-convert convert deck.pptx deck-unicode.pptx --include-extra-parts

  # Ad-hoc text
  mm-convert transcode "tcifk"
  echo "ausm;" | mm-convert transcode
""",
    )
    # Shared by every command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    extra_parts_help = "Also convert headers/footers/notes (docx) or notes/layouts/masters (pptx)"

    # Info command
    info_parser = subparsers.add_parser(
        "info",
        parents=[common],
        help="Detect file type and list declared fonts",
    )
    info_parser.add_argument("input", help="Input txt/docx/xlsx/pptx file")
    info_parser.add_argument(
        "--include-extra-parts",
        action="store_true",
        help=extra_parts_help,
    )
    info_parser.set_defaults(func=info_command)

    # Convert command
    convert_parser = subparsers.add_parser(
        "convert",
        parents=[common],
        help="Convert a document to Unicode Myanmar",
    )
    convert_parser.add_argument("source", help="Source txt/docx/xlsx/pptx file")
    convert_parser.add_argument("target", help="Output file path")
    convert_parser.add_argument(
        "-f", "--font",
        default=DEFAULT_SOURCE_FONT,
        help=f"Legacy font name to convert (default: {DEFAULT_SOURCE_FONT})",
    )
    convert_parser.add_argument(
        "--target-font",
        default=TARGET_FONT,
        help=f"Unicode font written in its place (default: {TARGET_FONT})",
    )
    convert_parser.add_argument(
        "--encoding",
        default=None,
        help="Encoding of txt sources (default: detect; output is UTF-8)",
    )
    convert_parser.add_argument(
        "--include-extra-parts",
        action="store_true",
        help=extra_parts_help,
    )
    convert_parser.set_defaults(func=convert_command)

    # Transcode command
    transcode_parser = subparsers.add_parser(
        "transcode",
        parents=[common],
        help="Transcode legacy text (argument or stdin) to stdout",
    )
    transcode_parser.add_argument(
        "text",
        nargs="?",
        default=None,
        help="Legacy text (default: read stdin)",
    )
    transcode_parser.set_defaults(func=transcode_command)

    args = parser.parse_args(argv)
    configure_logging(getattr(args, "verbose", 0))

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
