from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__, format_mermaid, format_markdown_mermaid_blocks
from .types import FormatOptions

logger = logging.getLogger(__name__)

_EPILOG = """\
examples:
  mermaidfmt diagram.mmd            format to stdout
  mermaidfmt -w diagram.mmd         format in place
  mermaidfmt -w README.md           format the mermaid fences of a Markdown file
  echo "sequenceDiagram" | mermaidfmt
  mermaidfmt --indent 2 diagram.mmd
  mermaidfmt --tabs diagram.mmd
"""


def _indent_size(value: str) -> int:
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid indent size: {value!r}") from None
    if size < 0:
        raise argparse.ArgumentTypeError(f"indent size must be >= 0, got {size}")
    return size


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mermaidfmt",
        description="Mermaid diagram formatter",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("file", nargs="?", help="Input file (reads stdin if omitted)")
    parser.add_argument(
        "-w",
        "--write",
        action="store_true",
        help="Write the result back to FILE instead of stdout",
    )
    parser.add_argument(
        "--indent",
        type=_indent_size,
        default=4,
        metavar="N",
        help="Spaces per indentation level (default: 4)",
    )
    parser.add_argument("--tabs", action="store_true", help="Indent with tabs instead of spaces")
    parser.add_argument("--verbose", action="store_true", help="Log classification details")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    options = FormatOptions(indent_size=args.indent, use_tabs=args.tabs)

    if args.file:
        path = Path(args.file)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Error reading file: %s (%s)", path, exc)
            return 1
    else:
        if sys.stdin.isatty():
            parser.print_help()
            return 0
        text = sys.stdin.read()

    if args.file and args.file.endswith(".md"):
        formatted = format_markdown_mermaid_blocks(text, options)
    else:
        formatted = format_mermaid(text, options)

    if args.write and args.file:
        try:
            path.write_text(formatted, encoding="utf-8")
        except OSError as exc:
            logger.error("Error writing file: %s (%s)", path, exc)
            return 1
        logger.debug("Wrote %s", path)
    else:
        if args.write:
            logger.warning("--write needs a file argument; writing to stdout")
        sys.stdout.write(formatted)

    return 0
