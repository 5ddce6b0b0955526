"""mermaid-formatter: Consistent indentation and spacing for Mermaid diagram source."""

from __future__ import annotations

from .types import (
    Diagram,
    DiagramType,
    BlockKind,
    BraceBlockKind,
    FormatOptions,
    Statement,
    StatementType,
)
from .rules import INDENT_SENSITIVE_DIAGRAMS, is_indent_sensitive
from .parser import parse, detect_diagram_type
from .renderer import render, ensure_trailing_newline
from .markdown import format_markdown_mermaid_blocks

__version__ = "0.1.0"

__all__ = [
    "format_mermaid",
    "format_markdown_mermaid_blocks",
    "parse",
    "render",
    "detect_diagram_type",
    "is_indent_sensitive",
    "INDENT_SENSITIVE_DIAGRAMS",
    "Diagram",
    "DiagramType",
    "BlockKind",
    "BraceBlockKind",
    "FormatOptions",
    "Statement",
    "StatementType",
]


def format_mermaid(
    text: str,
    options: FormatOptions | None = None,
) -> str:
    """Format Mermaid diagram source.

    Indent-sensitive diagrams (mindmap, timeline) are returned unchanged apart
    from a trailing newline; their indentation is their structure.
    """
    diagram_type = detect_diagram_type(text)
    if is_indent_sensitive(diagram_type):
        return ensure_trailing_newline(text)
    return render(parse(text), options)
