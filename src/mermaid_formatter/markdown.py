from __future__ import annotations

import re

from .types import FormatOptions

# ============================================================================
# Markdown embedding: format ```mermaid fences inside a Markdown document.
#
# Fences nested in lists keep their indentation: the fence's leading
# whitespace is stripped from the body before formatting and put back on
# every non-empty formatted line.
# ============================================================================

# 1: indentation before the opening fence, 2: body up to the closing fence
_MERMAID_FENCE_RE = re.compile(r"^([ \t]*)```mermaid[ \t]*\r?\n(.*?)```", re.MULTILINE | re.DOTALL)


def format_markdown_mermaid_blocks(
    markdown: str,
    options: FormatOptions | None = None,
) -> str:
    """Format every mermaid code fence in a Markdown document.

    Text outside the fences is returned untouched.
    """
    # Imported here: the package __init__ imports this module
    from . import format_mermaid

    def _replace(match: re.Match[str]) -> str:
        indent = match.group(1)
        code = match.group(2).replace("\r\n", "\n")
        formatted = format_mermaid(_strip_indent(code, indent), options)
        return f"{indent}```mermaid\n{_apply_indent(formatted, indent)}{indent}```"

    return _MERMAID_FENCE_RE.sub(_replace, markdown)


def _strip_indent(code: str, indent: str) -> str:
    if not indent:
        return code
    return "\n".join(
        line[len(indent):] if line.startswith(indent) else line
        for line in code.split("\n")
    )


def _apply_indent(content: str, indent: str) -> str:
    """Prefix each non-empty line with the fence indentation."""
    if not indent:
        return content
    return "\n".join(indent + line if line else line for line in content.split("\n"))
