from __future__ import annotations

import logging
import re

from .rules import is_indent_sensitive
from .types import Diagram, FormatOptions, Statement, StatementType

logger = logging.getLogger(__name__)

# ============================================================================
# Renderer: turns a parsed Diagram back into canonical Mermaid text.
#
# Indentation:
#   diagram declaration, directives       column 0
#   `end`-style block start/else/end      current brace depth
#   brace block start and `}`             current brace depth
#   anything inside a brace block         brace depth
#   other lines after the declaration     depth 1
# ============================================================================

# Previous statement kinds that get a blank line before a new block opens
_CONTENT_TYPES: frozenset[StatementType] = frozenset({
    "diagram-decl",
    "generic-line",
    "arrow-message",
    "participant",
    "note",
    "block-end",
    "brace-block-end",
})

_BLOCK_OPENERS: frozenset[StatementType] = frozenset({"block-start", "brace-block-start"})

_BLOCK_CONTROL: frozenset[StatementType] = frozenset({
    "block-start",
    "block-else",
    "block-option",
    "block-and",
    "block-end",
    "brace-block-start",
    "brace-block-end",
})

_MULTI_SPACE_RE = re.compile(r"  +")
_COLON_SPACE_RE = re.compile(r":\s{2,}")
_WHITESPACE_RE = re.compile(r"\s+")


def render(diagram: Diagram, options: FormatOptions | None = None) -> str:
    """Render a parsed diagram as formatted Mermaid text.

    The result always ends with exactly one newline.
    """
    if options is None:
        options = FormatOptions()

    if is_indent_sensitive(diagram.diagram_type):
        return ensure_trailing_newline(diagram.source)

    indent_unit = "\t" if options.use_tabs else " " * options.indent_size

    lines: list[str] = []
    brace_depth = 0
    seen_diagram_decl = False
    last_type: StatementType | None = None

    for stmt in diagram.statements:
        # --- Blank lines: never leading, never doubled ---
        if stmt.type == "blank-line":
            if not lines or lines[-1] == "":
                continue
            lines.append("")
            continue

        # --- Separate a new block from preceding content ---
        if (
            stmt.type in _BLOCK_OPENERS
            and last_type in _CONTENT_TYPES
            and lines
            and lines[-1] != ""
        ):
            lines.append("")

        if stmt.type == "brace-block-end":
            if brace_depth > 0:
                brace_depth -= 1
            else:
                logger.debug("'}' with no open brace block, depth stays at 0")

        depth = _indent_depth(stmt, seen_diagram_decl, brace_depth)
        lines.append(indent_unit * depth + _render_statement(stmt))

        if stmt.type == "diagram-decl":
            seen_diagram_decl = True
        elif stmt.type == "brace-block-start":
            brace_depth += 1
        last_type = stmt.type

    # Trailing blank lines never survive
    while lines and lines[-1] == "":
        lines.pop()

    return "\n".join(lines) + "\n"


def ensure_trailing_newline(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


def _indent_depth(stmt: Statement, seen_diagram_decl: bool, brace_depth: int) -> int:
    if stmt.type in ("diagram-decl", "directive"):
        return 0
    if stmt.type in _BLOCK_CONTROL or brace_depth > 0:
        return brace_depth
    return 1 if seen_diagram_decl else 0


def _render_statement(stmt: Statement) -> str:
    if stmt.type == "block-start":
        return _with_label(stmt.block_kind, stmt.label)
    if stmt.type == "brace-block-start":
        return f"{stmt.block_kind} {stmt.name} {{"
    if stmt.type == "block-else":
        return _with_label("else", stmt.label)
    if stmt.type == "block-option":
        return _with_label("option", stmt.label)
    if stmt.type == "block-and":
        return _with_label("and", stmt.label)
    if stmt.type == "block-end":
        return "end"
    if stmt.type == "brace-block-end":
        return "}"
    if stmt.type == "arrow-message":
        head = f"{normalize_content(stmt.from_)} {stmt.arrow} {normalize_content(stmt.to)}"
        message = _WHITESPACE_RE.sub(" ", stmt.message).strip()
        return f"{head}: {message}" if message else f"{head}:"
    if stmt.type in ("diagram-decl", "participant", "note", "generic-line"):
        return normalize_content(stmt.content)
    # Comments and directives are opaque
    return stmt.content


def _with_label(keyword: str, label: str | None) -> str:
    if not label:
        return keyword
    return f"{keyword} {_WHITESPACE_RE.sub(' ', label)}"


# ============================================================================
# Token spacing normalization
# ============================================================================


def normalize_content(content: str) -> str:
    """Normalize spacing inside a line.

    "A[ Start ]  -->  B"  ->  "A[Start] --> B"
    "A -->| yes | B"      ->  "A -->|yes| B"
    """
    result = _MULTI_SPACE_RE.sub(" ", content)
    result = _COLON_SPACE_RE.sub(": ", result)
    result = _normalize_bracket_pair(result, "[", "]")
    result = _normalize_bracket_pair(result, "{", "}")
    result = _normalize_bracket_pair(result, "(", ")")
    result = _normalize_pipe_labels(result)
    return result


def _normalize_bracket_pair(content: str, open_char: str, close_char: str) -> str:
    """Trim padding inside `open ... close` when a space follows the opener.

    The closing delimiter is found by depth counting, so nested pairs close
    at the right place. Unbalanced openers are left as they are.
    """
    parts: list[str] = []
    i = 0
    n = len(content)

    while i < n:
        ch = content[i]
        if ch == open_char and i + 1 < n and content[i + 1] == " ":
            depth = 1
            j = i + 1
            while j < n and depth > 0:
                if content[j] == open_char:
                    depth += 1
                elif content[j] == close_char:
                    depth -= 1
                j += 1

            if depth == 0:
                inner = content[i + 1:j - 1].strip()
                # Nested pairs get the same treatment so one pass is stable
                inner = _normalize_bracket_pair(inner, open_char, close_char)
                parts.append(open_char + inner + close_char)
                i = j
                continue

        parts.append(ch)
        i += 1

    return "".join(parts)


def _normalize_pipe_labels(content: str) -> str:
    """Trim padding inside `|label|` edge labels.

    Pipes pair up left to right: a label runs from an opening pipe to the next
    pipe, never from one label's closing pipe to the following label. Pipes
    inside quotes or brackets are node text and never open a label. A pipe
    with no partner is left as it is.
    """
    parts: list[str] = []
    depth = 0
    in_quote = False
    i = 0
    n = len(content)

    while i < n:
        ch = content[i]
        if ch == '"':
            in_quote = not in_quote
        elif not in_quote:
            if ch in "[({":
                depth += 1
            elif ch in "])}":
                depth = max(depth - 1, 0)
            elif ch == "|" and depth == 0:
                close = content.find("|", i + 1)
                if close != -1:
                    parts.append("|" + content[i + 1:close].strip() + "|")
                    i = close + 1
                    continue

        parts.append(ch)
        i += 1

    return "".join(parts)
