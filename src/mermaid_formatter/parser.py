from __future__ import annotations

import logging
from typing import Sequence

from .rules import (
    CONTINUATION_PARENTS,
    match_arrow_message,
    match_block_keyword,
    match_brace_block_start,
    match_continuation_keyword,
    match_diagram_type,
    match_note,
    match_participant,
    supports_arrow_messages,
)
from .types import (
    ArrowMessage,
    BlankLine,
    BlockAnd,
    BlockElse,
    BlockEnd,
    BlockKind,
    BlockOption,
    BlockStart,
    BraceBlockEnd,
    BraceBlockStart,
    Comment,
    Diagram,
    DiagramDecl,
    DiagramType,
    Directive,
    GenericLine,
    Note,
    Participant,
    Statement,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Mermaid line classifier
#
# Turns source text into one Statement per line. The only state carried from
# line to line is the detected diagram type and the stack of open `end`-style
# blocks (alt, loop, subgraph, ...). Brace blocks are not tracked here; their
# nesting follows from the start/end pairing and is resolved by the renderer.
#
# Priority per line:
#   blank, directive, comment, diagram declaration (first one only),
#   end, }, else/option/and, block start, brace block start,
#   participant/actor, note, arrow message, generic line
# ============================================================================


def parse(text: str) -> Diagram:
    """Parse Mermaid source into a Diagram.

    Never fails: lines that fit no rule, or that only make sense inside a
    block that is not open, become generic lines.
    """
    statements: list[Statement] = []
    diagram_type: DiagramType = "unknown"
    # Kinds of the currently open `end`-terminated blocks, innermost last
    open_blocks: list[BlockKind] = []

    for line in text.split("\n"):
        stmt = classify_line(line.strip(), open_blocks, diagram_type)

        if isinstance(stmt, DiagramDecl):
            diagram_type = stmt.diagram_type
        elif isinstance(stmt, BlockStart):
            open_blocks.append(stmt.block_kind)
        elif isinstance(stmt, BlockEnd):
            open_blocks.pop()

        statements.append(stmt)

    return Diagram(diagram_type=diagram_type, statements=tuple(statements), source=text)


def classify_line(
    line: str,
    open_blocks: Sequence[BlockKind],
    diagram_type: DiagramType,
) -> Statement:
    """Classify one trimmed line given the open-block stack and the dialect.

    Pure: the caller owns the stack and updates it from the result.
    """
    if line == "":
        return BlankLine()

    if line.startswith("%%{"):
        return Directive(content=line)

    if line.startswith("%%"):
        return Comment(content=line)

    if diagram_type == "unknown":
        declared = match_diagram_type(line)
        if declared is not None:
            return DiagramDecl(content=line, diagram_type=declared)

    if line == "end":
        if open_blocks:
            return BlockEnd(content=line)
        logger.debug("'end' with no open block, kept as a generic line")
        return GenericLine(content=line)

    if line == "}":
        return BraceBlockEnd(content=line)

    continuation = match_continuation_keyword(line)
    if continuation is not None:
        keyword, label = continuation
        if open_blocks and open_blocks[-1] == CONTINUATION_PARENTS[keyword]:
            if keyword == "else":
                return BlockElse(content=line, label=label)
            if keyword == "option":
                return BlockOption(content=line, label=label)
            return BlockAnd(content=line, label=label)
        logger.debug(
            "'%s' outside a %s block, kept as a generic line",
            keyword,
            CONTINUATION_PARENTS[keyword],
        )
        return GenericLine(content=line)

    block = match_block_keyword(line)
    if block is not None:
        block_kind, label = block
        return BlockStart(content=line, block_kind=block_kind, label=label)

    brace_block = match_brace_block_start(line)
    if brace_block is not None:
        return BraceBlockStart(content=line, block_kind=brace_block.kind, name=brace_block.name)

    if match_participant(line):
        return Participant(content=line)

    if match_note(line):
        return Note(content=line)

    if supports_arrow_messages(diagram_type):
        arrow = match_arrow_message(line)
        if arrow is not None:
            return ArrowMessage(
                content=line,
                from_=arrow.from_,
                arrow=arrow.arrow,
                to=arrow.to,
                message=arrow.message,
            )

    return GenericLine(content=line)


def detect_diagram_type(text: str) -> DiagramType:
    """Return the first declared dialect, skipping blank lines and %% lines."""
    for line in text.split("\n"):
        trimmed = line.strip()
        if trimmed == "" or trimmed.startswith("%%"):
            continue
        diagram_type = match_diagram_type(trimmed)
        if diagram_type is not None:
            return diagram_type
    return "unknown"
