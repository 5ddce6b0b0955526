from __future__ import annotations

import re
from dataclasses import dataclass

from .types import BlockKind, BraceBlockKind, ContinuationKeyword, DiagramType

# ============================================================================
# Grammar rules: every keyword table and pattern the parser consults.
#
# Adding a dialect or a block keyword is a change to one of the tables below;
# the parser and renderer pick it up without further edits.
# ============================================================================

# Diagram type signatures. First match wins, so a signature must come before
# any shorter one that would also match it (stateDiagram-v2 / stateDiagram).
DIAGRAM_PATTERNS: tuple[tuple[re.Pattern[str], DiagramType], ...] = (
    (re.compile(r"^sequenceDiagram\b"), "sequenceDiagram"),
    (re.compile(r"^flowchart(\s+(TD|TB|BT|LR|RL))?\b"), "flowchart"),
    (re.compile(r"^graph(\s+(TD|TB|BT|LR|RL))?\b"), "graph"),
    (re.compile(r"^classDiagram\b"), "classDiagram"),
    (re.compile(r"^stateDiagram-v2\b"), "stateDiagram-v2"),
    (re.compile(r"^stateDiagram\b"), "stateDiagram"),
    (re.compile(r"^erDiagram\b"), "erDiagram"),
    (re.compile(r"^journey\b"), "journey"),
    (re.compile(r"^gantt\b"), "gantt"),
    (re.compile(r"^pie(\s+showData)?\b"), "pie"),
    (re.compile(r"^quadrantChart\b"), "quadrantChart"),
    (re.compile(r"^requirementDiagram\b"), "requirementDiagram"),
    (re.compile(r"^gitGraph\b"), "gitGraph"),
    (re.compile(r"^mindmap\b"), "mindmap"),
    (re.compile(r"^timeline\b"), "timeline"),
    (re.compile(r"^sankey-beta\b"), "sankey-beta"),
    (re.compile(r"^xychart-beta\b"), "xychart-beta"),
    (re.compile(r"^block-beta\b"), "block-beta"),
    (re.compile(r"^architecture-beta\b"), "architecture-beta"),
)

# Blocks that close with a bare `end`
BLOCK_KEYWORDS: tuple[BlockKind, ...] = (
    "critical",
    "alt",
    "loop",
    "par",
    "opt",
    "break",
    "rect",
    "subgraph",
)

# Blocks that close with `}`
BRACE_BLOCK_KEYWORDS: tuple[BraceBlockKind, ...] = ("state", "class", "namespace")

# Continuation keyword -> block kind that must be innermost for it to count
CONTINUATION_PARENTS: dict[ContinuationKeyword, BlockKind] = {
    "else": "alt",
    "option": "critical",
    "and": "par",
}

# Dialects where indentation is the hierarchy; never reformatted
INDENT_SENSITIVE_DIAGRAMS: frozenset[DiagramType] = frozenset({"mindmap", "timeline"})

# Dialects whose `A -> B: text` lines are rebuilt as arrow messages. Flowcharts
# have no colon message syntax; their colons belong to node text and labels.
ARROW_MESSAGE_DIAGRAMS: frozenset[DiagramType] = frozenset({
    "sequenceDiagram",
    "classDiagram",
    "stateDiagram",
    "stateDiagram-v2",
})

# Keyword followed by whitespace or end of line. Plain \b would let
# `loop-node --> B` open a loop block.
_KEYWORD_BOUNDARY = r"(?=\s|$)"

_BLOCK_RE = re.compile(
    r"^(" + "|".join(BLOCK_KEYWORDS) + r")" + _KEYWORD_BOUNDARY + r"\s*(.*)$"
)
_CONTINUATION_RE = re.compile(
    r"^(" + "|".join(CONTINUATION_PARENTS) + r")" + _KEYWORD_BOUNDARY + r"\s*(.*)$"
)
_BRACE_BLOCK_RE = re.compile(
    r"^(" + "|".join(BRACE_BLOCK_KEYWORDS) + r")\s+(.+?)\s*\{\s*$"
)
_PARTICIPANT_RE = re.compile(r"^(participant|actor)" + _KEYWORD_BOUNDARY)
_NOTE_RE = re.compile(r"^note" + _KEYWORD_BOUNDARY, re.IGNORECASE)

# Arrow operators, longest spelling first so `-->>` is never read as `-->`.
# Plain and activation-suffixed (+/-) forms.
ARROW_OPERATORS: tuple[str, ...] = (
    "<<-->>",
    "<<->>",
    "-->>",
    "->>",
    "-->",
    "->",
    "--x",
    "-x",
    "--)",
    "-)",
)
_ARROW_RE = re.compile(
    r"^(.+?)\s*((?:"
    + "|".join(re.escape(op) for op in ARROW_OPERATORS)
    + r")[+-]?)\s*(.+?)\s*:\s*(.*)$"
)


@dataclass(frozen=True, slots=True)
class BraceBlockMatch:
    kind: BraceBlockKind
    name: str


@dataclass(frozen=True, slots=True)
class ArrowMatch:
    from_: str
    arrow: str
    to: str
    message: str


def match_diagram_type(line: str) -> DiagramType | None:
    """Return the dialect declared by a trimmed line, if any."""
    for pattern, diagram_type in DIAGRAM_PATTERNS:
        if pattern.match(line):
            return diagram_type
    return None


def match_block_keyword(line: str) -> tuple[BlockKind, str | None] | None:
    """Match an `end`-terminated block opener; returns (kind, label)."""
    m = _BLOCK_RE.match(line)
    if not m:
        return None
    return m.group(1), m.group(2).strip() or None  # type: ignore[return-value]


def match_continuation_keyword(
    line: str,
) -> tuple[ContinuationKeyword, str | None] | None:
    """Match else/option/and; returns (keyword, label).

    Whether the keyword actually continues a block depends on the open-block
    stack, which is the parser's business.
    """
    m = _CONTINUATION_RE.match(line)
    if not m:
        return None
    return m.group(1), m.group(2).strip() or None  # type: ignore[return-value]


def match_brace_block_start(line: str) -> BraceBlockMatch | None:
    """Match `state|class|namespace <name> {`.

    The name is everything up to the trailing brace, so quoted names and
    names with spaces (`class "HTTP Client" {`, `state In Progress {`) work.
    """
    m = _BRACE_BLOCK_RE.match(line)
    if not m:
        return None
    return BraceBlockMatch(kind=m.group(1), name=m.group(2).strip())  # type: ignore[arg-type]


def match_participant(line: str) -> bool:
    return _PARTICIPANT_RE.match(line) is not None


def match_note(line: str) -> bool:
    return _NOTE_RE.match(line) is not None


def match_arrow_message(line: str) -> ArrowMatch | None:
    """Match `<from> <arrow> <to>: <message>`.

    Lines whose text after the colon starts with `::` are left alone: that is
    class assignment (`A --> B:::warning`), not a message. So are lines where
    the colon falls inside the target's brackets, quotes or pipe label
    (`A --> B[http://x]`).
    """
    m = _ARROW_RE.match(line)
    if not m:
        return None
    message = m.group(4)
    if message.startswith("::"):
        return None
    if _has_unclosed_delimiter(m.group(3)):
        return None
    return ArrowMatch(
        from_=m.group(1).strip(),
        arrow=m.group(2),
        to=m.group(3).strip(),
        message=message.strip(),
    )


def _has_unclosed_delimiter(text: str) -> bool:
    for open_char, close_char in (("[", "]"), ("(", ")"), ("{", "}")):
        if text.count(open_char) > text.count(close_char):
            return True
    return text.count("|") % 2 == 1 or text.count('"') % 2 == 1


def is_indent_sensitive(diagram_type: DiagramType) -> bool:
    return diagram_type in INDENT_SENSITIVE_DIAGRAMS


def supports_arrow_messages(diagram_type: DiagramType) -> bool:
    return diagram_type in ARROW_MESSAGE_DIAGRAMS
