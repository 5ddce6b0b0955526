from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

# ============================================================================
# Diagram vocabulary: dialects and block keywords known to the formatter
# ============================================================================

DiagramType = Literal[
    "sequenceDiagram",
    "flowchart",
    "graph",
    "classDiagram",
    "stateDiagram",
    "stateDiagram-v2",
    "erDiagram",
    "journey",
    "gantt",
    "pie",
    "quadrantChart",
    "requirementDiagram",
    "gitGraph",
    "mindmap",
    "timeline",
    "sankey-beta",
    "xychart-beta",
    "block-beta",
    "architecture-beta",
    "unknown",
]

# Blocks closed by a bare `end`
BlockKind = Literal[
    "critical",
    "alt",
    "loop",
    "par",
    "opt",
    "break",
    "rect",
    "subgraph",
]

# Blocks closed by `}`
BraceBlockKind = Literal["state", "class", "namespace"]

ContinuationKeyword = Literal["else", "option", "and"]


# ============================================================================
# Statements: one per source line, produced by the parser
# ============================================================================


@dataclass(frozen=True, slots=True)
class DiagramDecl:
    """Diagram type declaration (e.g. "sequenceDiagram", "flowchart TD")."""
    content: str
    diagram_type: DiagramType
    type: Literal["diagram-decl"] = "diagram-decl"


@dataclass(frozen=True, slots=True)
class Directive:
    """Directive such as %%{init: {...}}%%, kept verbatim."""
    content: str
    type: Literal["directive"] = "directive"


@dataclass(frozen=True, slots=True)
class Comment:
    content: str
    type: Literal["comment"] = "comment"


@dataclass(frozen=True, slots=True)
class Participant:
    """participant / actor declaration (sequence diagrams)."""
    content: str
    type: Literal["participant"] = "participant"


@dataclass(frozen=True, slots=True)
class Note:
    content: str
    type: Literal["note"] = "note"


@dataclass(frozen=True, slots=True)
class BlockStart:
    content: str
    block_kind: BlockKind
    label: str | None = None
    type: Literal["block-start"] = "block-start"


@dataclass(frozen=True, slots=True)
class BlockEnd:
    content: str = "end"
    type: Literal["block-end"] = "block-end"


@dataclass(frozen=True, slots=True)
class BlockElse:
    """`else` branch of an open `alt` block."""
    content: str
    label: str | None = None
    type: Literal["block-else"] = "block-else"


@dataclass(frozen=True, slots=True)
class BlockOption:
    """`option` branch of an open `critical` block."""
    content: str
    label: str | None = None
    type: Literal["block-option"] = "block-option"


@dataclass(frozen=True, slots=True)
class BlockAnd:
    """`and` branch of an open `par` block."""
    content: str
    label: str | None = None
    type: Literal["block-and"] = "block-and"


@dataclass(frozen=True, slots=True)
class BraceBlockStart:
    content: str
    block_kind: BraceBlockKind
    # Everything between the keyword and the trailing `{`, quotes included
    name: str
    type: Literal["brace-block-start"] = "brace-block-start"


@dataclass(frozen=True, slots=True)
class BraceBlockEnd:
    content: str = "}"
    type: Literal["brace-block-end"] = "brace-block-end"


@dataclass(frozen=True, slots=True)
class ArrowMessage:
    """Arrow with a colon label, e.g. "A->>B: Hello"."""
    content: str
    from_: str
    # Operator including an optional +/- activation suffix
    arrow: str
    to: str
    # Empty string when the line ends at the colon
    message: str
    type: Literal["arrow-message"] = "arrow-message"


@dataclass(frozen=True, slots=True)
class GenericLine:
    """Fallback for anything without a more specific rule."""
    content: str
    type: Literal["generic-line"] = "generic-line"


@dataclass(frozen=True, slots=True)
class BlankLine:
    content: str = ""
    type: Literal["blank-line"] = "blank-line"


Statement = Union[
    DiagramDecl,
    Directive,
    Comment,
    Participant,
    Note,
    BlockStart,
    BlockEnd,
    BlockElse,
    BlockOption,
    BlockAnd,
    BraceBlockStart,
    BraceBlockEnd,
    ArrowMessage,
    GenericLine,
    BlankLine,
]

StatementType = Literal[
    "diagram-decl",
    "directive",
    "comment",
    "participant",
    "note",
    "block-start",
    "block-end",
    "block-else",
    "block-option",
    "block-and",
    "brace-block-start",
    "brace-block-end",
    "arrow-message",
    "generic-line",
    "blank-line",
]


@dataclass(frozen=True, slots=True)
class Diagram:
    """Parsed diagram: the statement sequence handed from parser to renderer."""
    diagram_type: DiagramType
    statements: tuple[Statement, ...] = field(default_factory=tuple)
    # Original input, reproduced as-is for indent-sensitive dialects
    source: str = ""


# ============================================================================
# Format options: user-facing configuration
# ============================================================================


@dataclass(slots=True)
class FormatOptions:
    # Spaces per indentation level; 0 disables indentation
    indent_size: int = 4
    # One tab per level instead of spaces (indent_size is then ignored)
    use_tabs: bool = False

    def __post_init__(self) -> None:
        if self.indent_size < 0:
            raise ValueError(
                f"indent_size must be a non-negative integer, got {self.indent_size}"
            )
