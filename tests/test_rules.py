"""Tests for the grammar rule tables and match functions."""
from __future__ import annotations

import pytest

from mermaid_formatter.rules import (
    DIAGRAM_PATTERNS,
    is_indent_sensitive,
    match_arrow_message,
    match_block_keyword,
    match_brace_block_start,
    match_continuation_keyword,
    match_diagram_type,
    match_note,
    match_participant,
    supports_arrow_messages,
)


# ============================================================================
# Diagram type signatures
# ============================================================================


class TestMatchDiagramType:
    @pytest.mark.parametrize(
        "line, expected",
        [
            ("sequenceDiagram", "sequenceDiagram"),
            ("flowchart TD", "flowchart"),
            ("flowchart", "flowchart"),
            ("graph LR", "graph"),
            ("classDiagram", "classDiagram"),
            ("stateDiagram", "stateDiagram"),
            ("erDiagram", "erDiagram"),
            ("pie showData", "pie"),
            ("pie title Pets", "pie"),
            ("gitGraph", "gitGraph"),
            ("mindmap", "mindmap"),
            ("timeline", "timeline"),
            ("architecture-beta", "architecture-beta"),
        ],
    )
    def test_matches_known_dialects(self, line, expected):
        assert match_diagram_type(line) == expected

    def test_v2_state_diagram_is_not_shadowed_by_v1(self):
        assert match_diagram_type("stateDiagram-v2") == "stateDiagram-v2"

    def test_v2_signature_precedes_v1_in_table(self):
        order = [t for _, t in DIAGRAM_PATTERNS]
        assert order.index("stateDiagram-v2") < order.index("stateDiagram")

    @pytest.mark.parametrize("line", ["A --> B", "flowcharts", "participant A", "%% graph"])
    def test_returns_none_for_other_lines(self, line):
        assert match_diagram_type(line) is None


# ============================================================================
# Keyword-delimited blocks
# ============================================================================


class TestMatchBlockKeyword:
    def test_matches_keyword_with_label(self):
        assert match_block_keyword("alt Case 1") == ("alt", "Case 1")

    def test_matches_bare_keyword(self):
        assert match_block_keyword("loop") == ("loop", None)

    def test_matches_subgraph(self):
        assert match_block_keyword("subgraph Group") == ("subgraph", "Group")

    def test_participant_is_not_par(self):
        assert match_block_keyword("participant A") is None

    def test_identifier_starting_with_keyword_is_not_a_block(self):
        assert match_block_keyword("loop-node --> B") is None
        assert match_block_keyword("alternative --> B") is None


class TestMatchContinuationKeyword:
    @pytest.mark.parametrize(
        "line, expected",
        [
            ("else", ("else", None)),
            ("else Case 2", ("else", "Case 2")),
            ("option Timeout", ("option", "Timeout")),
            ("and Branch B", ("and", "Branch B")),
        ],
    )
    def test_matches(self, line, expected):
        assert match_continuation_keyword(line) == expected

    def test_does_not_match_longer_identifiers(self):
        assert match_continuation_keyword("elsewhere --> B") is None
        assert match_continuation_keyword("options") is None
        assert match_continuation_keyword("android") is None


# ============================================================================
# Brace-delimited blocks
# ============================================================================


class TestMatchBraceBlockStart:
    def test_matches_simple_name(self):
        m = match_brace_block_start("class Animal {")
        assert m is not None
        assert m.kind == "class"
        assert m.name == "Animal"

    def test_keeps_quoted_name_with_spaces(self):
        m = match_brace_block_start('class "HTTP Client" {')
        assert m is not None
        assert m.name == '"HTTP Client"'

    def test_keeps_unquoted_name_with_spaces(self):
        m = match_brace_block_start("state In Progress {")
        assert m is not None
        assert m.kind == "state"
        assert m.name == "In Progress"

    def test_tolerates_spacing_around_brace(self):
        m = match_brace_block_start("namespace   Animals{   ")
        assert m is not None
        assert m.kind == "namespace"
        assert m.name == "Animals"

    def test_requires_trailing_brace(self):
        assert match_brace_block_start("class Animal") is None
        assert match_brace_block_start("state Idle") is None


# ============================================================================
# Arrow messages
# ============================================================================


class TestMatchArrowMessage:
    def test_splits_compact_message(self):
        m = match_arrow_message("A->>B:hello")
        assert m is not None
        assert (m.from_, m.arrow, m.to, m.message) == ("A", "->>", "B", "hello")

    def test_prefers_longest_operator(self):
        m = match_arrow_message("A-->>B: reply")
        assert m is not None
        assert m.arrow == "-->>"
        assert m.to == "B"

    @pytest.mark.parametrize("arrow", ["->>+", "-->>-", "-x", "--)", "<<->>"])
    def test_accepts_operator_spellings(self, arrow):
        m = match_arrow_message(f"A{arrow}B: text")
        assert m is not None
        assert m.arrow == arrow

    def test_multi_word_participants(self):
        m = match_arrow_message("client app ->> agent: initialize")
        assert m is not None
        assert m.from_ == "client app"
        assert m.to == "agent"

    def test_message_keeps_later_colons(self):
        m = match_arrow_message("A->>B: visit https://example.com")
        assert m is not None
        assert m.message == "visit https://example.com"

    def test_empty_message(self):
        m = match_arrow_message("A->>B:")
        assert m is not None
        assert m.message == ""

    def test_rejects_class_assignment_suffix(self):
        assert match_arrow_message("A --> B:::warning") is None

    def test_rejects_lines_without_colon(self):
        assert match_arrow_message("A --> B") is None

    @pytest.mark.parametrize(
        "line",
        [
            "A --> B[http://example.com]",
            "A --> B(see: docs)",
            "A --> B{x: y}",
            "A -->|note: x| B",
            'A --> "B: c"',
        ],
    )
    def test_rejects_colon_inside_target_delimiters(self, line):
        assert match_arrow_message(line) is None

    def test_balanced_target_still_matches(self):
        m = match_arrow_message("A --> B[busy]: go")
        assert m is not None
        assert (m.to, m.message) == ("B[busy]", "go")


# ============================================================================
# Declarations and dialect flags
# ============================================================================


class TestDeclarations:
    def test_participant_and_actor(self):
        assert match_participant("participant A as Alice")
        assert match_participant("actor U")
        assert not match_participant("participants --> B")

    def test_note_is_case_insensitive(self):
        assert match_note("Note right of A: hi")
        assert match_note("note over A,B: hi")
        assert not match_note("Notebook --> B")


class TestDialectFlags:
    def test_indent_sensitive_dialects(self):
        assert is_indent_sensitive("mindmap")
        assert is_indent_sensitive("timeline")
        assert not is_indent_sensitive("flowchart")
        assert not is_indent_sensitive("unknown")

    def test_arrow_message_dialects(self):
        assert supports_arrow_messages("sequenceDiagram")
        assert supports_arrow_messages("classDiagram")
        assert not supports_arrow_messages("erDiagram")
        assert not supports_arrow_messages("flowchart")
        assert not supports_arrow_messages("graph")
        assert not supports_arrow_messages("unknown")
