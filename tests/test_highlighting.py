from lsprotocol.types import DiagnosticSeverity, Position, Range

from cypherls.highlighting import (
    LEGEND,
    TOKEN_TYPES,
    ParsedToken,
    encode_semantic_tokens,
    highlight,
    semantic_tokens,
    validate_text,
)
from cypherls.language.parser import parse


def test_legend():
    assert LEGEND.token_types == TOKEN_TYPES
    assert TOKEN_TYPES.index("comment") == 0
    assert TOKEN_TYPES.index("keyword") == 2
    assert TOKEN_TYPES.index("variable") == 17


def test_highlight_query():
    tokens = highlight(parse("MATCH (n:Person) RETURN n.name"))

    assert tokens == [
        ParsedToken(0, 0, 5, "keyword"),
        ParsedToken(0, 7, 1, "variable"),
        ParsedToken(0, 9, 6, "typeParameter"),
        ParsedToken(0, 17, 6, "keyword"),
        ParsedToken(0, 24, 1, "variable"),
        ParsedToken(0, 26, 4, "property"),
    ]


def test_highlight_comments():
    tokens = highlight(parse("// all nodes\nRETURN 1"))

    assert tokens[0] == ParsedToken(0, 0, 12, "comment")
    assert ParsedToken(1, 0, 6, "keyword") in tokens


def test_multi_line_comment_is_split_per_line():
    tokens = highlight(parse("/* a\nb */ RETURN 1"))

    assert tokens[:2] == [
        ParsedToken(0, 0, 4, "comment"),
        ParsedToken(1, 0, 4, "comment"),
    ]


def test_encode_relative_positions():
    data = encode_semantic_tokens(
        [
            ParsedToken(0, 0, 5, "keyword"),
            ParsedToken(0, 7, 1, "variable"),
            ParsedToken(1, 2, 3, "keyword"),
        ]
    )

    assert data == [0, 0, 5, 2, 0, 0, 7, 1, 17, 0, 1, 2, 3, 2, 0]


def test_semantic_tokens_of_empty_text():
    assert semantic_tokens("").data == []


def test_valid_text_has_no_diagnostics():
    assert validate_text("MATCH (n:Person) RETURN n.name") == []


def test_end_of_input_diagnostic():
    diagnostics = validate_text("MATCH (n")

    assert len(diagnostics) == 1
    diagnostic = diagnostics[0]
    assert diagnostic.severity == DiagnosticSeverity.Warning
    assert diagnostic.source == "cypherls"
    assert diagnostic.message.startswith("Unexpected end of input")
    assert diagnostic.range == Range(
        start=Position(line=0, character=8), end=Position(line=0, character=8)
    )


def test_unexpected_token_diagnostic():
    diagnostics = validate_text("MATCH (n) RETURN n )")

    assert len(diagnostics) == 1
    assert diagnostics[0].message.startswith("Unexpected ')'")
    assert diagnostics[0].range == Range(
        start=Position(line=0, character=19), end=Position(line=0, character=20)
    )


def test_unterminated_string_diagnostic():
    diagnostics = validate_text("RETURN 'abc")

    unterminated = [d for d in diagnostics if d.message == "Unterminated string literal"]
    assert len(unterminated) == 1
    assert unterminated[0].range == Range(
        start=Position(line=0, character=7), end=Position(line=0, character=11)
    )
