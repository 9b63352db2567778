"""
Semantic highlighting and syntax validation.

Both work on a single parse of the document. Highlighting is a walk over
the parse tree that returns the tokens to colour; nothing is registered on
the parser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from lsprotocol.types import (
    Diagnostic,
    DiagnosticSeverity,
    Position,
    Range,
    SemanticTokens,
    SemanticTokensLegend,
)

from cypherls.language.grammar import RuleKind
from cypherls.language.lexer import SyntaxIssue
from cypherls.language.parser import ParsingResult, parse
from cypherls.language.tokens import EOF_TEXT, Token, TokenCategory
from cypherls.language.tree import RuleNode


TOKEN_TYPES = [
    "comment", "string", "keyword", "number", "regexp", "operator", "namespace",
    "type", "struct", "class", "interface", "enum", "typeParameter", "function",
    "method", "decorator", "macro", "variable", "parameter", "property", "label",
]  # fmt: skip

TOKEN_MODIFIERS = [
    "declaration", "documentation", "readonly", "static", "abstract",
    "deprecated", "modification", "async",
]  # fmt: skip

LEGEND = SemanticTokensLegend(
    token_types=TOKEN_TYPES, token_modifiers=TOKEN_MODIFIERS
)

_TOKEN_TYPE_INDEX = {name: index for index, name in enumerate(TOKEN_TYPES)}

# Innermost matching rule decides the colour of the tokens below it
_RULE_TOKEN_TYPES = {
    RuleKind.SYMBOLIC_LABEL_NAME_STRING: "typeParameter",
    RuleKind.PROPERTY_KEY_NAME: "property",
    RuleKind.VARIABLE: "variable",
    RuleKind.PARAMETER: "parameter",
    RuleKind.PROCEDURE_NAME: "function",
    RuleKind.FUNCTION_NAME: "function",
    RuleKind.SYMBOLIC_ALIAS_NAME: "namespace",
    RuleKind.STRING_LITERAL: "string",
    RuleKind.NUMBER_LITERAL: "number",
}

_CATEGORY_TOKEN_TYPES = {
    TokenCategory.KEYWORD: "keyword",
    TokenCategory.OPERATOR: "operator",
    TokenCategory.STRING_LITERAL: "string",
    TokenCategory.NUMBER_LITERAL: "number",
    TokenCategory.COMMENT: "comment",
}

DIAGNOSTIC_SOURCE = "cypherls"


@dataclass(frozen=True)
class ParsedToken:
    line: int  # 0-based
    start_character: int
    length: int
    token_type: str


def _pieces(token: Token, token_type: str) -> Iterator[ParsedToken]:
    """One entry per line the token spans."""
    line = token.line - 1
    column = token.column
    for text in token.text.split("\n"):
        if text:
            yield ParsedToken(line, column, len(text), token_type)
        line += 1
        column = 0


def _collect(
    node: RuleNode, inherited: str | None, out: list[ParsedToken]
) -> None:
    token_type = _RULE_TOKEN_TYPES.get(node.rule, inherited)
    for child in node.children:
        if isinstance(child, RuleNode):
            _collect(child, token_type, out)
            continue
        token = child.token
        if token.is_eof:
            continue
        # Punctuation inside names ($, `.` in a dotted name) keeps its own colour
        if token_type is not None and token.category in (
            TokenCategory.KEYWORD,
            TokenCategory.SYMBOLIC_NAME,
            TokenCategory.STRING_LITERAL,
            TokenCategory.NUMBER_LITERAL,
        ):
            out.extend(_pieces(token, token_type))
        elif token.category in _CATEGORY_TOKEN_TYPES:
            out.extend(_pieces(token, _CATEGORY_TOKEN_TYPES[token.category]))


def highlight(parsing_result: ParsingResult) -> list[ParsedToken]:
    """Tokens to highlight, sorted by position."""
    tokens: list[ParsedToken] = []
    _collect(parsing_result.tree, None, tokens)

    for token in parsing_result.tokens:
        if token.category is TokenCategory.COMMENT:
            tokens.extend(_pieces(token, "comment"))

    return sorted(tokens, key=lambda t: (t.line, t.start_character))


def encode_semantic_tokens(tokens: list[ParsedToken]) -> list[int]:
    """Encode sorted tokens with the relative positions LSP expects."""
    data: list[int] = []
    previous_line = 0
    previous_start = 0
    for token in tokens:
        delta_line = token.line - previous_line
        delta_start = (
            token.start_character - previous_start
            if delta_line == 0
            else token.start_character
        )
        data.extend(
            [
                delta_line,
                delta_start,
                token.length,
                _TOKEN_TYPE_INDEX.get(token.token_type, 0),
                0,
            ]
        )
        previous_line = token.line
        previous_start = token.start_character
    return data


def semantic_tokens(text: str) -> SemanticTokens:
    return SemanticTokens(data=encode_semantic_tokens(highlight(parse(text))))


def _issue_range(token: Token) -> Range:
    line = token.line - 1
    if token.is_eof and token.text == EOF_TEXT:
        length = 0
    else:
        # Only the first line of a token spanning several
        length = len(token.text.split("\n", 1)[0])
    return Range(
        start=Position(line=line, character=token.column),
        end=Position(line=line, character=token.column + length),
    )


def issue_to_diagnostic(issue: SyntaxIssue) -> Diagnostic:
    return Diagnostic(
        range=_issue_range(issue.token),
        message=issue.message,
        severity=DiagnosticSeverity.Warning,
        source=DIAGNOSTIC_SOURCE,
    )


def validate_text(text: str) -> list[Diagnostic]:
    """Syntax problems in ``text`` as LSP diagnostics."""
    return [issue_to_diagnostic(issue) for issue in parse(text).issues]
