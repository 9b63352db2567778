"""
Regex driven Cypher lexer.

Produces the full token stream, hidden channel included, terminated by a
single EOF token. Lexing never raises: unknown characters become ERROR_CHAR
tokens, and an unterminated string, escaped name or block comment ends the
stream early with an EOF token whose text is the part that could not be lexed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from cypherls.language.tokens import (
    EOF_TEXT,
    HIDDEN_TOKENS,
    KEYWORDS_BY_TEXT,
    Token,
    TokenType,
)


@dataclass(frozen=True)
class SyntaxIssue:
    """A lexer or parser problem anchored on a token."""

    message: str
    token: Token


@dataclass
class LexResult:
    tokens: list[Token] = field(default_factory=list)
    issues: list[SyntaxIssue] = field(default_factory=list)


# Order matters: earlier alternatives win at the same offset
_TOKEN_PATTERN = re.compile(
    r"""
    (?P<SPACE>\s+)
    |(?P<SINGLE_LINE_COMMENT>//[^\r\n]*)
    |(?P<MULTI_LINE_COMMENT>/\*.*?\*/)
    |(?P<DECIMAL_DOUBLE>\d+\.\d+(?:[eE][-+]?\d+)?|\d+[eE][-+]?\d+)
    |(?P<UNSIGNED_DECIMAL_INTEGER>\d+)
    |(?P<STRING_LITERAL1>'(?:[^'\\]|\\.)*')
    |(?P<STRING_LITERAL2>"(?:[^"\\]|\\.)*")
    |(?P<ESCAPED_SYMBOLIC_NAME>`(?:[^`]|``)*`)
    |(?P<IDENTIFIER>[^\W\d]\w*)
    |(?P<UNTERMINATED>/\*|['"`])
    |(?P<SYMBOL>\.\.|=~|<>|<=|>=|\+=|[-+*/%^=<>|&!$.:,;()\[\]{}])
    """,
    re.VERBOSE | re.DOTALL,
)

_SYMBOLS = {
    "..": TokenType.DOTDOT,
    "=~": TokenType.REGEQ,
    "<>": TokenType.NEQ,
    "<=": TokenType.LE,
    ">=": TokenType.GE,
    "+=": TokenType.PLUSEQUAL,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.TIMES,
    "/": TokenType.DIVIDE,
    "%": TokenType.PERCENT,
    "^": TokenType.POW,
    "=": TokenType.EQ,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "|": TokenType.BAR,
    "&": TokenType.AMPERSAND,
    "!": TokenType.EXCLAMATION_MARK,
    "$": TokenType.DOLLAR,
    ".": TokenType.DOT,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LCURLY,
    "}": TokenType.RCURLY,
}

_UNTERMINATED_MESSAGES = {
    "/*": "Unterminated block comment",
    "'": "Unterminated string literal",
    '"': "Unterminated string literal",
    "`": "Unterminated escaped name",
}


def _token_type(group: str, text: str) -> TokenType:
    if group == "IDENTIFIER":
        return KEYWORDS_BY_TEXT.get(text.upper(), TokenType.UNESCAPED_SYMBOLIC_NAME)
    if group == "SYMBOL":
        return _SYMBOLS[text]
    return TokenType[group]


def tokenize(text: str) -> LexResult:
    """Split ``text`` into tokens."""
    result = LexResult()
    pos = 0
    line = 1
    line_start = 0

    def make(token_type: TokenType, value: str, start: int) -> Token:
        return Token(
            type=token_type,
            text=value,
            start=start,
            stop=start + len(value) - 1,
            line=line,
            column=start - line_start,
            index=len(result.tokens),
            hidden=token_type in HIDDEN_TOKENS,
        )

    while pos < len(text):
        match = _TOKEN_PATTERN.match(text, pos)

        if match is None:
            # Characters no rule accepts, e.g. '#' or '@'
            result.tokens.append(make(TokenType.ERROR_CHAR, text[pos], pos))
            pos += 1
            continue

        group = match.lastgroup
        value = match.group()

        if group == "UNTERMINATED":
            eof = make(TokenType.EOF, text[pos:], pos)
            result.tokens.append(eof)
            result.issues.append(SyntaxIssue(_UNTERMINATED_MESSAGES[value], eof))
            return result

        result.tokens.append(make(_token_type(group, value), value, pos))

        newlines = value.count("\n")
        if newlines:
            line += newlines
            line_start = pos + value.rindex("\n") + 1
        pos = match.end()

    eof = Token(
        type=TokenType.EOF,
        text=EOF_TEXT,
        start=len(text),
        stop=len(text) - 1,
        line=line,
        column=len(text) - line_start,
        index=len(result.tokens),
    )
    result.tokens.append(eof)
    return result
