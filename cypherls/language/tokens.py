"""
Cypher token vocabulary.

Token types, their classification and their display names. The tables are
built once at import time and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


EOF_TEXT = "<EOF>"


class TokenType(Enum):
    """Every token the Cypher lexer can produce."""

    # Keywords (value is the canonical spelling)
    ALIAS = "ALIAS"
    ALIASES = "ALIASES"
    ALL = "ALL"
    ALTER = "ALTER"
    AND = "AND"
    AS = "AS"
    ASC = "ASC"
    ASCENDING = "ASCENDING"
    BY = "BY"
    CALL = "CALL"
    CASE = "CASE"
    COMPOSITE = "COMPOSITE"
    CONTAINS = "CONTAINS"
    CREATE = "CREATE"
    DATABASE = "DATABASE"
    DATABASES = "DATABASES"
    DEFAULT = "DEFAULT"
    DELETE = "DELETE"
    DESC = "DESC"
    DESCENDING = "DESCENDING"
    DETACH = "DETACH"
    DISTINCT = "DISTINCT"
    DROP = "DROP"
    ELSE = "ELSE"
    END = "END"
    ENDS = "ENDS"
    EXISTS = "EXISTS"
    FALSE = "FALSE"
    FOR = "FOR"
    FUNCTION = "FUNCTION"
    FUNCTIONS = "FUNCTIONS"
    HOME = "HOME"
    IF = "IF"
    IN = "IN"
    IS = "IS"
    LIMIT = "LIMIT"
    MATCH = "MATCH"
    MERGE = "MERGE"
    NOT = "NOT"
    NOWAIT = "NOWAIT"
    NULL = "NULL"
    ON = "ON"
    OPTIONAL = "OPTIONAL"
    OR = "OR"
    ORDER = "ORDER"
    PROCEDURE = "PROCEDURE"
    PROCEDURES = "PROCEDURES"
    PROPERTIES = "PROPERTIES"
    REMOVE = "REMOVE"
    REPLACE = "REPLACE"
    RETURN = "RETURN"
    SET = "SET"
    SHOW = "SHOW"
    SKIP = "SKIP"
    START = "START"
    STARTS = "STARTS"
    STOP = "STOP"
    TARGET = "TARGET"
    THEN = "THEN"
    TRUE = "TRUE"
    UNION = "UNION"
    UNWIND = "UNWIND"
    USE = "USE"
    WAIT = "WAIT"
    WHEN = "WHEN"
    WHERE = "WHERE"
    WITH = "WITH"
    XOR = "XOR"
    YIELD = "YIELD"

    # Names and literals
    UNESCAPED_SYMBOLIC_NAME = "UNESCAPED_SYMBOLIC_NAME"
    ESCAPED_SYMBOLIC_NAME = "ESCAPED_SYMBOLIC_NAME"
    STRING_LITERAL1 = "STRING_LITERAL1"
    STRING_LITERAL2 = "STRING_LITERAL2"
    UNSIGNED_DECIMAL_INTEGER = "UNSIGNED_DECIMAL_INTEGER"
    DECIMAL_DOUBLE = "DECIMAL_DOUBLE"

    # Operators
    PLUS = "PLUS"
    MINUS = "MINUS"
    TIMES = "TIMES"
    DIVIDE = "DIVIDE"
    PERCENT = "PERCENT"
    POW = "POW"
    EQ = "EQ"
    NEQ = "NEQ"
    LT = "LT"
    GT = "GT"
    LE = "LE"
    GE = "GE"
    REGEQ = "REGEQ"
    PLUSEQUAL = "PLUSEQUAL"
    BAR = "BAR"
    AMPERSAND = "AMPERSAND"
    EXCLAMATION_MARK = "EXCLAMATION_MARK"
    DOLLAR = "DOLLAR"

    # Punctuation
    DOT = "DOT"
    DOTDOT = "DOTDOT"
    COLON = "COLON"
    COMMA = "COMMA"
    SEMICOLON = "SEMICOLON"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"
    LCURLY = "LCURLY"
    RCURLY = "RCURLY"

    # Hidden channel
    SPACE = "SPACE"
    SINGLE_LINE_COMMENT = "SINGLE_LINE_COMMENT"
    MULTI_LINE_COMMENT = "MULTI_LINE_COMMENT"

    ERROR_CHAR = "ERROR_CHAR"
    EOF = "EOF"


class TokenCategory(Enum):
    """Classification of token types, used for completion and highlighting."""

    KEYWORD = "keyword"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    BRACKET = "bracket"
    SEPARATOR = "separator"
    SYMBOLIC_NAME = "symbolicName"
    STRING_LITERAL = "stringLiteral"
    NUMBER_LITERAL = "numberLiteral"
    COMMENT = "comment"
    WHITESPACE = "whitespace"
    ERROR = "error"
    EOF = "eof"


# Keywords are declared first, ALIAS through YIELD
_MEMBERS = list(TokenType)
KEYWORDS: frozenset[TokenType] = frozenset(
    _MEMBERS[: _MEMBERS.index(TokenType.YIELD) + 1]
)

# Case-insensitive keyword lookup, keyed by upper-case spelling
KEYWORDS_BY_TEXT = MappingProxyType({kw.value: kw for kw in KEYWORDS})

HIDDEN_TOKENS: frozenset[TokenType] = frozenset(
    {
        TokenType.SPACE,
        TokenType.SINGLE_LINE_COMMENT,
        TokenType.MULTI_LINE_COMMENT,
    }
)

_SYMBOLS = {
    TokenType.PLUS: ("+", TokenCategory.OPERATOR),
    TokenType.MINUS: ("-", TokenCategory.OPERATOR),
    TokenType.TIMES: ("*", TokenCategory.OPERATOR),
    TokenType.DIVIDE: ("/", TokenCategory.OPERATOR),
    TokenType.PERCENT: ("%", TokenCategory.OPERATOR),
    TokenType.POW: ("^", TokenCategory.OPERATOR),
    TokenType.EQ: ("=", TokenCategory.OPERATOR),
    TokenType.NEQ: ("<>", TokenCategory.OPERATOR),
    TokenType.LT: ("<", TokenCategory.OPERATOR),
    TokenType.GT: (">", TokenCategory.OPERATOR),
    TokenType.LE: ("<=", TokenCategory.OPERATOR),
    TokenType.GE: (">=", TokenCategory.OPERATOR),
    TokenType.REGEQ: ("=~", TokenCategory.OPERATOR),
    TokenType.PLUSEQUAL: ("+=", TokenCategory.OPERATOR),
    TokenType.BAR: ("|", TokenCategory.OPERATOR),
    TokenType.AMPERSAND: ("&", TokenCategory.OPERATOR),
    TokenType.EXCLAMATION_MARK: ("!", TokenCategory.OPERATOR),
    TokenType.DOLLAR: ("$", TokenCategory.OPERATOR),
    TokenType.DOT: (".", TokenCategory.PUNCTUATION),
    TokenType.DOTDOT: ("..", TokenCategory.PUNCTUATION),
    TokenType.COLON: (":", TokenCategory.PUNCTUATION),
    TokenType.COMMA: (",", TokenCategory.SEPARATOR),
    TokenType.SEMICOLON: (";", TokenCategory.SEPARATOR),
    TokenType.LPAREN: ("(", TokenCategory.BRACKET),
    TokenType.RPAREN: (")", TokenCategory.BRACKET),
    TokenType.LBRACKET: ("[", TokenCategory.BRACKET),
    TokenType.RBRACKET: ("]", TokenCategory.BRACKET),
    TokenType.LCURLY: ("{", TokenCategory.BRACKET),
    TokenType.RCURLY: ("}", TokenCategory.BRACKET),
}


def _build_categories() -> dict[TokenType, TokenCategory]:
    categories = {kw: TokenCategory.KEYWORD for kw in KEYWORDS}
    categories.update({t: category for t, (_, category) in _SYMBOLS.items()})
    categories.update(
        {
            TokenType.UNESCAPED_SYMBOLIC_NAME: TokenCategory.SYMBOLIC_NAME,
            TokenType.ESCAPED_SYMBOLIC_NAME: TokenCategory.SYMBOLIC_NAME,
            TokenType.STRING_LITERAL1: TokenCategory.STRING_LITERAL,
            TokenType.STRING_LITERAL2: TokenCategory.STRING_LITERAL,
            TokenType.UNSIGNED_DECIMAL_INTEGER: TokenCategory.NUMBER_LITERAL,
            TokenType.DECIMAL_DOUBLE: TokenCategory.NUMBER_LITERAL,
            TokenType.SPACE: TokenCategory.WHITESPACE,
            TokenType.SINGLE_LINE_COMMENT: TokenCategory.COMMENT,
            TokenType.MULTI_LINE_COMMENT: TokenCategory.COMMENT,
            TokenType.ERROR_CHAR: TokenCategory.ERROR,
            TokenType.EOF: TokenCategory.EOF,
        }
    )
    return categories


TOKEN_CATEGORIES = MappingProxyType(_build_categories())

# Display names used when a token is offered as a completion
TOKEN_NAMES = MappingProxyType(
    {
        **{kw: kw.value for kw in KEYWORDS},
        **{t: symbol for t, (symbol, _) in _SYMBOLS.items()},
    }
)


@dataclass(frozen=True)
class Token:
    """A lexical unit produced by the lexer."""

    type: TokenType
    text: str
    start: int  # 0-based offset of the first character
    stop: int  # 0-based offset of the last character (inclusive)
    line: int  # 1-based
    column: int  # 0-based
    index: int  # position in the token stream
    hidden: bool = False

    @property
    def category(self) -> TokenCategory:
        return TOKEN_CATEGORIES[self.type]

    @property
    def is_eof(self) -> bool:
        return self.type is TokenType.EOF
