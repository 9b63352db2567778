"""
Cypher grammar.

The grammar is plain data: every rule kind maps to an element tree built from
a handful of combinators. Both the parser and the candidate collector
interpret the same mapping, so a rule written once drives parse trees,
completions and highlighting alike.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union

from cypherls.language.tokens import KEYWORDS, TokenType as T


class RuleKind(Enum):
    """Closed set of grammar rules; every parse tree node carries one."""

    STATEMENTS = "statements"
    STATEMENT = "statement"
    REGULAR_QUERY = "regularQuery"
    UNION = "union"
    SINGLE_QUERY = "singleQuery"
    CLAUSE = "clause"
    USE_CLAUSE = "useClause"
    GRAPH_REFERENCE = "graphReference"
    MATCH_CLAUSE = "matchClause"
    WHERE_CLAUSE = "whereClause"
    CREATE_CLAUSE = "createClause"
    MERGE_CLAUSE = "mergeClause"
    MERGE_ACTION = "mergeAction"
    DELETE_CLAUSE = "deleteClause"
    SET_CLAUSE = "setClause"
    SET_ITEM = "setItem"
    REMOVE_CLAUSE = "removeClause"
    REMOVE_ITEM = "removeItem"
    WITH_CLAUSE = "withClause"
    RETURN_CLAUSE = "returnClause"
    RETURN_BODY = "returnBody"
    RETURN_ITEMS = "returnItems"
    RETURN_ITEM = "returnItem"
    ORDER_BY = "orderBy"
    ORDER_ITEM = "orderItem"
    SKIP_CLAUSE = "skip"
    LIMIT_CLAUSE = "limit"
    UNWIND_CLAUSE = "unwindClause"
    CALL_CLAUSE = "callClause"
    SUBQUERY = "subquery"
    PROCEDURE_NAME = "procedureName"
    PROCEDURE_ARGUMENTS = "procedureArguments"
    YIELD_CLAUSE = "yieldClause"
    YIELD_ITEM = "yieldItem"
    NAMESPACE = "namespace"

    PATTERN_LIST = "patternList"
    PATTERN = "pattern"
    PATTERN_ELEMENT = "patternElement"
    NODE_PATTERN = "nodePattern"
    RELATIONSHIP_PATTERN = "relationshipPattern"
    LEFT_ARROW = "leftArrow"
    ARROW_LINE = "arrowLine"
    RIGHT_ARROW = "rightArrow"
    PATH_LENGTH = "pathLength"
    PROPERTIES = "properties"
    NODE_LABELS = "nodeLabels"
    LABEL_EXPRESSION = "labelExpression"
    LABEL_EXPRESSION4 = "labelExpression4"
    LABEL_EXPRESSION3 = "labelExpression3"
    LABEL_EXPRESSION2 = "labelExpression2"
    LABEL_EXPRESSION1 = "labelExpression1"

    EXPRESSION = "expression"
    EXPRESSION11 = "expression11"
    EXPRESSION10 = "expression10"
    EXPRESSION9 = "expression9"
    EXPRESSION8 = "expression8"
    EXPRESSION7 = "expression7"
    COMPARISON_EXPRESSION6 = "comparisonExpression6"
    EXPRESSION6 = "expression6"
    EXPRESSION5 = "expression5"
    EXPRESSION4 = "expression4"
    EXPRESSION3 = "expression3"
    EXPRESSION2 = "expression2"
    POSTFIX = "postFix"
    PROPERTY_LOOKUP = "property"
    EXPRESSION1 = "expression1"
    LITERAL = "literal"
    NUMBER_LITERAL = "numberLiteral"
    LIST_LITERAL = "listLiteral"
    MAP = "map"
    PARAMETER = "parameter"
    CASE_EXPRESSION = "caseExpression"
    EXISTS_EXPRESSION = "existsExpression"
    PARENTHESIZED_EXPRESSION = "parenthesizedExpression"
    FUNCTION_INVOCATION = "functionInvocation"
    FUNCTION_NAME = "functionName"
    VARIABLE = "variable"
    PROPERTY_KEY_NAME = "propertyKeyName"

    COMMAND = "command"
    CREATE_COMMAND = "createCommand"
    CREATE_ALIAS = "createAlias"
    CREATE_DATABASE = "createDatabase"
    CREATE_COMPOSITE_DATABASE = "createCompositeDatabase"
    DROP_COMMAND = "dropCommand"
    DROP_ALIAS = "dropAlias"
    DROP_DATABASE = "dropDatabase"
    ALTER_COMMAND = "alterCommand"
    ALTER_ALIAS = "alterAlias"
    SHOW_COMMAND = "showCommand"
    SHOW_ALIASES = "showAliases"
    SHOW_DATABASE = "showDatabase"
    SHOW_PROCEDURES = "showProcedures"
    SHOW_FUNCTIONS = "showFunctions"
    START_DATABASE = "startDatabase"
    STOP_DATABASE = "stopDatabase"
    WAIT_CLAUSE = "waitClause"

    SYMBOLIC_ALIAS_NAME = "symbolicAliasName"
    SYMBOLIC_NAME_STRING = "symbolicNameString"
    ESCAPED_SYMBOLIC_NAME_STRING = "escapedSymbolicNameString"
    UNESCAPED_SYMBOLIC_NAME_STRING = "unescapedSymbolicNameString"
    SYMBOLIC_LABEL_NAME_STRING = "symbolicLabelNameString"
    STRING_LITERAL = "stringLiteral"


# ===== Combinators =====


class Element:
    """Base class of grammar elements."""


@dataclass(frozen=True, eq=False)
class Tok(Element):
    type: T


@dataclass(frozen=True, eq=False)
class Ref(Element):
    rule: RuleKind


@dataclass(frozen=True, eq=False)
class Seq(Element):
    items: tuple[Element, ...]


@dataclass(frozen=True, eq=False)
class Alt(Element):
    options: tuple[Element, ...]


@dataclass(frozen=True, eq=False)
class Opt(Element):
    item: Element


@dataclass(frozen=True, eq=False)
class Many(Element):
    """Zero or more repetitions."""

    item: Element


Part = Union[Element, T, RuleKind]


def _element(part: Part) -> Element:
    if isinstance(part, T):
        return Tok(part)
    if isinstance(part, RuleKind):
        return Ref(part)
    return part


def seq(*parts: Part) -> Element:
    if len(parts) == 1:
        return _element(parts[0])
    return Seq(tuple(_element(p) for p in parts))


def alt(*parts: Part) -> Alt:
    return Alt(tuple(_element(p) for p in parts))


def opt(*parts: Part) -> Opt:
    return Opt(seq(*parts))


def many(*parts: Part) -> Many:
    return Many(seq(*parts))


def some(*parts: Part) -> Seq:
    """One or more repetitions."""
    body = seq(*parts)
    return Seq((body, Many(body)))


def comma_list(part: Part) -> Seq:
    return Seq((_element(part), many(T.COMMA, part)))


# ===== Cypher =====

R = RuleKind

_NAME_TOKENS = (T.UNESCAPED_SYMBOLIC_NAME, *sorted(KEYWORDS, key=lambda t: t.value))

_RULES: dict[RuleKind, Element] = {
    R.STATEMENTS: seq(R.STATEMENT, many(T.SEMICOLON, R.STATEMENT), opt(T.SEMICOLON)),
    R.STATEMENT: alt(R.COMMAND, R.REGULAR_QUERY),
    R.REGULAR_QUERY: seq(R.SINGLE_QUERY, many(R.UNION, R.SINGLE_QUERY)),
    R.UNION: seq(T.UNION, opt(alt(T.ALL, T.DISTINCT))),
    R.SINGLE_QUERY: some(R.CLAUSE),
    R.CLAUSE: alt(
        R.USE_CLAUSE,
        R.MATCH_CLAUSE,
        R.CREATE_CLAUSE,
        R.MERGE_CLAUSE,
        R.DELETE_CLAUSE,
        R.SET_CLAUSE,
        R.REMOVE_CLAUSE,
        R.WITH_CLAUSE,
        R.RETURN_CLAUSE,
        R.UNWIND_CLAUSE,
        R.CALL_CLAUSE,
    ),
    R.USE_CLAUSE: seq(T.USE, R.GRAPH_REFERENCE),
    R.GRAPH_REFERENCE: alt(
        seq(T.LPAREN, R.GRAPH_REFERENCE, T.RPAREN),
        R.SYMBOLIC_ALIAS_NAME,
    ),
    R.MATCH_CLAUSE: seq(opt(T.OPTIONAL), T.MATCH, R.PATTERN_LIST, opt(R.WHERE_CLAUSE)),
    R.WHERE_CLAUSE: seq(T.WHERE, R.EXPRESSION),
    R.CREATE_CLAUSE: seq(T.CREATE, R.PATTERN_LIST),
    R.MERGE_CLAUSE: seq(T.MERGE, R.PATTERN, many(R.MERGE_ACTION)),
    R.MERGE_ACTION: seq(T.ON, alt(T.MATCH, T.CREATE), R.SET_CLAUSE),
    R.DELETE_CLAUSE: seq(opt(T.DETACH), T.DELETE, comma_list(R.EXPRESSION)),
    R.SET_CLAUSE: seq(T.SET, comma_list(R.SET_ITEM)),
    R.SET_ITEM: seq(
        R.VARIABLE,
        alt(
            seq(some(R.PROPERTY_LOOKUP), T.EQ, R.EXPRESSION),
            seq(T.EQ, R.EXPRESSION),
            seq(T.PLUSEQUAL, R.EXPRESSION),
            R.NODE_LABELS,
        ),
    ),
    R.REMOVE_CLAUSE: seq(T.REMOVE, comma_list(R.REMOVE_ITEM)),
    R.REMOVE_ITEM: seq(R.VARIABLE, alt(some(R.PROPERTY_LOOKUP), R.NODE_LABELS)),
    R.WITH_CLAUSE: seq(T.WITH, R.RETURN_BODY, opt(R.WHERE_CLAUSE)),
    R.RETURN_CLAUSE: seq(T.RETURN, R.RETURN_BODY),
    R.RETURN_BODY: seq(
        opt(T.DISTINCT),
        R.RETURN_ITEMS,
        opt(R.ORDER_BY),
        opt(R.SKIP_CLAUSE),
        opt(R.LIMIT_CLAUSE),
    ),
    R.RETURN_ITEMS: seq(alt(T.TIMES, R.RETURN_ITEM), many(T.COMMA, R.RETURN_ITEM)),
    R.RETURN_ITEM: seq(R.EXPRESSION, opt(T.AS, R.VARIABLE)),
    R.ORDER_BY: seq(T.ORDER, T.BY, comma_list(R.ORDER_ITEM)),
    R.ORDER_ITEM: seq(
        R.EXPRESSION, opt(alt(T.ASC, T.ASCENDING, T.DESC, T.DESCENDING))
    ),
    R.SKIP_CLAUSE: seq(T.SKIP, R.EXPRESSION),
    R.LIMIT_CLAUSE: seq(T.LIMIT, R.EXPRESSION),
    R.UNWIND_CLAUSE: seq(T.UNWIND, R.EXPRESSION, T.AS, R.VARIABLE),
    R.CALL_CLAUSE: seq(
        T.CALL,
        alt(
            R.SUBQUERY,
            seq(R.PROCEDURE_NAME, opt(R.PROCEDURE_ARGUMENTS), opt(R.YIELD_CLAUSE)),
        ),
    ),
    R.SUBQUERY: seq(T.LCURLY, R.REGULAR_QUERY, T.RCURLY),
    R.PROCEDURE_NAME: seq(R.NAMESPACE, R.SYMBOLIC_NAME_STRING),
    R.PROCEDURE_ARGUMENTS: seq(T.LPAREN, opt(comma_list(R.EXPRESSION)), T.RPAREN),
    R.YIELD_CLAUSE: seq(
        T.YIELD, alt(T.TIMES, comma_list(R.YIELD_ITEM)), opt(R.WHERE_CLAUSE)
    ),
    R.YIELD_ITEM: seq(R.VARIABLE, opt(T.AS, R.VARIABLE)),
    R.NAMESPACE: many(R.SYMBOLIC_NAME_STRING, T.DOT),

    # Patterns
    R.PATTERN_LIST: comma_list(R.PATTERN),
    R.PATTERN: seq(opt(R.VARIABLE, T.EQ), R.PATTERN_ELEMENT),
    R.PATTERN_ELEMENT: alt(
        seq(R.NODE_PATTERN, many(R.RELATIONSHIP_PATTERN, R.NODE_PATTERN)),
        seq(T.LPAREN, R.PATTERN_ELEMENT, T.RPAREN),
    ),
    R.NODE_PATTERN: seq(
        T.LPAREN,
        opt(R.VARIABLE),
        opt(R.LABEL_EXPRESSION),
        opt(R.PROPERTIES),
        opt(T.WHERE, R.EXPRESSION),
        T.RPAREN,
    ),
    R.RELATIONSHIP_PATTERN: seq(
        opt(R.LEFT_ARROW),
        R.ARROW_LINE,
        opt(
            T.LBRACKET,
            opt(R.VARIABLE),
            opt(R.LABEL_EXPRESSION),
            opt(R.PATH_LENGTH),
            opt(R.PROPERTIES),
            opt(T.WHERE, R.EXPRESSION),
            T.RBRACKET,
        ),
        R.ARROW_LINE,
        opt(R.RIGHT_ARROW),
    ),
    R.LEFT_ARROW: seq(T.LT),
    R.ARROW_LINE: seq(T.MINUS),
    R.RIGHT_ARROW: seq(T.GT),
    R.PATH_LENGTH: seq(
        T.TIMES,
        opt(
            alt(
                seq(opt(T.UNSIGNED_DECIMAL_INTEGER), T.DOTDOT, opt(T.UNSIGNED_DECIMAL_INTEGER)),
                T.UNSIGNED_DECIMAL_INTEGER,
            )
        ),
    ),
    R.PROPERTIES: alt(R.MAP, R.PARAMETER),
    R.NODE_LABELS: some(T.COLON, R.SYMBOLIC_LABEL_NAME_STRING),
    R.LABEL_EXPRESSION: seq(alt(T.COLON, T.IS), R.LABEL_EXPRESSION4),
    R.LABEL_EXPRESSION4: seq(
        R.LABEL_EXPRESSION3, many(T.BAR, opt(T.COLON), R.LABEL_EXPRESSION3)
    ),
    R.LABEL_EXPRESSION3: seq(
        R.LABEL_EXPRESSION2, many(alt(T.AMPERSAND, T.COLON), R.LABEL_EXPRESSION2)
    ),
    R.LABEL_EXPRESSION2: seq(many(T.EXCLAMATION_MARK), R.LABEL_EXPRESSION1),
    R.LABEL_EXPRESSION1: alt(
        seq(T.LPAREN, R.LABEL_EXPRESSION4, T.RPAREN),
        T.PERCENT,
        R.SYMBOLIC_LABEL_NAME_STRING,
    ),

    # Expressions, loosest binding first
    R.EXPRESSION: seq(R.EXPRESSION11, many(T.OR, R.EXPRESSION11)),
    R.EXPRESSION11: seq(R.EXPRESSION10, many(T.XOR, R.EXPRESSION10)),
    R.EXPRESSION10: seq(R.EXPRESSION9, many(T.AND, R.EXPRESSION9)),
    R.EXPRESSION9: seq(many(T.NOT), R.EXPRESSION8),
    R.EXPRESSION8: seq(
        R.EXPRESSION7,
        many(alt(T.EQ, T.NEQ, T.LE, T.GE, T.LT, T.GT), R.EXPRESSION7),
    ),
    R.EXPRESSION7: seq(R.EXPRESSION6, opt(R.COMPARISON_EXPRESSION6)),
    R.COMPARISON_EXPRESSION6: alt(
        seq(
            alt(
                T.REGEQ,
                seq(T.STARTS, T.WITH),
                seq(T.ENDS, T.WITH),
                T.CONTAINS,
                T.IN,
            ),
            R.EXPRESSION6,
        ),
        seq(T.IS, T.NULL),
        seq(T.IS, T.NOT, T.NULL),
    ),
    R.EXPRESSION6: seq(R.EXPRESSION5, many(alt(T.PLUS, T.MINUS), R.EXPRESSION5)),
    R.EXPRESSION5: seq(
        R.EXPRESSION4, many(alt(T.TIMES, T.DIVIDE, T.PERCENT), R.EXPRESSION4)
    ),
    R.EXPRESSION4: seq(R.EXPRESSION3, many(T.POW, R.EXPRESSION3)),
    R.EXPRESSION3: seq(many(alt(T.PLUS, T.MINUS)), R.EXPRESSION2),
    R.EXPRESSION2: seq(R.EXPRESSION1, many(R.POSTFIX)),
    R.POSTFIX: alt(
        R.PROPERTY_LOOKUP,
        R.LABEL_EXPRESSION,
        seq(
            T.LBRACKET,
            alt(
                seq(R.EXPRESSION, opt(T.DOTDOT, opt(R.EXPRESSION))),
                seq(T.DOTDOT, R.EXPRESSION),
            ),
            T.RBRACKET,
        ),
    ),
    R.PROPERTY_LOOKUP: seq(T.DOT, R.PROPERTY_KEY_NAME),
    R.EXPRESSION1: alt(
        R.LITERAL,
        R.PARAMETER,
        R.CASE_EXPRESSION,
        R.EXISTS_EXPRESSION,
        R.PARENTHESIZED_EXPRESSION,
        R.FUNCTION_INVOCATION,
        R.VARIABLE,
    ),
    R.LITERAL: alt(
        R.NUMBER_LITERAL,
        R.STRING_LITERAL,
        R.MAP,
        R.LIST_LITERAL,
        T.TRUE,
        T.FALSE,
        T.NULL,
    ),
    R.NUMBER_LITERAL: alt(T.UNSIGNED_DECIMAL_INTEGER, T.DECIMAL_DOUBLE),
    R.LIST_LITERAL: seq(T.LBRACKET, opt(comma_list(R.EXPRESSION)), T.RBRACKET),
    R.MAP: seq(
        T.LCURLY,
        opt(comma_list(seq(R.PROPERTY_KEY_NAME, T.COLON, R.EXPRESSION))),
        T.RCURLY,
    ),
    R.PARAMETER: seq(
        T.DOLLAR, alt(R.SYMBOLIC_NAME_STRING, T.UNSIGNED_DECIMAL_INTEGER)
    ),
    R.CASE_EXPRESSION: seq(
        T.CASE,
        opt(R.EXPRESSION),
        some(T.WHEN, R.EXPRESSION, T.THEN, R.EXPRESSION),
        opt(T.ELSE, R.EXPRESSION),
        T.END,
    ),
    R.EXISTS_EXPRESSION: seq(
        T.EXISTS,
        T.LCURLY,
        alt(R.REGULAR_QUERY, seq(R.PATTERN_LIST, opt(R.WHERE_CLAUSE))),
        T.RCURLY,
    ),
    R.PARENTHESIZED_EXPRESSION: seq(T.LPAREN, R.EXPRESSION, T.RPAREN),
    R.FUNCTION_INVOCATION: seq(
        R.FUNCTION_NAME,
        T.LPAREN,
        opt(alt(T.TIMES, seq(opt(T.DISTINCT), comma_list(R.EXPRESSION)))),
        T.RPAREN,
    ),
    R.FUNCTION_NAME: seq(R.NAMESPACE, R.SYMBOLIC_NAME_STRING),
    R.VARIABLE: seq(R.SYMBOLIC_NAME_STRING),
    R.PROPERTY_KEY_NAME: seq(R.SYMBOLIC_NAME_STRING),

    # Administration commands
    R.COMMAND: alt(
        R.CREATE_COMMAND,
        R.DROP_COMMAND,
        R.ALTER_COMMAND,
        R.SHOW_COMMAND,
        R.START_DATABASE,
        R.STOP_DATABASE,
    ),
    R.CREATE_COMMAND: seq(
        T.CREATE,
        opt(T.OR, T.REPLACE),
        alt(R.CREATE_ALIAS, R.CREATE_COMPOSITE_DATABASE, R.CREATE_DATABASE),
    ),
    R.CREATE_ALIAS: seq(
        T.ALIAS,
        R.SYMBOLIC_ALIAS_NAME,
        opt(T.IF, T.NOT, T.EXISTS),
        T.FOR,
        T.DATABASE,
        R.SYMBOLIC_ALIAS_NAME,
        opt(T.PROPERTIES, R.MAP),
    ),
    R.CREATE_DATABASE: seq(
        T.DATABASE,
        R.SYMBOLIC_ALIAS_NAME,
        opt(T.IF, T.NOT, T.EXISTS),
        opt(R.WAIT_CLAUSE),
    ),
    R.CREATE_COMPOSITE_DATABASE: seq(
        T.COMPOSITE,
        T.DATABASE,
        R.SYMBOLIC_ALIAS_NAME,
        opt(T.IF, T.NOT, T.EXISTS),
        opt(R.WAIT_CLAUSE),
    ),
    R.DROP_COMMAND: seq(T.DROP, alt(R.DROP_ALIAS, R.DROP_DATABASE)),
    R.DROP_ALIAS: seq(
        T.ALIAS, R.SYMBOLIC_ALIAS_NAME, opt(T.IF, T.EXISTS), T.FOR, T.DATABASE
    ),
    R.DROP_DATABASE: seq(
        opt(T.COMPOSITE),
        T.DATABASE,
        R.SYMBOLIC_ALIAS_NAME,
        opt(T.IF, T.EXISTS),
        opt(R.WAIT_CLAUSE),
    ),
    R.ALTER_COMMAND: seq(T.ALTER, R.ALTER_ALIAS),
    R.ALTER_ALIAS: seq(
        T.ALIAS,
        R.SYMBOLIC_ALIAS_NAME,
        opt(T.IF, T.EXISTS),
        T.SET,
        T.DATABASE,
        alt(seq(T.TARGET, R.SYMBOLIC_ALIAS_NAME), seq(T.PROPERTIES, R.MAP)),
    ),
    R.SHOW_COMMAND: seq(
        T.SHOW,
        alt(R.SHOW_ALIASES, R.SHOW_DATABASE, R.SHOW_PROCEDURES, R.SHOW_FUNCTIONS),
    ),
    R.SHOW_ALIASES: seq(
        alt(T.ALIAS, T.ALIASES),
        opt(R.SYMBOLIC_ALIAS_NAME),
        T.FOR,
        alt(T.DATABASE, T.DATABASES),
    ),
    R.SHOW_DATABASE: seq(
        alt(
            seq(alt(T.DEFAULT, T.HOME), T.DATABASE),
            seq(alt(T.DATABASE, T.DATABASES), opt(R.SYMBOLIC_ALIAS_NAME)),
        ),
        opt(R.YIELD_CLAUSE),
    ),
    R.SHOW_PROCEDURES: seq(alt(T.PROCEDURE, T.PROCEDURES), opt(R.YIELD_CLAUSE)),
    R.SHOW_FUNCTIONS: seq(alt(T.FUNCTION, T.FUNCTIONS), opt(R.YIELD_CLAUSE)),
    R.START_DATABASE: seq(
        T.START, T.DATABASE, R.SYMBOLIC_ALIAS_NAME, opt(R.WAIT_CLAUSE)
    ),
    R.STOP_DATABASE: seq(
        T.STOP, T.DATABASE, R.SYMBOLIC_ALIAS_NAME, opt(R.WAIT_CLAUSE)
    ),
    R.WAIT_CLAUSE: alt(T.WAIT, T.NOWAIT),

    # Names
    R.SYMBOLIC_ALIAS_NAME: alt(
        seq(R.SYMBOLIC_NAME_STRING, many(T.DOT, R.SYMBOLIC_NAME_STRING)),
        R.PARAMETER,
    ),
    R.SYMBOLIC_NAME_STRING: alt(
        R.ESCAPED_SYMBOLIC_NAME_STRING, R.UNESCAPED_SYMBOLIC_NAME_STRING
    ),
    R.ESCAPED_SYMBOLIC_NAME_STRING: seq(T.ESCAPED_SYMBOLIC_NAME),
    R.UNESCAPED_SYMBOLIC_NAME_STRING: alt(*_NAME_TOKENS),
    R.SYMBOLIC_LABEL_NAME_STRING: alt(T.ESCAPED_SYMBOLIC_NAME, *_NAME_TOKENS),
    R.STRING_LITERAL: alt(T.STRING_LITERAL1, T.STRING_LITERAL2),
}

CYPHER_GRAMMAR: Mapping[RuleKind, Element] = MappingProxyType(_RULES)

START_RULE = RuleKind.STATEMENTS


def iter_references(element: Element):
    """Yield every rule kind referenced below ``element``."""
    if isinstance(element, Ref):
        yield element.rule
    elif isinstance(element, (Seq, Alt)):
        children = element.items if isinstance(element, Seq) else element.options
        for child in children:
            yield from iter_references(child)
    elif isinstance(element, (Opt, Many)):
        yield from iter_references(element.item)
