"""
Completions read off the parse tree around the caret.

Used when candidate collection has nothing to offer. Only the position of
the node where parsing stopped is looked at.
"""

from __future__ import annotations

from lsprotocol.types import CompletionItem, CompletionItemKind

from cypherls.autocompletion.navigation import (
    find_stop_node,
    in_procedure_name,
    in_relationship_type,
    parent_expression,
)
from cypherls.autocompletion.types import NO_OPINION, CompletionResult
from cypherls.language.parser import ParsingResult, parse
from cypherls.language.tokens import EOF_TEXT, TokenType
from cypherls.schema.db_schema import DbSchema


# Appended to the text so the parser commits to the production being typed
FILLER_CHARACTER = "x"


def relationship_type_items(schema: DbSchema) -> list[CompletionItem]:
    return [
        CompletionItem(label=name, kind=CompletionItemKind.TypeParameter)
        for name in schema.relationship_types
    ]


def function_items(schema: DbSchema, prefix: str) -> list[CompletionItem]:
    """Function names starting with ``prefix`` (case-sensitive)."""
    return [
        CompletionItem(label=name, kind=CompletionItemKind.Function)
        for name in schema.function_names
        if name.startswith(prefix)
    ]


def procedure_items(schema: DbSchema) -> list[CompletionItem]:
    return [
        CompletionItem(label=name, kind=CompletionItemKind.Function)
        for name in schema.procedure_names
    ]


def autocomplete_structurally(
    parsing_result: ParsingResult, schema: DbSchema
) -> CompletionResult:
    tokens = parsing_result.tokens
    last_index = len(tokens) - 2

    if last_index < 0:
        return NO_OPINION
    # Lexing stopped early (e.g. inside an unclosed string): nothing sensible
    # can be offered there
    if tokens[last_index + 1].text != EOF_TEXT:
        return []
    if tokens[last_index].type is TokenType.SPACE:
        return NO_OPINION

    stop_node = find_stop_node(parsing_result.tree)

    if in_relationship_type(stop_node):
        return relationship_type_items(schema)

    expression = parent_expression(stop_node)
    if expression is not None:
        return function_items(schema, expression.get_text())

    if in_procedure_name(stop_node):
        return procedure_items(schema)

    return NO_OPINION


def autocomplete_structurally_adding_char(
    text_until_position: str, schema: DbSchema
) -> CompletionResult:
    """
    Reparse with a filler character at the caret.

    An empty relationship type slot (``-[:``) only becomes a label expression
    once a name follows it.
    """
    parsing_result = parse(text_until_position + FILLER_CHARACTER)
    tokens = parsing_result.tokens
    last_index = len(tokens) - 2

    if last_index < 0:
        return NO_OPINION
    if tokens[last_index].type is TokenType.SPACE:
        return NO_OPINION

    if in_relationship_type(find_stop_node(parsing_result.tree)):
        return relationship_type_items(schema)

    return NO_OPINION
