"""
Rule candidate classification.

The grammar reuses the same name rules for labels, relationship types,
procedures and variables alike, so a name candidate alone does not say what
to complete. The stack of rules enclosing the candidate does.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from lsprotocol.types import CompletionItem, CompletionItemKind

from cypherls.autocompletion.types import Classification, Completions, Discarded
from cypherls.language.collector import CandidateRule
from cypherls.language.grammar import RuleKind
from cypherls.language.tokens import Token, TokenType
from cypherls.schema.db_schema import DbSchema


NAME_RULES = frozenset(
    {RuleKind.UNESCAPED_SYMBOLIC_NAME_STRING, RuleKind.SYMBOLIC_LABEL_NAME_STRING}
)

CALLABLE_NAME_RULES = frozenset({RuleKind.PROCEDURE_NAME, RuleKind.FUNCTION_NAME})

# Alias positions naming something that does not exist yet
CREATING_RULES = frozenset(
    {
        RuleKind.CREATE_ALIAS,
        RuleKind.CREATE_DATABASE,
        RuleKind.CREATE_COMPOSITE_DATABASE,
    }
)

ALIAS_ONLY_RULES = frozenset(
    {RuleKind.DROP_ALIAS, RuleKind.ALTER_ALIAS, RuleKind.SHOW_ALIASES}
)


def _items(names: Iterable[str], kind: CompletionItemKind) -> tuple[CompletionItem, ...]:
    return tuple(CompletionItem(label=name, kind=kind) for name in names)


def _classify_name(candidate: CandidateRule, schema: DbSchema) -> Classification:
    stack = candidate.rule_list

    # Function names deliberately offer the procedure catalog too
    if any(rule in CALLABLE_NAME_RULES for rule in stack):
        return Completions(
            _items(schema.procedure_names, CompletionItemKind.Function)
        )

    if RuleKind.RELATIONSHIP_PATTERN in stack:
        return Completions(
            _items(schema.relationship_types, CompletionItemKind.TypeParameter)
        )

    if RuleKind.NODE_PATTERN in stack:
        return Completions(_items(schema.labels, CompletionItemKind.TypeParameter))

    if RuleKind.LABEL_EXPRESSION in stack:
        return Completions(
            _items(
                [*schema.relationship_types, *schema.labels],
                CompletionItemKind.TypeParameter,
            )
        )

    return Discarded("name is not a schema name")


def _classify_alias(
    candidate: CandidateRule, schema: DbSchema, tokens: Sequence[Token]
) -> Classification:
    # "ALTER ALIAS a " still matches the dotted alias rule ("a . b" is legal),
    # so a space right after the first name means the name is complete.
    next_index = candidate.start_token_index + 1
    if next_index < len(tokens) and tokens[next_index].type is TokenType.SPACE:
        return Discarded("alias name already complete")

    stack = candidate.rule_list
    if any(rule in CREATING_RULES for rule in stack):
        return Discarded("naming a new alias or database")

    if any(rule in ALIAS_ONLY_RULES for rule in stack):
        return Completions(_items(schema.alias_names, CompletionItemKind.Value))

    return Completions(
        _items(
            [*schema.database_names, *schema.alias_names], CompletionItemKind.Value
        )
    )


def classify_rule_candidate(
    candidate: CandidateRule, schema: DbSchema, tokens: Sequence[Token]
) -> Classification:
    """Map one rule candidate to completion items, or say why it has none."""
    if candidate.rule in NAME_RULES:
        return _classify_name(candidate, schema)
    if candidate.rule is RuleKind.SYMBOLIC_ALIAS_NAME:
        return _classify_alias(candidate, schema, tokens)
    return Discarded(f"no completions for rule {candidate.rule.value}")


def classify_rule_candidates(
    candidates: Iterable[CandidateRule], schema: DbSchema, tokens: Sequence[Token]
) -> list[CompletionItem]:
    """Completion items for all rule candidates, in candidate order."""
    items: list[CompletionItem] = []
    for candidate in candidates:
        result = classify_rule_candidate(candidate, schema, tokens)
        if isinstance(result, Completions):
            items.extend(result.items)
    return items
