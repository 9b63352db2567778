import pytest
from lsprotocol.types import CompletionItemKind

from cypherls.autocompletion.classifier import (
    classify_rule_candidate,
    classify_rule_candidates,
)
from cypherls.autocompletion.types import Completions, Discarded
from cypherls.language.collector import CandidateRule
from cypherls.language.grammar import RuleKind
from cypherls.language.lexer import tokenize
from cypherls.schema.db_schema import DbSchema


R = RuleKind


@pytest.fixture
def schema():
    return DbSchema.from_dict(
        {
            "labels": ["Person", "Movie"],
            "relationshipTypes": ["ACTED_IN", "DIRECTED"],
            "procedureSignatures": {"db.labels": None, "apoc.help": None},
            "functionSignatures": {"toUpper": None},
            "databaseNames": ["neo4j", "system"],
            "aliasNames": ["movies"],
        }
    )


@pytest.fixture
def tokens():
    return tokenize("abc").tokens


def name_candidate(*stack: RuleKind, rule=R.UNESCAPED_SYMBOLIC_NAME_STRING):
    return CandidateRule(rule=rule, start_token_index=0, rule_list=(R.STATEMENTS, *stack))


def labels_of(result):
    assert isinstance(result, Completions)
    return [item.label for item in result.items]


def test_procedure_name(schema, tokens):
    result = classify_rule_candidate(name_candidate(R.PROCEDURE_NAME), schema, tokens)

    assert labels_of(result) == ["db.labels", "apoc.help"]
    assert all(item.kind == CompletionItemKind.Function for item in result.items)


def test_function_name_offers_procedures(schema, tokens):
    result = classify_rule_candidate(name_candidate(R.FUNCTION_NAME), schema, tokens)

    assert labels_of(result) == ["db.labels", "apoc.help"]


def test_callable_name_wins_over_patterns(schema, tokens):
    candidate = name_candidate(R.RELATIONSHIP_PATTERN, R.EXPRESSION, R.FUNCTION_NAME)

    assert labels_of(classify_rule_candidate(candidate, schema, tokens)) == [
        "db.labels",
        "apoc.help",
    ]


def test_relationship_type(schema, tokens):
    candidate = name_candidate(
        R.RELATIONSHIP_PATTERN,
        R.LABEL_EXPRESSION,
        rule=R.SYMBOLIC_LABEL_NAME_STRING,
    )
    result = classify_rule_candidate(candidate, schema, tokens)

    assert labels_of(result) == ["ACTED_IN", "DIRECTED"]
    assert all(item.kind == CompletionItemKind.TypeParameter for item in result.items)


def test_node_label(schema, tokens):
    candidate = name_candidate(
        R.NODE_PATTERN, R.LABEL_EXPRESSION, rule=R.SYMBOLIC_LABEL_NAME_STRING
    )

    assert labels_of(classify_rule_candidate(candidate, schema, tokens)) == [
        "Person",
        "Movie",
    ]


def test_label_expression_outside_patterns(schema, tokens):
    candidate = name_candidate(
        R.WHERE_CLAUSE, R.LABEL_EXPRESSION, rule=R.SYMBOLIC_LABEL_NAME_STRING
    )

    assert labels_of(classify_rule_candidate(candidate, schema, tokens)) == [
        "ACTED_IN",
        "DIRECTED",
        "Person",
        "Movie",
    ]


def test_plain_variable_is_discarded(schema, tokens):
    result = classify_rule_candidate(name_candidate(R.VARIABLE), schema, tokens)

    assert isinstance(result, Discarded)


def test_other_rules_are_discarded(schema, tokens):
    candidate = name_candidate(R.NODE_PATTERN, rule=R.STRING_LITERAL)

    assert isinstance(classify_rule_candidate(candidate, schema, tokens), Discarded)


def alias_candidate(text: str, *stack: RuleKind):
    tokens = tokenize(text).tokens
    start = max(i for i, t in enumerate(tokens) if t.text == "m")
    return (
        CandidateRule(R.SYMBOLIC_ALIAS_NAME, start, (R.STATEMENTS, *stack)),
        tokens,
    )


def test_alias_followed_by_space_is_discarded(schema):
    candidate, tokens = alias_candidate("ALTER ALIAS m ", R.ALTER_ALIAS)

    assert isinstance(classify_rule_candidate(candidate, schema, tokens), Discarded)


@pytest.mark.parametrize(
    "rule", [R.CREATE_ALIAS, R.CREATE_DATABASE, R.CREATE_COMPOSITE_DATABASE]
)
def test_new_alias_or_database_is_discarded(schema, rule):
    candidate, tokens = alias_candidate("CREATE DATABASE m", rule)

    assert isinstance(classify_rule_candidate(candidate, schema, tokens), Discarded)


@pytest.mark.parametrize("rule", [R.DROP_ALIAS, R.ALTER_ALIAS, R.SHOW_ALIASES])
def test_alias_only_positions(schema, rule):
    candidate, tokens = alias_candidate("DROP ALIAS m", rule)
    result = classify_rule_candidate(candidate, schema, tokens)

    assert labels_of(result) == ["movies"]
    assert all(item.kind == CompletionItemKind.Value for item in result.items)


def test_databases_and_aliases(schema):
    candidate, tokens = alias_candidate("USE m", R.USE_CLAUSE)

    assert labels_of(classify_rule_candidate(candidate, schema, tokens)) == [
        "neo4j",
        "system",
        "movies",
    ]


def test_discarded_candidates_are_filtered(schema, tokens):
    candidates = [
        name_candidate(R.VARIABLE),
        name_candidate(R.NODE_PATTERN, rule=R.SYMBOLIC_LABEL_NAME_STRING),
        name_candidate(R.PROCEDURE_NAME),
    ]

    items = classify_rule_candidates(candidates, schema, tokens)

    assert [item.label for item in items] == [
        "Person",
        "Movie",
        "db.labels",
        "apoc.help",
    ]


def test_empty_schema(tokens):
    result = classify_rule_candidate(name_candidate(R.NODE_PATTERN), DbSchema(), tokens)

    assert isinstance(result, Completions)
    assert result.items == ()
