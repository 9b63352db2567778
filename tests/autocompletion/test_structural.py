import pytest
from lsprotocol.types import CompletionItemKind

from cypherls.autocompletion.structural import (
    autocomplete_structurally,
    autocomplete_structurally_adding_char,
    function_items,
)
from cypherls.autocompletion.types import NO_OPINION
from cypherls.language.parser import parse
from cypherls.schema.db_schema import DbSchema


@pytest.fixture
def schema():
    return DbSchema.from_dict(
        {
            "labels": ["Person"],
            "relationshipTypes": ["KNOWS", "LIKES"],
            "functionSignatures": ["apoc.coll.sum", "apoc.create.node", "toUpper"],
            "procedureSignatures": ["db.labels", "db.schema.visualization"],
        }
    )


def labels(items):
    return [item.label for item in items]


def test_function_items_prefix_is_case_sensitive(schema):
    assert labels(function_items(schema, "apoc.c")) == [
        "apoc.coll.sum",
        "apoc.create.node",
    ]
    assert labels(function_items(schema, "TOUPPER")) == []
    assert labels(function_items(schema, "")) == [
        "apoc.coll.sum",
        "apoc.create.node",
        "toUpper",
    ]


def test_empty_text_has_no_opinion(schema):
    assert autocomplete_structurally(parse(""), schema) is NO_OPINION


def test_trailing_space_has_no_opinion(schema):
    assert autocomplete_structurally(parse("MATCH (n) "), schema) is NO_OPINION


def test_unclosed_string_gives_nothing(schema):
    assert autocomplete_structurally(parse("RETURN 'abc"), schema) == []


def test_relationship_type(schema):
    result = autocomplete_structurally(parse("MATCH (n)-[r:KNO"), schema)

    assert labels(result) == ["KNOWS", "LIKES"]
    assert all(item.kind == CompletionItemKind.TypeParameter for item in result)


def test_function_names_filtered_by_expression_text(schema):
    result = autocomplete_structurally(parse("RETURN apoc.co"), schema)

    assert labels(result) == ["apoc.coll.sum"]
    assert all(item.kind == CompletionItemKind.Function for item in result)


def test_procedure_names(schema):
    result = autocomplete_structurally(parse("CALL db"), schema)

    assert labels(result) == ["db.labels", "db.schema.visualization"]


def test_empty_relationship_type_slot_needs_filler(schema):
    assert autocomplete_structurally(parse("MATCH (n)-[r:"), schema) is NO_OPINION

    result = autocomplete_structurally_adding_char("MATCH (n)-[r:", schema)
    assert labels(result) == ["KNOWS", "LIKES"]


def test_filler_only_answers_relationship_types(schema):
    assert autocomplete_structurally_adding_char("MATCH (n:", schema) is NO_OPINION
    assert autocomplete_structurally_adding_char("MATCH (n) ", schema) is NO_OPINION
