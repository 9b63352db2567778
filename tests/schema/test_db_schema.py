import pytest
from lsprotocol.types import SignatureInformation

from cypherls.schema.db_schema import DbSchema


def test_empty_by_default():
    schema = DbSchema()

    assert schema.is_empty
    assert schema.labels == ()
    assert schema.procedure_names == []
    assert schema.function_names == []


def test_from_none():
    assert DbSchema.from_dict(None).is_empty


def test_camel_case_keys():
    schema = DbSchema.from_dict(
        {
            "labels": ["Person", "Movie"],
            "relationshipTypes": ["ACTED_IN"],
            "databaseNames": ["neo4j"],
            "aliasNames": ["movies"],
            "propertyKeys": ["name"],
            "parameters": {"limit": 10},
        }
    )

    assert schema.labels == ("Person", "Movie")
    assert schema.relationship_types == ("ACTED_IN",)
    assert schema.database_names == ("neo4j",)
    assert schema.alias_names == ("movies",)
    assert schema.property_keys == ("name",)
    assert schema.parameters["limit"] == 10
    assert not schema.is_empty


def test_snake_case_keys():
    schema = DbSchema.from_dict(
        {"relationship_types": ["KNOWS"], "alias_names": ["a"]}
    )

    assert schema.relationship_types == ("KNOWS",)
    assert schema.alias_names == ("a",)


def test_null_entries_are_empty():
    schema = DbSchema.from_dict({"labels": None, "procedureSignatures": None})

    assert schema.is_empty


def test_signatures_from_names_keep_order():
    schema = DbSchema.from_dict(
        {"procedureSignatures": ["db.labels", "apoc.help", "dbms.info"]}
    )

    assert schema.procedure_names == ["db.labels", "apoc.help", "dbms.info"]
    assert schema.procedure_signatures["db.labels"].label == "db.labels"


def test_signature_shapes():
    schema = DbSchema.from_dict(
        {
            "functionSignatures": {
                "toUpper": "toUpper(input :: STRING) :: STRING",
                "abs": {"label": "abs(input)", "documentation": "Absolute value"},
                "rand": None,
            }
        }
    )

    signatures = schema.function_signatures
    assert signatures["toUpper"].label == "toUpper(input :: STRING) :: STRING"
    assert signatures["abs"].label == "abs(input)"
    assert signatures["abs"].documentation == "Absolute value"
    assert signatures["rand"].label == "rand"


def test_signature_objects_are_kept():
    signature = SignatureInformation(label="db.labels() :: (label)")
    schema = DbSchema.from_dict({"procedureSignatures": {"db.labels": signature}})

    assert schema.procedure_signatures["db.labels"] is signature


def test_snapshot_is_read_only():
    schema = DbSchema.from_dict({"procedureSignatures": ["db.labels"]})

    with pytest.raises(TypeError):
        schema.procedure_signatures["other"] = None


@pytest.mark.parametrize(
    "data",
    [
        ["Person"],
        {"labels": "Person"},
        {"labels": {"Person": 1}},
        {"labels": 3},
        {"procedureSignatures": "db.labels"},
        {"functionSignatures": {"abs": 3}},
        {"parameters": ["limit"]},
    ],
)
def test_wrong_shapes(data):
    with pytest.raises(TypeError):
        DbSchema.from_dict(data)
