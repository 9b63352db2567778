"""
Basic tests for the Cypher Language Server.

These tests verify that the server can be created and has the expected features registered.
"""

from cypherls.lsp.server import _prefer_structural, create_server
from cypherls.lsp.capabilities.capabilities import (
    CompletionCapability,
    DiagnosticsCapability,
)
from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
)


def test_server_creation():
    """Test that the server can be created successfully."""
    server = create_server()
    assert server is not None
    assert server.name == "cypherls"
    assert server.version == "0.1.0"


def test_server_has_completion_feature():
    """Test that completion feature is registered."""
    server = create_server()

    assert TEXT_DOCUMENT_COMPLETION in server.protocol.fm._features


def test_server_has_semantic_tokens_feature():
    server = create_server()

    assert TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL in server.protocol.fm._features


def test_server_has_text_sync_features():
    """Test that document lifecycle handlers are registered."""
    server = create_server()

    for feature in (TEXT_DOCUMENT_DID_OPEN, TEXT_DOCUMENT_DID_CHANGE, TEXT_DOCUMENT_DID_SAVE):
        assert feature in server.protocol.fm._features


def test_server_wires_hooks():
    """Test that the schema store and diagnostics are hooked into text sync."""
    server = create_server()
    text_sync = server.text_sync_manager

    assert server.schema_store._on_schema_file_saved in text_sync._on_save_hooks
    assert len(text_sync._on_open_hooks) == 1
    assert len(text_sync._on_change_hooks) == 1


def test_completion_order():
    """Cypher completion is asked before document words."""
    server = create_server()
    manager = server.capability_manager

    names = [cap.name for cap in manager.get_capabilities_by_type(CompletionCapability)]
    assert names == ["cypher_completion", "document_words_completion"]
    assert len(manager.get_capabilities_by_type(DiagnosticsCapability)) == 1


def test_schema_starts_empty():
    server = create_server()

    assert server.schema_store.schema.is_empty


def test_candidates_first_by_default():
    server = create_server()

    assert server.prefer_structural is False


def test_prefer_structural_option():
    assert _prefer_structural({"preferStructural": True}) is True
    assert _prefer_structural({"preferStructural": False}) is False
    assert _prefer_structural({"schemaFile": "schema.yml"}) is False
    assert _prefer_structural(None) is False
    assert _prefer_structural(["preferStructural"]) is False
