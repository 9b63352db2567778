from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from lsprotocol.types import (
    INITIALIZE,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    InitializeParams,
    LogMessageParams,
    MessageType,
    SemanticTokensParams,
)

from cypherls.highlighting import LEGEND
from cypherls.lsp.capabilities.capabilities import CapabilityManager
from cypherls.lsp.cypher_language_server import CypherLanguageServer
from cypherls.lsp.text_sync_manager import TextSyncManager
from cypherls.schema.loader import uri_to_path


def _workspace_root(params: InitializeParams) -> Path | None:
    if params.root_uri:
        return uri_to_path(params.root_uri)
    if params.workspace_folders:
        return uri_to_path(params.workspace_folders[0].uri)
    if params.root_path:
        return Path(params.root_path)
    return None


def _prefer_structural(initialization_options: Any) -> bool:
    if not isinstance(initialization_options, Mapping):
        return False
    return bool(initialization_options.get("preferStructural", False))


def create_server() -> CypherLanguageServer:
    """
    Creates and returns a configured Language Server instance.

    The LanguageServer class from pygls handles:
    - JSON-RPC communication with clients (editors)
    - Request/response lifecycle
    - Notifications and event handling
    """
    server = CypherLanguageServer("cypherls", "0.1.0")

    # TextSyncManager first so the schema store and the capabilities can
    # register hooks
    server.text_sync_manager = TextSyncManager(server)
    server.text_sync_manager.register_handlers()

    server.schema_store.register_text_sync_hooks()

    server.capability_manager = CapabilityManager(server)
    server.capability_manager.register_all()

    @server.feature(INITIALIZE)
    async def initialize(ls: CypherLanguageServer, params: InitializeParams):
        """
        Locate the workspace and load the schema used for completion.
        """
        ls.workspace_root = _workspace_root(params)
        if ls.workspace_root is not None:
            ls.window_log_message(
                LogMessageParams(
                    MessageType.Info, f"Workspace root: {ls.workspace_root}"
                )
            )

        ls.prefer_structural = _prefer_structural(params.initialization_options)
        ls.schema_store.load(params.initialization_options, ls.workspace_root)

    # Register aggregated handlers
    @server.feature(
        TEXT_DOCUMENT_COMPLETION,
        CompletionOptions(trigger_characters=[":", ".", " "]),
    )
    async def completion(ls: CypherLanguageServer, params: CompletionParams):
        if ls.capability_manager:
            return await ls.capability_manager.handle_completion(params)
        return CompletionList(is_incomplete=False, items=[])

    @server.feature(TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, LEGEND)
    async def semantic_tokens_full(
        ls: CypherLanguageServer, params: SemanticTokensParams
    ):
        if ls.capability_manager:
            return await ls.capability_manager.handle_semantic_tokens(params)
        return None

    return server
