"""
Text Synchronization Manager

Manages LSP text sync events and provides hook extension points
for capabilities to react to document lifecycle events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Sequence

from lsprotocol.types import (
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    LogMessageParams,
    MessageType,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
)

if TYPE_CHECKING:
    from cypherls.lsp.cypher_language_server import CypherLanguageServer


# Type aliases for hook signatures
OnOpenHook = Callable[[DidOpenTextDocumentParams], Awaitable[None]]
OnChangeHook = Callable[[DidChangeTextDocumentParams], Awaitable[None]]
OnSaveHook = Callable[[DidSaveTextDocumentParams], Awaitable[None]]
OnCloseHook = Callable[[DidCloseTextDocumentParams], Awaitable[None]]


class TextSyncManager:
    """
    Manages text document synchronization and hook broadcasting.

    Text sync is infrastructure, not a capability: the schema store and the
    capabilities register hooks here to react to documents being opened,
    edited, saved and closed.

    - Hooks run in registration order
    - Errors are isolated (one hook failure doesn't affect others)
    - No return values (notifications, not requests)

    Usage:
        text_sync = TextSyncManager(server)
        text_sync.register_handlers()
        server.text_sync_manager = text_sync

        # The schema store reloads the schema file when it is saved
        text_sync.add_on_save_hook(schema_store._on_schema_file_saved)

        # Diagnostics are refreshed while typing
        text_sync.add_on_change_hook(publish_diagnostics)
    """

    def __init__(self, server: CypherLanguageServer) -> None:
        self.server = server

        # Hook registries for each event type
        self._on_open_hooks: list[OnOpenHook] = []
        self._on_change_hooks: list[OnChangeHook] = []
        self._on_save_hooks: list[OnSaveHook] = []
        self._on_close_hooks: list[OnCloseHook] = []

    def add_on_open_hook(self, hook: OnOpenHook) -> None:
        """Register a hook for document open events."""
        self._on_open_hooks.append(hook)

    def add_on_change_hook(self, hook: OnChangeHook) -> None:
        """
        Register a hook for document change events.

        Change hooks run on every keystroke: they must stay fast.
        """
        self._on_change_hooks.append(hook)

    def add_on_save_hook(self, hook: OnSaveHook) -> None:
        """Register a hook for document save events."""
        self._on_save_hooks.append(hook)

    def add_on_close_hook(self, hook: OnCloseHook) -> None:
        """Register a hook for document close events."""
        self._on_close_hooks.append(hook)

    async def _broadcast(
        self, event: str, hooks: Sequence[Callable[[Any], Awaitable[None]]], params
    ) -> None:
        """
        Call every hook registered for ``event`` with ``params``.

        Errors are logged and the remaining hooks still run.
        """
        for hook in hooks:
            try:
                await hook(params)
            except Exception as e:
                self.server.window_log_message(
                    LogMessageParams(
                        type=MessageType.Error,
                        message=f"Error in {event} hook {hook.__name__}: "
                                f"{type(e).__name__}: {e}"
                    )
                )

    async def _broadcast_on_open(self, params: DidOpenTextDocumentParams) -> None:
        await self._broadcast("on_open", self._on_open_hooks, params)

    async def _broadcast_on_change(
        self, params: DidChangeTextDocumentParams
    ) -> None:
        await self._broadcast("on_change", self._on_change_hooks, params)

    async def _broadcast_on_save(self, params: DidSaveTextDocumentParams) -> None:
        await self._broadcast("on_save", self._on_save_hooks, params)

    async def _broadcast_on_close(
        self, params: DidCloseTextDocumentParams
    ) -> None:
        await self._broadcast("on_close", self._on_close_hooks, params)

    def register_handlers(self) -> None:
        """
        Register LSP text synchronization handlers with the server.

        Registers handlers for:
        - textDocument/didOpen
        - textDocument/didChange
        - textDocument/didSave
        - textDocument/didClose

        pygls keeps ``ls.workspace`` up to date before the handlers run.
        """

        @self.server.feature(TEXT_DOCUMENT_DID_OPEN)
        async def did_open(
            ls: CypherLanguageServer,
            params: DidOpenTextDocumentParams,
        ) -> None:
            ls.window_log_message(
                LogMessageParams(
                    type=MessageType.Log,
                    message=f"Document opened: {params.text_document.uri}"
                )
            )
            await self._broadcast_on_open(params)

        @self.server.feature(TEXT_DOCUMENT_DID_CHANGE)
        async def did_change(
            ls: CypherLanguageServer,
            params: DidChangeTextDocumentParams,
        ) -> None:
            await self._broadcast_on_change(params)

        @self.server.feature(TEXT_DOCUMENT_DID_SAVE)
        async def did_save(
            ls: CypherLanguageServer,
            params: DidSaveTextDocumentParams,
        ) -> None:
            ls.window_log_message(
                LogMessageParams(
                    type=MessageType.Log,
                    message=f"Document saved: {params.text_document.uri}"
                )
            )
            await self._broadcast_on_save(params)

        @self.server.feature(TEXT_DOCUMENT_DID_CLOSE)
        async def did_close(
            ls: CypherLanguageServer,
            params: DidCloseTextDocumentParams,
        ) -> None:
            ls.window_log_message(
                LogMessageParams(
                    type=MessageType.Log,
                    message=f"Document closed: {params.text_document.uri}"
                )
            )
            await self._broadcast_on_close(params)
