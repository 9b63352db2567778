"""
LSP Capabilities Manager

This module manages LSP feature handlers (completion, semantic tokens,
diagnostics) using a plugin architecture.

Design Principles:
1. Plugin-based (add capabilities without modifying core)
2. Type-safe (abstract base class)
3. Composable (multiple handlers for same feature)
4. Testable (isolated capability handlers)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from lsprotocol.types import (
    CompletionList,
    CompletionParams,
    Diagnostic,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    LogMessageParams,
    MessageType,
    PublishDiagnosticsParams,
    SemanticTokens,
    SemanticTokensParams,
)


if TYPE_CHECKING:
    from cypherls.lsp.cypher_language_server import CypherLanguageServer


class Capability(ABC):
    """
    Base class for all LSP capability handlers.

    Each capability can handle one or more LSP features and decides whether
    it can handle a specific request based on context.
    """

    def __init__(self, server: CypherLanguageServer) -> None:
        self.server = server

    def register(self) -> None:
        """
        Register hooks with the server.

        This is called once during server initialization.
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this capability."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this capability does."""
        pass

    @abstractmethod
    async def can_handle(self, params) -> bool:
        """Check if the capability can handle the request."""
        pass


class CompletionCapability(Capability):
    """Base class for completion capabilities."""

    @abstractmethod
    async def can_handle(self, params: CompletionParams) -> bool:
        pass

    @abstractmethod
    async def complete(self, params: CompletionParams) -> CompletionList | None:
        """
        Provide completion items.

        Only called if can_handle() returns True. ``None`` means the
        capability has no opinion and the next one is asked; an empty list
        means nothing can be completed here.
        """
        pass


class SemanticTokensCapability(Capability):
    """Base class for semantic highlighting capabilities."""

    @abstractmethod
    async def can_handle(self, params: SemanticTokensParams) -> bool:
        pass

    @abstractmethod
    async def semantic_tokens(
        self, params: SemanticTokensParams
    ) -> SemanticTokens | None:
        pass


class DiagnosticsCapability(Capability):
    """Base class for capabilities reporting problems in a document."""

    @abstractmethod
    async def can_handle(self, uri: str) -> bool:
        pass

    @abstractmethod
    async def diagnose(self, uri: str) -> list[Diagnostic]:
        pass


class CapabilityManager:
    """
    Central manager for all LSP capabilities.

    Usage:
        # In server initialization
        manager = CapabilityManager(server)
        manager.register_all()
    """

    def __init__(
        self,
        server: CypherLanguageServer,
        capabilities: dict[str, Capability] | None = None,
    ):
        self.server = server

        # Default capabilities, in the order they are consulted
        if capabilities is None:
            from cypherls.lsp.capabilities.completion_capabilities import (
                CypherCompletionCapability,
                DocumentWordsCompletionCapability,
            )
            from cypherls.lsp.capabilities.diagnostics_capabilities import (
                SyntaxDiagnosticsCapability,
            )
            from cypherls.lsp.capabilities.highlighting_capabilities import (
                CypherSemanticTokensCapability,
            )

            capabilities = {
                "cypher_completion": CypherCompletionCapability(server),
                "document_words_completion": DocumentWordsCompletionCapability(
                    server
                ),
                "cypher_semantic_tokens": CypherSemanticTokensCapability(server),
                "syntax_diagnostics": SyntaxDiagnosticsCapability(server),
            }

        self.capabilities = capabilities
        self._registered = False

    def register_all(self) -> None:
        """Register all capabilities with the server."""
        if self._registered:
            return

        for capability in self.capabilities.values():
            capability.register()

        text_sync = self.server.text_sync_manager
        if text_sync is not None and self.get_capabilities_by_type(
            DiagnosticsCapability
        ):
            text_sync.add_on_open_hook(self._on_document_opened)
            text_sync.add_on_change_hook(self._on_document_changed)
            text_sync.add_on_close_hook(self._on_document_closed)

        self._registered = True

    def get_capability(self, name: str) -> Capability | None:
        """Get a specific capability by name"""
        return self.capabilities.get(name)

    def get_capabilities_by_type(self, capability_type: type) -> list[Capability]:
        """Get all capabilities of a specific type (e.g., all CompletionCapability)."""
        return [
            cap
            for cap in self.capabilities.values()
            if isinstance(cap, capability_type)
        ]

    def _log_error(self, capability: Capability, action: str, e: Exception) -> None:
        self.server.window_log_message(
            LogMessageParams(
                type=MessageType.Error,
                message=f"{action} error in {capability.name}: "
                        f"{type(e).__name__}: {e}"
            )
        )

    async def handle_completion(self, params: CompletionParams) -> CompletionList:
        """
        Handle completion requests by delegating to capable handlers.

        Returns the first result that is not ``None``: capabilities
        registered later are only consulted when earlier ones have no
        opinion.
        """
        for capability in self.get_capabilities_by_type(CompletionCapability):
            try:
                if await capability.can_handle(params):
                    result = await capability.complete(params)  # pyright: ignore
                    if result is not None:
                        return result
            except Exception as e:
                self._log_error(capability, "Completion", e)

        return CompletionList(is_incomplete=False, items=[])

    async def handle_semantic_tokens(
        self, params: SemanticTokensParams
    ) -> SemanticTokens | None:
        """Returns the first non-None semantic tokens result."""
        for capability in self.get_capabilities_by_type(SemanticTokensCapability):
            try:
                if await capability.can_handle(params):
                    result = await capability.semantic_tokens(params)  # pyright: ignore
                    if result is not None:
                        return result
            except Exception as e:
                self._log_error(capability, "Semantic tokens", e)

        return None

    async def collect_diagnostics(self, uri: str) -> list[Diagnostic]:
        """Aggregate diagnostics from all capable handlers."""
        diagnostics: list[Diagnostic] = []

        for capability in self.get_capabilities_by_type(DiagnosticsCapability):
            try:
                if await capability.can_handle(uri):  # pyright: ignore
                    diagnostics.extend(await capability.diagnose(uri))  # pyright: ignore
            except Exception as e:
                self._log_error(capability, "Diagnostics", e)

        return diagnostics

    async def publish_diagnostics(self, uri: str, version: int | None = None) -> None:
        diagnostics = await self.collect_diagnostics(uri)
        self.server.text_document_publish_diagnostics(
            PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics, version=version)
        )

    async def _on_document_opened(self, params: DidOpenTextDocumentParams) -> None:
        document = params.text_document
        await self.publish_diagnostics(document.uri, document.version)

    async def _on_document_changed(
        self, params: DidChangeTextDocumentParams
    ) -> None:
        document = params.text_document
        await self.publish_diagnostics(document.uri, document.version)

    async def _on_document_closed(self, params: DidCloseTextDocumentParams) -> None:
        # Clear what was reported for the document
        self.server.text_document_publish_diagnostics(
            PublishDiagnosticsParams(uri=params.text_document.uri, diagnostics=[])
        )
