from __future__ import annotations

from pathlib import Path

from pygls.lsp.server import LanguageServer

from cypherls.lsp.capabilities.capabilities import CapabilityManager
from cypherls.lsp.text_sync_manager import TextSyncManager
from cypherls.schema.loader import SchemaStore


class CypherLanguageServer(LanguageServer):
    """
    Custom Language Server with Cypher-specific attributes.

    Attributes:
        schema_store: Schema snapshot used for completion
        workspace_root: Root folder of the workspace, once initialized
        prefer_structural: Complete from the parse tree first (prefix-filtered
            function names), from the ``preferStructural`` initialization option
    """

    def __init__(self, name: str, version: str):
        super().__init__(name, version)

        self.schema_store = SchemaStore(self)
        self.workspace_root: Path | None = None
        self.prefer_structural = False
        self.capability_manager: CapabilityManager | None = None
        self.text_sync_manager: TextSyncManager | None = None
