from lsprotocol.types import Diagnostic

from cypherls.highlighting import validate_text
from cypherls.lsp.capabilities.capabilities import DiagnosticsCapability


class SyntaxDiagnosticsCapability(DiagnosticsCapability):
    """Reports lexer and parser problems as warnings."""

    @property
    def name(self) -> str:
        return "syntax_diagnostics"

    @property
    def description(self) -> str:
        return "Report Cypher syntax errors"

    async def can_handle(self, uri: str) -> bool:
        return True

    async def diagnose(self, uri: str) -> list[Diagnostic]:
        doc = self.server.workspace.get_text_document(uri)
        return validate_text(doc.source)
