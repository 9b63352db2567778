from lsprotocol.types import SemanticTokens, SemanticTokensParams

from cypherls.highlighting import semantic_tokens
from cypherls.lsp.capabilities.capabilities import SemanticTokensCapability


class CypherSemanticTokensCapability(SemanticTokensCapability):
    """Colours names by what they refer to: labels, variables, properties..."""

    @property
    def name(self) -> str:
        return "cypher_semantic_tokens"

    @property
    def description(self) -> str:
        return "Semantic highlighting for Cypher documents"

    async def can_handle(self, params: SemanticTokensParams) -> bool:
        return True

    async def semantic_tokens(self, params: SemanticTokensParams) -> SemanticTokens:
        doc = self.server.workspace.get_text_document(params.text_document.uri)
        return semantic_tokens(doc.source)
