"""
Completion capabilities.

Cypher completion comes first. When it has no opinion about the caret
position, the words already present in the document are offered instead.
"""

import re

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionParams,
)

from cypherls.autocompletion import NO_OPINION, resolve_completions
from cypherls.lsp.capabilities.capabilities import CompletionCapability


WORD_PATTERN = re.compile(r"[^\W\d]\w*")


class CypherCompletionCapability(CompletionCapability):
    """Keywords and schema names valid at the caret."""

    @property
    def name(self) -> str:
        return "cypher_completion"

    @property
    def description(self) -> str:
        return "Complete Cypher keywords, labels, relationship types, procedures and databases"

    async def can_handle(self, params: CompletionParams) -> bool:
        return True

    async def complete(self, params: CompletionParams) -> CompletionList | None:
        doc = self.server.workspace.get_text_document(params.text_document.uri)
        result = resolve_completions(
            doc.source,
            params.position,
            self.server.schema_store.schema,
            prefer_structural=self.server.prefer_structural,
        )
        if result is NO_OPINION:
            return None
        return CompletionList(is_incomplete=False, items=result)


class DocumentWordsCompletionCapability(CompletionCapability):
    """Word based suggestions taken from the document itself."""

    @property
    def name(self) -> str:
        return "document_words_completion"

    @property
    def description(self) -> str:
        return "Complete words already used in the document"

    async def can_handle(self, params: CompletionParams) -> bool:
        return True

    async def complete(self, params: CompletionParams) -> CompletionList:
        doc = self.server.workspace.get_text_document(params.text_document.uri)

        # The word being typed is not a suggestion for itself
        typing = ""
        if params.position.line < len(doc.lines):
            line_prefix = doc.lines[params.position.line][: params.position.character]
            match = re.search(r"\w+$", line_prefix)
            if match:
                typing = match.group()

        words = dict.fromkeys(WORD_PATTERN.findall(doc.source))
        words.pop(typing, None)

        items = [
            CompletionItem(label=word, kind=CompletionItemKind.Text)
            for word in words
        ]
        return CompletionList(is_incomplete=False, items=items)
