"""
Completion engine.

``resolve_completions`` turns a document, a caret position and a schema
snapshot into completion items. Two strategies are combined:

- candidate collection: ask the grammar what may come at the caret, then
  classify name rules against the schema and render keyword tokens;
- structural: look at where the parse tree stopped, used when the grammar
  has no candidate at the caret because the text before it does not parse.

The result is either a list (possibly empty, meaning nothing fits here) or
``NO_OPINION``, meaning another completion source should be asked.
"""

from __future__ import annotations

import re

from lsprotocol.types import Position

from cypherls.autocompletion.candidates import (
    DEFAULT_CONFIG,
    CompletionConfig,
    caret_token_index,
    collect_candidates,
)
from cypherls.autocompletion.classifier import classify_rule_candidates
from cypherls.autocompletion.formatter import format_token_candidates
from cypherls.autocompletion.structural import (
    autocomplete_structurally,
    autocomplete_structurally_adding_char,
)
from cypherls.autocompletion.types import NO_OPINION, CompletionResult
from cypherls.language.parser import ParsingResult, parse
from cypherls.language.tokens import EOF_TEXT
from cypherls.schema.db_schema import DbSchema


_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def text_until_position(text: str, position: Position) -> str:
    """The document text before the caret."""
    offset = 0
    for _ in range(position.line):
        line_break = _LINE_BREAK.search(text, offset)
        if line_break is None:
            return text
        offset = line_break.end()

    line_break = _LINE_BREAK.search(text, offset)
    line_end = line_break.start() if line_break else len(text)
    return text[: min(offset + position.character, line_end)]


def completion_core_completion(
    parsing_result: ParsingResult,
    schema: DbSchema,
    config: CompletionConfig = DEFAULT_CONFIG,
) -> CompletionResult:
    """
    Completions from the grammar candidates at the caret token.

    ``NO_OPINION`` when the grammar has no candidate at all there, which
    happens when the tokens before the caret do not parse. A candidate that
    yields no items (an empty catalog, a new alias name) still counts as an
    answer.
    """
    caret_index = caret_token_index(parsing_result.tokens)
    if caret_index < 0:
        return []

    candidates = collect_candidates(parsing_result, caret_index, config)
    if not candidates.rules and not candidates.tokens:
        return NO_OPINION

    rule_items = classify_rule_candidates(
        candidates.rules.values(), schema, parsing_result.tokens
    )
    token_items = format_token_candidates(
        candidates.tokens.values(), config.token_names
    )
    return rule_items + token_items


def _structural(
    parsing_result: ParsingResult, schema: DbSchema
) -> CompletionResult:
    result = autocomplete_structurally(parsing_result, schema)
    if result is NO_OPINION:
        result = autocomplete_structurally_adding_char(parsing_result.text, schema)
    return result


def resolve_completions(
    document_text: str,
    position: Position,
    schema: DbSchema | None = None,
    prefer_structural: bool = False,
    config: CompletionConfig = DEFAULT_CONFIG,
) -> CompletionResult:
    """
    Resolve the completions at ``position`` in ``document_text``.

    Args:
        document_text: Full text of the document.
        position: Caret position (0-based line and character).
        schema: Catalog names to offer; an empty schema when omitted.
        prefer_structural: Try the parse tree first and only fall back to
            candidate collection when it has no opinion. Function names are
            prefix-filtered this way.
        config: Completion tables.

    Returns:
        A list of completion items, or ``NO_OPINION``.

    Every call lexes and parses the text before the caret, and the
    candidate walk and the filler retry go over it again. Cost grows with
    the length and nesting of the statement being edited; callers that
    serve very large documents should bound what they pass in.
    """
    if schema is None:
        schema = DbSchema()
    parsing_result = parse(text_until_position(document_text, position))

    # Lexing stopped before the caret, e.g. inside an unclosed string
    if parsing_result.eof.text != EOF_TEXT:
        return []

    if prefer_structural:
        result = _structural(parsing_result, schema)
        if result is NO_OPINION:
            return completion_core_completion(parsing_result, schema, config)
        return result

    result = completion_core_completion(parsing_result, schema, config)
    if result is NO_OPINION:
        return _structural(parsing_result, schema)
    return result
