"""
Candidate collection configured for completion.

Name-shaped rules are preferred so they come back as a single rule candidate
instead of the long list of keyword tokens a name may also be. Only keyword
tokens are kept as token candidates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from cypherls.language.collector import CandidateCollector, CandidatesCollection
from cypherls.language.grammar import RuleKind
from cypherls.language.parser import ParsingResult
from cypherls.language.tokens import (
    TOKEN_CATEGORIES,
    TOKEN_NAMES,
    Token,
    TokenCategory,
    TokenType,
)


PREFERRED_RULES: frozenset[RuleKind] = frozenset(
    {
        RuleKind.UNESCAPED_SYMBOLIC_NAME_STRING,
        RuleKind.ESCAPED_SYMBOLIC_NAME_STRING,
        RuleKind.STRING_LITERAL,
        RuleKind.SYMBOLIC_LABEL_NAME_STRING,
        RuleKind.SYMBOLIC_ALIAS_NAME,
    }
)

IGNORED_TOKENS: frozenset[TokenType] = frozenset(
    {
        token_type
        for token_type, category in TOKEN_CATEGORIES.items()
        if category is not TokenCategory.KEYWORD
    }
    | {TokenType.EOF}
)


@dataclass(frozen=True)
class CompletionConfig:
    """Immutable tables the completion engine reads."""

    preferred_rules: frozenset[RuleKind] = PREFERRED_RULES
    ignored_tokens: frozenset[TokenType] = IGNORED_TOKENS
    token_names: Mapping[TokenType, str] = field(default_factory=lambda: TOKEN_NAMES)


DEFAULT_CONFIG = CompletionConfig()


def caret_token_index(tokens: Sequence[Token]) -> int:
    """Index of the last token before EOF, or 0 for a stream holding only EOF."""
    if len(tokens) > 1:
        return len(tokens) - 2
    return 0


def collect_candidates(
    parsing_result: ParsingResult,
    caret_index: int,
    config: CompletionConfig = DEFAULT_CONFIG,
) -> CandidatesCollection:
    collector = CandidateCollector(parsing_result.tokens)
    try:
        return collector.collect_candidates(
            caret_index,
            preferred_rules=config.preferred_rules,
            ignored_tokens=config.ignored_tokens,
        )
    except RecursionError:
        # Nesting deeper than the interpreter stack allows
        return CandidatesCollection()
