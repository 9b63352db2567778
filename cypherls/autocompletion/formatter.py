from __future__ import annotations

from typing import Iterable, Mapping

from lsprotocol.types import CompletionItem, CompletionItemKind

from cypherls.language.collector import CandidateToken
from cypherls.language.tokens import TokenType


def token_labels(
    candidate: CandidateToken, token_names: Mapping[TokenType, str]
) -> list[str]:
    """
    Render a keyword candidate and its follow-up as completion labels.

    A mandatory follow-up yields only the combined label ("ORDER BY"), an
    optional one yields both the bare keyword and the combined label.
    """
    display = token_names.get(candidate.token_type)
    if display is None:
        return []

    follow_up = " ".join(
        token_names[t] for t in candidate.follow_up if t in token_names
    )
    if not follow_up:
        return [display]

    combined = f"{display} {follow_up}"
    if candidate.optional:
        return [display, combined]
    return [combined]


def format_token_candidates(
    candidates: Iterable[CandidateToken], token_names: Mapping[TokenType, str]
) -> list[CompletionItem]:
    return [
        CompletionItem(label=label, kind=CompletionItemKind.Keyword)
        for candidate in candidates
        for label in token_labels(candidate, token_names)
    ]
