from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

from lsprotocol.types import CompletionItem


class Opinion(Enum):
    """Marker results that are not a list of completions."""

    # Defer to another completion source (e.g. word based suggestions).
    # Different from an empty list, which means "nothing is valid here".
    NO_OPINION = "no_opinion"


NO_OPINION = Opinion.NO_OPINION

CompletionResult = Union[list[CompletionItem], Literal[Opinion.NO_OPINION]]


@dataclass(frozen=True)
class Completions:
    """A candidate that produced completion items."""

    items: tuple[CompletionItem, ...]


@dataclass(frozen=True)
class Discarded:
    """A candidate that produced nothing, and why."""

    reason: str


Classification = Union[Completions, Discarded]
