"""
Grammar candidate collection.

Given a token stream and the index of the token under the caret, find every
rule and token the grammar could accept in that token's place. Every grammar
path is walked over the default-channel tokens that precede the caret token.

Two pieces of configuration shape the answer:

- preferred rules are reported as a whole (with the stack of rules around
  them) instead of being expanded into the tokens they are made of. This also
  applies when the walk reaches the caret while still inside a preferred
  rule, in which case the enclosing preferred rule is reported;
- ignored tokens are never reported.

Results are keyed by rule kind and token type, the first one found wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from cypherls.language.grammar import (
    CYPHER_GRAMMAR,
    START_RULE,
    Alt,
    Element,
    Many,
    Opt,
    Ref,
    RuleKind,
    Seq,
    Tok,
)
from cypherls.language.tokens import Token, TokenType


@dataclass(frozen=True)
class CandidateRule:
    rule: RuleKind
    # Stream index of the token the rule started at
    start_token_index: int
    # Enclosing rules, outermost first, the candidate itself excluded
    rule_list: tuple[RuleKind, ...]


@dataclass(frozen=True)
class CandidateToken:
    token_type: TokenType
    follow_up: tuple[TokenType, ...] = ()
    # True when the follow-up may be left out
    optional: bool = False


@dataclass
class CandidatesCollection:
    rules: dict[RuleKind, CandidateRule] = field(default_factory=dict)
    tokens: dict[TokenType, CandidateToken] = field(default_factory=dict)


@dataclass(frozen=True)
class _Frame:
    rule: RuleKind
    start: int


class CandidateCollector:
    """Collects completion candidates for a token stream."""

    def __init__(
        self,
        tokens: Sequence[Token],
        grammar: Mapping[RuleKind, Element] = CYPHER_GRAMMAR,
        start_rule: RuleKind = START_RULE,
    ) -> None:
        self.stream = tokens
        self.grammar = grammar
        self.start_rule = start_rule

    def collect_candidates(
        self,
        caret_token_index: int,
        preferred_rules: frozenset[RuleKind] = frozenset(),
        ignored_tokens: frozenset[TokenType] = frozenset(),
    ) -> CandidatesCollection:
        self._preferred = preferred_rules
        self._ignored = ignored_tokens
        self._tokens = self._tokens_until(caret_token_index)
        self._caret = len(self._tokens) - 1
        self._shortcuts: dict[tuple[RuleKind, int], frozenset[int]] = {}
        self._candidates = CandidatesCollection()

        if self._caret >= 0:
            self._walk_rule(self.start_rule, 0, ())

        return self._candidates

    def _tokens_until(self, caret_token_index: int) -> list[Token]:
        """Default-channel tokens up to and including the caret token."""
        tokens = []
        for token in self.stream:
            if token.hidden:
                continue
            tokens.append(token)
            if token.index >= caret_token_index or token.is_eof:
                break
        return tokens

    # ===== Walking =====

    def _walk_rule(
        self, rule: RuleKind, pos: int, stack: tuple[_Frame, ...]
    ) -> frozenset[int]:
        if pos == self._caret and rule in self._preferred:
            self._add_rule(rule, pos, stack)
            return frozenset()

        key = (rule, pos)
        if key in self._shortcuts:
            return self._shortcuts[key]

        self._shortcuts[key] = frozenset()
        ends = frozenset(
            self._walk(self.grammar[rule], pos, stack + (_Frame(rule, pos),), ())
        )
        self._shortcuts[key] = ends
        return ends

    def _walk(
        self,
        element: Element,
        pos: int,
        stack: tuple[_Frame, ...],
        follow: tuple[Element, ...],
    ) -> set[int]:
        """
        Return the positions reachable after matching ``element`` at ``pos``.

        ``follow`` holds the elements that come after ``element`` inside the
        current rule; it is only used to compute follow-up tokens.
        """
        if isinstance(element, Tok):
            if pos == self._caret:
                self._add_token(element.type, stack, follow)
                return set()
            if self._tokens[pos].type is element.type:
                return {pos + 1}
            return set()

        if isinstance(element, Ref):
            return set(self._walk_rule(element.rule, pos, stack))

        if isinstance(element, Seq):
            positions = {pos}
            items = element.items
            for i, item in enumerate(items):
                rest = items[i + 1 :] + follow
                reached: set[int] = set()
                for start in sorted(positions):
                    reached |= self._walk(item, start, stack, rest)
                positions = reached
                if not positions:
                    break
            return positions

        if isinstance(element, Alt):
            reached = set()
            for option in element.options:
                reached |= self._walk(option, pos, stack, follow)
            return reached

        if isinstance(element, Opt):
            return {pos} | self._walk(element.item, pos, stack, follow)

        if isinstance(element, Many):
            reached = {pos}
            frontier = {pos}
            while frontier:
                found: set[int] = set()
                for start in sorted(frontier):
                    found |= self._walk(element.item, start, stack, (element,) + follow)
                frontier = found - reached
                reached |= found
            return reached

        raise TypeError(f"Unknown grammar element: {element!r}")

    # ===== Recording =====

    def _add_rule(
        self, rule: RuleKind, pos: int, stack: tuple[_Frame, ...]
    ) -> None:
        if rule in self._candidates.rules:
            return
        self._candidates.rules[rule] = CandidateRule(
            rule=rule,
            start_token_index=self._tokens[pos].index,
            rule_list=tuple(frame.rule for frame in stack),
        )

    def _add_token(
        self,
        token_type: TokenType,
        stack: tuple[_Frame, ...],
        follow: tuple[Element, ...],
    ) -> None:
        # Still inside a preferred rule: report the rule, not its tokens
        for depth in range(len(stack) - 1, -1, -1):
            frame = stack[depth]
            if frame.rule in self._preferred:
                self._add_rule(frame.rule, frame.start, stack[:depth])
                return

        if token_type in self._ignored or token_type in self._candidates.tokens:
            return

        follow_up, optional = self._follow_up(follow)
        self._candidates.tokens[token_type] = CandidateToken(
            token_type, follow_up, optional
        )

    def _follow_up(
        self, follow: tuple[Element, ...]
    ) -> tuple[tuple[TokenType, ...], bool]:
        """Keyword tokens that come straight after a candidate token."""
        mandatory: list[TokenType] = []
        for element in follow:
            if isinstance(element, Tok) and element.type not in self._ignored:
                mandatory.append(element.type)
                continue
            if not mandatory and isinstance(element, Opt):
                optional = self._plain_tokens(element.item)
                if optional:
                    return optional, True
            break
        return tuple(mandatory), False

    def _plain_tokens(self, element: Element) -> tuple[TokenType, ...]:
        items = element.items if isinstance(element, Seq) else (element,)
        if all(
            isinstance(item, Tok) and item.type not in self._ignored
            for item in items
        ):
            return tuple(item.type for item in items)
        return ()
