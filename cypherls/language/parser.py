"""
Cypher parser.

An all-paths interpreter over ``CYPHER_GRAMMAR``. Results are memoised per
(rule, position) and only one derivation is kept per end position, so
ambiguity in the grammar (keywords are valid names) stays cheap.

The parser is built for text that is still being typed:

- when the input ends in the middle of a rule, the open rules are closed at
  the end of input and the tree is marked partial;
- when a token fits nowhere, the longest parseable prefix becomes the tree and
  the remaining tokens hang off the root as error nodes.

``parse`` never raises; problems are reported as ``SyntaxIssue`` entries.
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
from cypherls.language.lexer import SyntaxIssue, tokenize
from cypherls.language.tokens import TOKEN_NAMES, Token, TokenType
from cypherls.language.tree import ErrorNode, RuleNode, TerminalNode


# Result key for derivations cut short by the end of input
PARTIAL = -1

_MAX_EXPECTED_IN_MESSAGE = 8


@dataclass(frozen=True)
class _Derivation:
    rule: RuleKind
    # Token positions (ints) and nested derivations
    children: tuple
    partial: bool


@dataclass
class ParsingResult:
    """Everything produced for one piece of text."""

    text: str
    tokens: list[Token]
    tree: RuleNode
    issues: list[SyntaxIssue] = field(default_factory=list)

    @property
    def eof(self) -> Token:
        return self.tokens[-1]


class GrammarParser:
    """Matches grammar rules against the default-channel tokens."""

    def __init__(
        self,
        tokens: Sequence[Token],
        grammar: Mapping[RuleKind, Element] = CYPHER_GRAMMAR,
    ) -> None:
        self.tokens = tokens
        self.grammar = grammar
        self.size = len(tokens)

        # Farthest position any token was tried at, and what was tried there
        self.farthest = 0
        self.expected: set[TokenType] = set()

        self._memo: dict[tuple[RuleKind, int], dict[int, _Derivation]] = {}

    def parse_rule(self, rule: RuleKind, pos: int) -> dict[int, _Derivation]:
        """Return the derivations of ``rule`` starting at ``pos`` by end position."""
        key = (rule, pos)
        if key in self._memo:
            return self._memo[key]

        self._memo[key] = {}
        derivations = {
            end: _Derivation(rule, children, end == PARTIAL)
            for end, children in self._match(self.grammar[rule], pos).items()
        }
        self._memo[key] = derivations
        return derivations

    def _expect(self, pos: int, token_type: TokenType) -> None:
        if pos > self.farthest:
            self.farthest = pos
            self.expected = {token_type}
        elif pos == self.farthest:
            self.expected.add(token_type)

    def _match(self, element: Element, pos: int) -> dict[int, tuple]:
        if isinstance(element, Tok):
            if pos >= self.size:
                self._expect(pos, element.type)
                return {PARTIAL: ()}
            if self.tokens[pos].type is element.type:
                return {pos + 1: (pos,)}
            self._expect(pos, element.type)
            return {}

        if isinstance(element, Ref):
            return {
                end: (derivation,)
                for end, derivation in self.parse_rule(element.rule, pos).items()
            }

        if isinstance(element, Seq):
            current: dict[int, tuple] = {pos: ()}
            for item in element.items:
                following: dict[int, tuple] = {}
                for start, children in current.items():
                    if start == PARTIAL:
                        following.setdefault(PARTIAL, children)
                        continue
                    for end, more in self._match(item, start).items():
                        following.setdefault(end, children + more)
                current = following
                if not current:
                    break
            return current

        if isinstance(element, Alt):
            results: dict[int, tuple] = {}
            for option in element.options:
                for end, children in self._match(option, pos).items():
                    results.setdefault(end, children)
            return results

        if isinstance(element, Opt):
            results = dict(self._match(element.item, pos))
            results.setdefault(pos, ())
            return results

        if isinstance(element, Many):
            results = {pos: ()}
            frontier = {pos: ()}
            while frontier:
                following = {}
                for start, children in frontier.items():
                    for end, more in self._match(element.item, start).items():
                        if end == PARTIAL:
                            results.setdefault(PARTIAL, children + more)
                        elif end not in results:
                            results[end] = following[end] = children + more
                frontier = following
            return results

        raise TypeError(f"Unknown grammar element: {element!r}")


def _describe_expected(expected: set[TokenType]) -> str:
    names = sorted(TOKEN_NAMES.get(t, t.value.lower()) for t in expected)
    if len(names) > _MAX_EXPECTED_IN_MESSAGE:
        names = names[:_MAX_EXPECTED_IN_MESSAGE] + ["..."]
    return ", ".join(names)


def _build(
    derivation: _Derivation,
    tokens: Sequence[Token],
    parent: RuleNode | None = None,
) -> RuleNode:
    node = RuleNode(derivation.rule, parent, derivation.partial)
    for child in derivation.children:
        if isinstance(child, int):
            node.children.append(TerminalNode(tokens[child], node))
        else:
            node.children.append(_build(child, tokens, node))
    return node


def parse(text: str) -> ParsingResult:
    """Lex and parse ``text`` into a token stream and a parse tree."""
    lexed = tokenize(text)
    stream = lexed.tokens
    eof = stream[-1]
    visible = [t for t in stream if not t.hidden and not t.is_eof]
    issues = list(lexed.issues)

    parser = GrammarParser(visible)
    try:
        derivations = parser.parse_rule(START_RULE, 0)
    except RecursionError:
        issues.append(SyntaxIssue("Statement is too deeply nested to parse", eof))
        tree = RuleNode(START_RULE, partial=True)
        for token in visible:
            tree.children.append(ErrorNode(token, tree))
        tree.children.append(TerminalNode(eof, tree))
        return ParsingResult(text=text, tokens=stream, tree=tree, issues=issues)

    consumed = len(visible)
    derivation = derivations.get(consumed)

    if derivation is None:
        derivation = derivations.get(PARTIAL)
        if derivation is not None and visible:
            issues.append(
                SyntaxIssue(
                    "Unexpected end of input, expected "
                    + _describe_expected(parser.expected),
                    eof,
                )
            )

    if derivation is None:
        consumed = min(parser.farthest, len(visible))
        offending = visible[consumed] if consumed < len(visible) else eof
        issues.append(
            SyntaxIssue(
                f"Unexpected '{offending.text}', expected "
                + _describe_expected(parser.expected),
                offending,
            )
        )
        prefix = GrammarParser(visible[:consumed]).parse_rule(START_RULE, 0)
        derivation = prefix.get(consumed) or prefix.get(PARTIAL)

    if derivation is not None:
        tree = _build(derivation, visible)
    else:
        tree = RuleNode(START_RULE, partial=True)

    for token in visible[consumed:]:
        tree.children.append(ErrorNode(token, tree))
    tree.children.append(TerminalNode(eof, tree))

    return ParsingResult(text=text, tokens=stream, tree=tree, issues=issues)
