"""Parse tree nodes."""

from __future__ import annotations

from typing import Iterator

from cypherls.language.grammar import RuleKind
from cypherls.language.tokens import Token


class TerminalNode:
    """A leaf wrapping a single token."""

    def __init__(self, token: Token, parent: RuleNode | None = None) -> None:
        self.token = token
        self.parent = parent

    @property
    def start(self) -> Token:
        return self.token

    @property
    def stop(self) -> Token:
        return self.token

    def get_text(self) -> str:
        return self.token.text

    def __repr__(self) -> str:
        return f"TerminalNode({self.token.type.name}, {self.token.text!r})"


class ErrorNode(TerminalNode):
    """A token the parser could not fit anywhere in the tree."""


class RuleNode:
    """
    An inner node tagged with the grammar rule it instantiates.

    Nodes left open because the input ended early are marked ``partial``.
    """

    def __init__(
        self,
        rule: RuleKind,
        parent: RuleNode | None = None,
        partial: bool = False,
    ) -> None:
        self.rule = rule
        self.parent = parent
        self.partial = partial
        self.children: list[RuleNode | TerminalNode] = []

    def terminals(self) -> Iterator[TerminalNode]:
        for child in self.children:
            if isinstance(child, TerminalNode):
                yield child
            else:
                yield from child.terminals()

    @property
    def start(self) -> Token | None:
        """First token covered by this node, ``None`` for an empty node."""
        return next((t.token for t in self.terminals()), None)

    @property
    def stop(self) -> Token | None:
        """Last token covered by this node, ``None`` for an empty node."""
        stop = None
        for terminal in self.terminals():
            stop = terminal.token
        return stop

    @property
    def is_empty(self) -> bool:
        return self.start is None

    def get_text(self) -> str:
        """Concatenated text of the covered tokens, hidden tokens excluded."""
        return "".join(
            t.get_text() for t in self.terminals() if not t.token.is_eof
        )

    def walk(self) -> Iterator[RuleNode | TerminalNode]:
        """Pre-order traversal including this node."""
        yield self
        for child in self.children:
            if isinstance(child, RuleNode):
                yield from child.walk()
            else:
                yield child

    def __repr__(self) -> str:
        return f"RuleNode({self.rule.value}, children={len(self.children)})"


ParseTreeNode = RuleNode | TerminalNode
