"""
Parse tree navigation helpers.

Rule checks work on the ``RuleKind`` tag each node carries.
"""

from __future__ import annotations

from typing import Callable

from cypherls.language.grammar import RuleKind
from cypherls.language.tree import RuleNode, TerminalNode


def find_ancestor(
    node: RuleNode | TerminalNode | None,
    predicate: Callable[[RuleNode], bool],
) -> RuleNode | None:
    """Return the closest ancestor of ``node`` matching ``predicate``, never ``node`` itself."""
    if node is None:
        return None

    current = node.parent
    while current is not None:
        if predicate(current):
            return current
        current = current.parent
    return None


def is_rule(*rules: RuleKind) -> Callable[[RuleNode], bool]:
    return lambda node: node.rule in rules


def _has_tokens(child: RuleNode | TerminalNode) -> bool:
    if isinstance(child, TerminalNode):
        return not child.token.is_eof
    return not child.is_empty


def find_stop_node(tree: RuleNode) -> RuleNode:
    """
    Find the rule node where parsing stopped.

    Follows the last child that covers any token, down to the node whose last
    such child is a terminal. Empty nodes left by incomplete input and the
    EOF terminal are skipped.
    """
    current = tree
    while True:
        child = next(
            (c for c in reversed(current.children) if _has_tokens(c)), None
        )
        if child is None or isinstance(child, TerminalNode):
            return current
        current = child


def is_label(node: RuleNode) -> bool:
    return node.rule is RuleKind.LABEL_EXPRESSION4


def in_relationship_type(stop_node: RuleNode) -> bool:
    label = find_ancestor(stop_node, is_label)
    return find_ancestor(label, is_rule(RuleKind.RELATIONSHIP_PATTERN)) is not None


def parent_expression(stop_node: RuleNode) -> RuleNode | None:
    return find_ancestor(stop_node, is_rule(RuleKind.EXPRESSION2))


def in_procedure_name(stop_node: RuleNode) -> bool:
    return find_ancestor(stop_node, is_rule(RuleKind.PROCEDURE_NAME)) is not None
