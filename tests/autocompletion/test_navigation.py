from cypherls.autocompletion.navigation import (
    find_ancestor,
    find_stop_node,
    in_procedure_name,
    in_relationship_type,
    is_label,
    is_rule,
    parent_expression,
)
from cypherls.language.grammar import RuleKind
from cypherls.language.parser import parse
from cypherls.language.tree import RuleNode


def stop_node(text: str) -> RuleNode:
    return find_stop_node(parse(text).tree)


def test_find_ancestor_of_none():
    assert find_ancestor(None, lambda node: True) is None


def test_find_ancestor_skips_the_node_itself():
    root = RuleNode(RuleKind.EXPRESSION)
    middle = RuleNode(RuleKind.EXPRESSION2, root)
    leaf = RuleNode(RuleKind.EXPRESSION2, middle)

    assert find_ancestor(leaf, is_rule(RuleKind.EXPRESSION2)) is middle
    assert find_ancestor(middle, is_rule(RuleKind.EXPRESSION2)) is None
    assert find_ancestor(leaf, is_rule(RuleKind.EXPRESSION)) is root


def test_find_ancestor_without_match():
    root = RuleNode(RuleKind.STATEMENTS)
    leaf = RuleNode(RuleKind.VARIABLE, root)

    assert find_ancestor(leaf, is_rule(RuleKind.NODE_PATTERN)) is None


def test_stop_node_is_last_parsed_name():
    node = stop_node("MATCH (n:Person) RETURN n")

    assert node.rule is RuleKind.UNESCAPED_SYMBOLIC_NAME_STRING
    assert node.get_text() == "n"
    assert find_ancestor(node, is_rule(RuleKind.RETURN_CLAUSE)) is not None


def test_stop_node_of_empty_text_is_root():
    result = parse("")

    assert find_stop_node(result.tree) is result.tree


def test_stop_node_skips_empty_rules():
    node = stop_node("MATCH (n)-[r:")

    assert node.rule is RuleKind.LABEL_EXPRESSION
    assert node.stop.text == ":"


def test_node_label_position():
    node = stop_node("MATCH (n:Pers")

    label = find_ancestor(node, is_label)
    assert label is not None
    assert find_ancestor(label, is_rule(RuleKind.NODE_PATTERN)) is not None
    assert not in_relationship_type(node)


def test_relationship_type_position():
    node = stop_node("MATCH (n)-[r:KNO")

    label = find_ancestor(node, is_label)
    assert in_relationship_type(node)
    assert find_ancestor(label, is_rule(RuleKind.NODE_PATTERN)) is None


def test_expression_position():
    node = stop_node("RETURN apoc.co")
    expression = parent_expression(node)

    assert expression is not None
    assert expression.get_text() == "apoc.co"


def test_procedure_name_position():
    node = stop_node("CALL db")

    assert in_procedure_name(node)
    assert parent_expression(node) is None
