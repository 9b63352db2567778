from cypherls.language.grammar import CYPHER_GRAMMAR, RuleKind, iter_references
from cypherls.language.parser import parse
from cypherls.language.tokens import TokenType
from cypherls.language.tree import ErrorNode, RuleNode, TerminalNode


def rules_in(tree: RuleNode) -> set[RuleKind]:
    return {node.rule for node in tree.walk() if isinstance(node, RuleNode)}


def test_every_referenced_rule_is_defined():
    for element in CYPHER_GRAMMAR.values():
        for rule in iter_references(element):
            assert rule in CYPHER_GRAMMAR


def test_complete_statement_parses_without_issues():
    result = parse("MATCH (n:Person) RETURN n")

    assert result.issues == []
    assert result.tree.rule is RuleKind.STATEMENTS
    assert {
        RuleKind.MATCH_CLAUSE,
        RuleKind.NODE_PATTERN,
        RuleKind.LABEL_EXPRESSION,
        RuleKind.RETURN_CLAUSE,
    } <= rules_in(result.tree)


def test_eof_is_last_child_of_root():
    result = parse("RETURN 1")
    last = result.tree.children[-1]

    assert isinstance(last, TerminalNode)
    assert last.token.type is TokenType.EOF


def test_tree_text_skips_hidden_tokens():
    result = parse("MATCH  (n)   RETURN n")

    assert result.tree.get_text() == "MATCH(n)RETURNn"


def test_parent_links():
    result = parse("RETURN n")

    for node in result.tree.walk():
        if isinstance(node, RuleNode):
            for child in node.children:
                assert child.parent is node


def test_incomplete_statement_reports_end_of_input():
    result = parse("MATCH (n")

    assert len(result.issues) == 1
    assert result.issues[0].message.startswith("Unexpected end of input")
    assert result.issues[0].token.type is TokenType.EOF
    assert RuleKind.NODE_PATTERN in rules_in(result.tree)


def test_empty_text_has_no_issues():
    result = parse("")

    assert result.issues == []
    assert result.tree.children[-1].token.type is TokenType.EOF


def test_unexpected_token_becomes_error_node():
    result = parse("MATCH (n) RETURN n )")

    assert len(result.issues) == 1
    assert result.issues[0].message.startswith("Unexpected ')'")

    error = result.tree.children[-2]
    assert isinstance(error, ErrorNode)
    assert error.token.type is TokenType.RPAREN
    assert RuleKind.RETURN_CLAUSE in rules_in(result.tree)


def test_keywords_are_valid_names():
    result = parse("MATCH (match) RETURN match")

    assert result.issues == []


def test_is_null_is_a_comparison():
    result = parse("MATCH (n) WHERE n IS NULL RETURN n")

    assert result.issues == []
    rules = rules_in(result.tree)
    assert RuleKind.COMPARISON_EXPRESSION6 in rules
    assert RuleKind.LABEL_EXPRESSION not in rules


def test_multiple_statements():
    result = parse("CALL dbms.info() YIELD *;\nMATCH (n) RETURN n;")

    assert result.issues == []
    statements = [
        node
        for node in result.tree.walk()
        if isinstance(node, RuleNode) and node.rule is RuleKind.STATEMENT
    ]
    assert len(statements) == 2


def test_administration_commands():
    for text in (
        "CREATE OR REPLACE ALIAS movies FOR DATABASE neo4j",
        "CREATE COMPOSITE DATABASE library IF NOT EXISTS WAIT",
        "DROP ALIAS movies FOR DATABASE",
        "ALTER ALIAS movies SET DATABASE TARGET neo4j",
        "SHOW ALIASES FOR DATABASES",
        "SHOW DEFAULT DATABASE",
        "START DATABASE neo4j NOWAIT",
    ):
        assert parse(text).issues == [], text
