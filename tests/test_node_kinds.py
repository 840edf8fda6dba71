"""Node kind classification tests."""

import tree_sitter_javascript as ts_js
from tree_sitter import Language, Parser

from jsextract.parsing.node_kinds import NodeKind, NodeRole, classify
from jsextract.parsing.syntax import modifiers


def _root(code: str):
    return Parser(Language(ts_js.language())).parse(code.encode("utf-8")).root_node


def test_known_kinds_round_trip():
    """Grammar type strings map to their kinds."""
    assert NodeKind("function_declaration") is NodeKind.FUNCTION_DECLARATION
    assert NodeKind("*") is NodeKind.STAR


def test_unknown_kind_is_unhandled():
    """Types the extractor does not know map to UNHANDLED instead of raising."""
    assert NodeKind("jsx_element") is NodeKind.UNHANDLED
    assert NodeKind("if_statement") is NodeKind.UNHANDLED


def test_classify_none():
    """A missing node classifies as UNHANDLED."""
    assert classify(None) is NodeKind.UNHANDLED


def test_classify_tree_nodes():
    """Nodes from a real tree classify by their type."""
    root = _root("class A {}\nif (x) {}")

    assert classify(root) is NodeKind.PROGRAM
    assert classify(root.children[0]) is NodeKind.CLASS_DECLARATION
    assert classify(root.children[1]) is NodeKind.UNHANDLED


def test_roles():
    """Kinds report their semantic role."""
    assert NodeKind.CLASS_DECLARATION.role is NodeRole.DECLARATION
    assert NodeKind.ASYNC.role is NodeRole.MODIFIER
    assert NodeKind.PRIVATE_PROPERTY_IDENTIFIER.role is NodeRole.IDENTIFIER
    assert NodeKind.STATEMENT_BLOCK.role is NodeRole.BODY
    assert NodeKind.CALL_EXPRESSION.role is NodeRole.OTHER
    assert NodeKind.UNHANDLED.role is NodeRole.OTHER


def test_function_values():
    """Function and arrow expressions can serve as method bodies."""
    assert NodeKind.FUNCTION_EXPRESSION.is_function_value
    assert NodeKind.GENERATOR_FUNCTION.is_function_value
    assert NodeKind.ARROW_FUNCTION.is_function_value
    assert not NodeKind.FUNCTION_DECLARATION.is_function_value


def test_modifiers_read_by_role():
    """Modifier keywords among a node's children are collected by role."""
    root = _root("class A { static async *gen() {} plain() {} }")
    body = root.children[0].child_by_field_name("body")
    methods = [child for child in body.children if classify(child) == NodeKind.METHOD_DEFINITION]

    assert modifiers(methods[0]) == {NodeKind.STATIC, NodeKind.ASYNC, NodeKind.STAR}
    assert modifiers(methods[1]) == set()
