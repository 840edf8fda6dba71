"""Small helpers over tree-sitter nodes shared by the extractors."""

from jsextract.constants import DOC_COMMENT_PREFIX
from jsextract.parsing.models import Location
from jsextract.parsing.node_kinds import NodeKind, NodeRole, classify

_PUNCTUATION = frozenset({"(", ")", ","})


def node_text(node, content: bytes) -> str:
    """Get the source text of a node.

    Args:
        node: Tree-sitter node.
        content: Source bytes the tree was built from.

    Returns:
        The decoded text covered by the node.
    """
    return content[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def start_line(node) -> int:
    """1-based line the node starts on."""
    return node.start_point[0] + 1


def end_line(node) -> int:
    """1-based line the node ends on."""
    return node.end_point[0] + 1


def node_location(node, file_path: str) -> Location:
    """Location spanning the whole node."""
    return Location(
        file_path=file_path,
        start_line=start_line(node),
        end_line=end_line(node),
        start_col=node.start_point[1],
        end_col=node.end_point[1],
    )


def string_content(node, content: bytes) -> str:
    """Text of a string literal without its quotes."""
    for child in node.children:
        if classify(child) == NodeKind.STRING_FRAGMENT:
            return node_text(child, content)
    text = node_text(node, content)
    if len(text) >= 2:
        return text[1:-1]
    return text


def argument_nodes(args_node) -> list:
    """Argument expressions of an ``arguments`` node, without punctuation."""
    return [child for child in args_node.children if child.type not in _PUNCTUATION]


def modifiers(node) -> set[NodeKind]:
    """Kinds of the modifier keywords (async, static, *, ...) among node's children."""
    return {kind for kind in map(classify, node.children) if kind.role is NodeRole.MODIFIER}


def prototype_owner(node, content: bytes) -> str | None:
    """Return ``X`` when node is the member expression ``X.prototype``."""
    if classify(node) != NodeKind.MEMBER_EXPRESSION:
        return None
    obj = node.child_by_field_name("object")
    prop = node.child_by_field_name("property")
    if obj is None or prop is None or classify(obj) != NodeKind.IDENTIFIER:
        return None
    if node_text(prop, content) != "prototype":
        return None
    return node_text(obj, content)


def extract_parameters(node, content: bytes) -> list[str]:
    """Render the parameters of a ``formal_parameters`` node.

    Plain identifiers are kept as-is, rest parameters get their ``...``
    prefix, defaulted parameters are reduced to their name, and
    destructuring patterns keep their source text.
    """
    params = []
    for child in node.children:
        kind = classify(child)
        if kind == NodeKind.IDENTIFIER:
            params.append(node_text(child, content))
        elif kind == NodeKind.REST_PATTERN:
            for grandchild in child.children:
                if classify(grandchild) == NodeKind.IDENTIFIER:
                    params.append("..." + node_text(grandchild, content))
        elif kind == NodeKind.ASSIGNMENT_PATTERN:
            left = child.child_by_field_name("left")
            if left is not None:
                params.append(node_text(left, content))
        elif kind in (NodeKind.OBJECT_PATTERN, NodeKind.ARRAY_PATTERN):
            params.append(node_text(child, content))
    return params


def preceding_doc_comment(node, content: bytes) -> str:
    """Doc comment immediately preceding a node.

    Only the direct previous sibling is examined, and only a block comment
    opening with ``/**`` counts. For a declaration wrapped in ``export``, the
    export statement's previous sibling is checked as well.
    """
    if node is None:
        return ""

    comment = _doc_comment_text(node.prev_sibling, content)
    if comment:
        return comment

    parent = node.parent
    if parent is not None and classify(parent) == NodeKind.EXPORT_STATEMENT:
        return _doc_comment_text(parent.prev_sibling, content)

    return ""


def _doc_comment_text(node, content: bytes) -> str:
    if node is None or classify(node) != NodeKind.COMMENT:
        return ""
    text = node_text(node, content)
    if text.startswith(DOC_COMMENT_PREFIX):
        return text
    return ""
