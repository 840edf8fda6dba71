"""Module-level ``module.exports`` alias detection.

CommonJS libraries often build their public object under a short local name::

    var proto = module.exports = function (options) { ... }
    var app = exports = module.exports = {}
    module.exports = req

Methods attached to ``proto``, ``app`` or ``req`` belong to the type the file
defines, so every such variable is mapped to a semantic type name derived
from the file path (``lib/router/index.js`` -> ``Router``).
"""

import logging
from pathlib import PurePosixPath

from jsextract.parsing.node_kinds import NodeKind, classify
from jsextract.parsing.syntax import node_text

logger = logging.getLogger(__name__)


def derive_semantic_type_name(file_path: str) -> str:
    """Derive a type name from a file path.

    The file's base name without extension is used, or the parent directory
    name for ``index`` files. The first character is upper-cased.

    Args:
        file_path: Path of the source file. Only its text is used.

    Returns:
        The type name, or an empty string when none can be derived.
    """
    if not file_path:
        return ""

    path = PurePosixPath(file_path.replace("\\", "/"))
    name = path.stem
    if name == "index":
        name = path.parent.name
        if name in ("", "."):
            return ""

    if not name:
        return ""
    return name[0].upper() + name[1:]


def build_module_export_aliases(root, content: bytes, file_path: str) -> dict[str, str]:
    """Map module-export alias variables to the file's semantic type name.

    Only direct children of ``program`` are examined.

    Args:
        root: The ``program`` node.
        content: Source bytes.
        file_path: File path the type name is derived from.

    Returns:
        Dict of variable name -> type name; empty when no type name can be
        derived or nothing aliases ``module.exports``.
    """
    if classify(root) != NodeKind.PROGRAM:
        return {}

    semantic_name = derive_semantic_type_name(file_path)
    if not semantic_name:
        return {}

    names: list[str] = []
    for child in root.children:
        kind = classify(child)
        if kind in (NodeKind.VARIABLE_DECLARATION, NodeKind.LEXICAL_DECLARATION):
            names.extend(_exported_declarators(child, content))
        elif kind == NodeKind.EXPRESSION_STATEMENT:
            name = _module_exports_identifier(child, content)
            if name:
                names.append(name)

    aliases = {name: semantic_name for name in names}
    if aliases:
        logger.debug(
            f"Module export aliases in {file_path}: {sorted(aliases)} -> {semantic_name}"
        )
    return aliases


def _exported_declarators(declaration, content: bytes) -> list[str]:
    """Names declared as ``var x = ... = module.exports = ...``."""
    names = []
    for declarator in declaration.children:
        if classify(declarator) != NodeKind.VARIABLE_DECLARATOR:
            continue
        name_node = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")
        if classify(name_node) != NodeKind.IDENTIFIER:
            continue
        if classify(value) != NodeKind.ASSIGNMENT_EXPRESSION:
            continue
        if _mentions_module_exports(value, content):
            names.append(node_text(name_node, content))
    return names


def _mentions_module_exports(node, content: bytes) -> bool:
    stack = [node]
    while stack:
        current = stack.pop()
        kind = classify(current)
        if kind == NodeKind.MEMBER_EXPRESSION and node_text(current, content) == "module.exports":
            return True
        if kind == NodeKind.IDENTIFIER and node_text(current, content) == "exports":
            return True
        stack.extend(current.children)
    return False


def _module_exports_identifier(statement, content: bytes) -> str | None:
    """``X`` for a ``module.exports = X`` statement."""
    for child in statement.children:
        if classify(child) != NodeKind.ASSIGNMENT_EXPRESSION:
            continue
        left = child.child_by_field_name("left")
        right = child.child_by_field_name("right")
        if (
            classify(left) == NodeKind.MEMBER_EXPRESSION
            and node_text(left, content) == "module.exports"
            and classify(right) == NodeKind.IDENTIFIER
        ):
            return node_text(right, content)
    return None
