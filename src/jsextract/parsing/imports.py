"""ES module and CommonJS import extraction."""

import logging

from jsextract.parsing.models import Import, Symbol, SymbolKind, generate_id
from jsextract.parsing.node_kinds import NodeKind, classify
from jsextract.parsing.syntax import (
    argument_nodes,
    end_line,
    node_location,
    node_text,
    start_line,
    string_content,
)

logger = logging.getLogger(__name__)


def _import_symbol(node, file_path: str, path: str) -> Symbol:
    """Import-kind symbol named by the module path."""
    return Symbol(
        id=generate_id(file_path, start_line(node), path),
        name=path,
        kind=SymbolKind.IMPORT,
        file_path=file_path,
        start_line=start_line(node),
        end_line=end_line(node),
        start_col=node.start_point[1],
        end_col=node.end_point[1],
    )


def _is_relative(path: str) -> bool:
    return path.startswith(".")


def extract_es_import(node, content: bytes, file_path: str) -> tuple[Import | None, Symbol | None]:
    """Extract an ``import ... from 'path'`` statement.

    Handles default (``import a from``), namespace (``import * as a from``),
    named (``import { a, b as c } from``) and bare side-effect imports.

    Returns:
        Tuple of (import, import symbol), both None when no path is found.
    """
    imp = Import(path="", location=node_location(node, file_path), is_module=True)

    for child in node.children:
        kind = classify(child)
        if kind == NodeKind.STRING:
            imp.path = string_content(child, content)
        elif kind == NodeKind.IMPORT_CLAUSE:
            _read_import_clause(child, content, imp)

    if not imp.path:
        return None, None

    imp.is_relative = _is_relative(imp.path)
    return imp, _import_symbol(node, file_path, imp.path)


def _read_import_clause(node, content: bytes, imp: Import) -> None:
    for child in node.children:
        kind = classify(child)
        if kind == NodeKind.IDENTIFIER:
            imp.alias = node_text(child, content)
            imp.is_default = True
        elif kind == NodeKind.NAMESPACE_IMPORT:
            for grandchild in child.children:
                if classify(grandchild) == NodeKind.IDENTIFIER:
                    imp.alias = node_text(grandchild, content)
            imp.is_namespace = True
        elif kind == NodeKind.NAMED_IMPORTS:
            for specifier in child.children:
                if classify(specifier) != NodeKind.IMPORT_SPECIFIER:
                    continue
                # The imported name, not the local "as" binding
                for part in specifier.children:
                    if classify(part) == NodeKind.IDENTIFIER:
                        imp.names.append(node_text(part, content))
                        break


def extract_require_path(call, content: bytes) -> str:
    """Path of a ``require('path')`` call; empty for anything else."""
    if classify(call) != NodeKind.CALL_EXPRESSION:
        return ""
    func_node = call.child_by_field_name("function")
    if classify(func_node) != NodeKind.IDENTIFIER or node_text(func_node, content) != "require":
        return ""
    args_node = call.child_by_field_name("arguments")
    if args_node is None:
        return ""
    for arg in argument_nodes(args_node):
        if classify(arg) == NodeKind.STRING:
            return string_content(arg, content)
    return ""


def extract_commonjs_imports(
    node, content: bytes, file_path: str
) -> tuple[list[Import], list[Symbol]]:
    """Extract ``require()`` bindings from a var/let/const declaration.

    Recognized declarator shapes::

        const express = require('express')
        const { Router, Request: Req } = require('express')
        var isAbsolute = require('./utils').isAbsolute

    Destructured bindings produce one Import per local name. Each matched
    declarator also yields an Import-kind symbol named by the path.

    Args:
        node: lexical_declaration or variable_declaration node.
        content: Source bytes.
        file_path: File path for IDs and locations.

    Returns:
        Tuple of (imports, import symbols).
    """
    imports: list[Import] = []
    symbols: list[Symbol] = []

    for declarator in node.children:
        if classify(declarator) != NodeKind.VARIABLE_DECLARATOR:
            continue
        name_node = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")

        path = ""
        member_name = None
        value_kind = classify(value)
        if value_kind == NodeKind.CALL_EXPRESSION:
            path = extract_require_path(value, content)
        elif value_kind == NodeKind.MEMBER_EXPRESSION:
            obj = value.child_by_field_name("object")
            prop = value.child_by_field_name("property")
            if prop is not None:
                path = extract_require_path(obj, content)
                member_name = node_text(prop, content) if path else None
        if not path:
            continue

        location = node_location(node, file_path)
        name_kind = classify(name_node)
        if name_kind == NodeKind.IDENTIFIER:
            imp = Import(
                path=path,
                location=location,
                alias=node_text(name_node, content),
                is_common_js=True,
                is_relative=_is_relative(path),
            )
            if member_name:
                imp.names = [member_name]
            imports.append(imp)
        elif name_kind == NodeKind.OBJECT_PATTERN:
            for local_name in destructured_names(name_node, content):
                imports.append(
                    Import(
                        path=path,
                        location=node_location(node, file_path),
                        alias=local_name,
                        is_common_js=True,
                        is_relative=_is_relative(path),
                    )
                )

        symbols.append(_import_symbol(node, file_path, path))

    return imports, symbols


def destructured_names(pattern, content: bytes) -> list[str]:
    """Local binding names of a flat object pattern.

    ``{ a }`` binds ``a``; ``{ a: b }`` binds ``b``. Nested patterns and
    rest elements are ignored.
    """
    names = []
    for child in pattern.children:
        kind = classify(child)
        if kind == NodeKind.SHORTHAND_PROPERTY_IDENTIFIER_PATTERN:
            names.append(node_text(child, content))
        elif kind == NodeKind.PAIR_PATTERN:
            local_name = None
            for part in child.children:
                if classify(part) == NodeKind.IDENTIFIER:
                    local_name = node_text(part, content)
            if local_name:
                names.append(local_name)
    return names


def extract_exports_require(statement, content: bytes, file_path: str) -> list[Import]:
    """Extract ``exports.x = require('p')`` and ``module.exports.x = require('p')``.

    The import alias is the exported property name.
    """
    imports = []
    for child in statement.children:
        if classify(child) != NodeKind.ASSIGNMENT_EXPRESSION:
            continue
        left = child.child_by_field_name("left")
        right = child.child_by_field_name("right")
        if classify(left) != NodeKind.MEMBER_EXPRESSION or right is None:
            continue

        left_text = node_text(left, content)
        if not left_text.startswith(("exports.", "module.exports.")):
            continue
        prop = left.child_by_field_name("property")
        if prop is None:
            continue
        alias = node_text(prop, content)

        path = extract_require_path(right, content)
        if not alias or not path:
            continue

        logger.debug(f"exports.{alias} = require({path!r}) in {file_path}")
        imports.append(
            Import(
                path=path,
                location=node_location(statement, file_path),
                alias=alias,
                is_common_js=True,
                is_relative=_is_relative(path),
            )
        )
    return imports


def extract_reexport(node, content: bytes, file_path: str) -> Import | None:
    """Import for the source module of ``export ... from 'p'``, if any."""
    for child in node.children:
        if classify(child) in (NodeKind.STRING, NodeKind.TEMPLATE_STRING):
            path = string_content(child, content)
            if path:
                return Import(
                    path=path,
                    location=node_location(node, file_path),
                    is_relative=_is_relative(path),
                )
    return None
