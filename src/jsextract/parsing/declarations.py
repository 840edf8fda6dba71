"""Builders for function, class, member and variable symbols."""

from jsextract.parsing.call_sites import CallSiteWalker
from jsextract.parsing.models import (
    Import,
    MethodSignature,
    Symbol,
    SymbolKind,
    SymbolMetadata,
    generate_id,
)
from jsextract.parsing.node_kinds import NodeKind, classify
from jsextract.parsing.prototypes import is_constructor_function
from jsextract.parsing.syntax import (
    end_line,
    extract_parameters,
    modifiers,
    node_text,
    preceding_doc_comment,
    start_line,
)


def _symbol_at(node, file_path: str, name: str, kind: SymbolKind, qualified_name: str = "") -> Symbol:
    """Create a symbol spanning node, with its ID derived from the start line."""
    return Symbol(
        id=generate_id(file_path, start_line(node), qualified_name or name),
        name=name,
        kind=kind,
        file_path=file_path,
        start_line=start_line(node),
        end_line=end_line(node),
        start_col=node.start_point[1],
        end_col=node.end_point[1],
    )


def extract_function(
    node,
    content: bytes,
    file_path: str,
    walker: CallSiteWalker,
    exported: bool = False,
) -> tuple[Symbol | None, list[Import]]:
    """Extract a function or generator function declaration.

    A function named like a type whose body assigns ``this.<x>`` is promoted
    to a Class symbol with ``metadata.is_constructor`` set.

    Args:
        node: function_declaration or generator_function_declaration node.
        content: Source bytes.
        file_path: File path for IDs and locations.
        walker: Call-site walker for the body.
        exported: Whether the declaration is wrapped in ``export``.

    Returns:
        Tuple of (symbol or None when unnamed, dynamic imports in the body).
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None, []
    name = node_text(name_node, content)
    if not name:
        return None, []

    found = modifiers(node)
    is_async = NodeKind.ASYNC in found
    is_generator = (
        classify(node) == NodeKind.GENERATOR_FUNCTION_DECLARATION or NodeKind.STAR in found
    )
    params_node = node.child_by_field_name("parameters")
    params = extract_parameters(params_node, content) if params_node is not None else []

    signature = "async function" if is_async else "function"
    if is_generator:
        signature += "*"
    signature += f" {name}({', '.join(params)})"

    sym = _symbol_at(node, file_path, name, SymbolKind.FUNCTION)
    sym.signature = signature
    sym.doc_comment = preceding_doc_comment(node, content)
    sym.exported = exported

    body = node.child_by_field_name("body")
    is_constructor = is_constructor_function(name, body, content)
    if is_constructor:
        sym.kind = SymbolKind.CLASS

    if is_async or is_generator or is_constructor:
        sym.metadata = SymbolMetadata(
            is_async=is_async,
            is_generator=is_generator,
            is_constructor=is_constructor,
        )

    sym.calls, dynamic_imports = walker.walk(body)
    return sym, dynamic_imports


def extract_class(
    node,
    content: bytes,
    file_path: str,
    walker: CallSiteWalker,
    exported: bool = False,
) -> tuple[Symbol | None, list[Import]]:
    """Extract a class declaration with its methods and fields as children."""
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None, []
    name = node_text(name_node, content)

    extends = None
    children: list[Symbol] = []
    dynamic_imports: list[Import] = []
    for child in node.children:
        kind = classify(child)
        if kind == NodeKind.CLASS_HERITAGE:
            extends = _heritage_name(child, content)
        elif kind == NodeKind.CLASS_BODY:
            children, dynamic_imports = _extract_class_body(child, content, file_path, walker, name)

    signature = f"class {name}"
    if extends:
        signature += f" extends {extends}"

    sym = _symbol_at(node, file_path, name, SymbolKind.CLASS)
    sym.signature = signature
    sym.doc_comment = preceding_doc_comment(node, content)
    sym.exported = exported
    sym.children = children
    if extends:
        sym.metadata = SymbolMetadata(extends=extends)

    collect_class_methods(sym)
    return sym, dynamic_imports


def _heritage_name(node, content: bytes) -> str | None:
    """Base class named in ``extends``: an identifier or a dotted member expression."""
    for child in node.children:
        if classify(child) in (NodeKind.IDENTIFIER, NodeKind.MEMBER_EXPRESSION):
            return node_text(child, content)
    return None


def _extract_class_body(
    node, content: bytes, file_path: str, walker: CallSiteWalker, class_name: str
) -> tuple[list[Symbol], list[Import]]:
    members: list[Symbol] = []
    dynamic_imports: list[Import] = []
    for child in node.children:
        kind = classify(child)
        if kind == NodeKind.METHOD_DEFINITION:
            member, imports = extract_method(child, content, file_path, walker, class_name)
        elif kind == NodeKind.FIELD_DEFINITION:
            member, imports = extract_field(child, content, file_path, walker, class_name)
        else:
            continue
        if member is not None:
            members.append(member)
        dynamic_imports.extend(imports)
    return members, dynamic_imports


def extract_method(
    node,
    content: bytes,
    file_path: str,
    walker: CallSiteWalker,
    class_name: str,
) -> tuple[Symbol | None, list[Import]]:
    """Extract a method definition from a class body.

    ``#private`` methods are kept but marked unexported with
    ``access_modifier="private"``.
    """
    name = ""
    is_private = False
    params: list[str] = []
    for child in node.children:
        kind = classify(child)
        if kind == NodeKind.PROPERTY_IDENTIFIER:
            name = node_text(child, content)
        elif kind == NodeKind.PRIVATE_PROPERTY_IDENTIFIER:
            name = node_text(child, content)
            is_private = True
        elif kind == NodeKind.FORMAL_PARAMETERS:
            params = extract_parameters(child, content)

    found = modifiers(node)
    is_async = NodeKind.ASYNC in found
    is_static = NodeKind.STATIC in found
    is_generator = NodeKind.STAR in found

    if not name:
        return None, []

    signature = ""
    if is_static:
        signature += "static "
    if is_async:
        signature += "async "
    signature += name
    if is_generator:
        signature += "*"
    signature += f"({', '.join(params)})"

    sym = _symbol_at(node, file_path, name, SymbolKind.METHOD, f"{class_name}.{name}")
    sym.signature = signature
    sym.doc_comment = preceding_doc_comment(node, content)
    sym.receiver = class_name
    sym.exported = not is_private

    if is_async or is_generator or is_static or is_private:
        sym.metadata = SymbolMetadata(
            is_async=is_async,
            is_generator=is_generator,
            is_static=is_static,
            access_modifier="private" if is_private else None,
        )

    sym.calls, dynamic_imports = walker.walk(node.child_by_field_name("body"))
    return sym, dynamic_imports


def extract_field(
    node,
    content: bytes,
    file_path: str,
    walker: CallSiteWalker,
    class_name: str,
) -> tuple[Symbol | None, list[Import]]:
    """Extract a class field.

    Fields initialized with an arrow or function expression become Property
    symbols and their bodies are walked for call sites.
    """
    name = ""
    is_private = False
    for child in node.children:
        kind = classify(child)
        if kind == NodeKind.PROPERTY_IDENTIFIER:
            name = node_text(child, content)
        elif kind == NodeKind.PRIVATE_PROPERTY_IDENTIFIER:
            name = node_text(child, content)
            is_private = True
    is_static = NodeKind.STATIC in modifiers(node)

    if not name:
        return None, []

    value = node.child_by_field_name("value")
    is_function = classify(value) in (NodeKind.ARROW_FUNCTION, NodeKind.FUNCTION_EXPRESSION)

    kind = SymbolKind.PROPERTY if is_function else SymbolKind.FIELD
    sym = _symbol_at(node, file_path, name, kind, f"{class_name}.{name}")
    sym.signature = f"static {name}" if is_static else name
    sym.doc_comment = preceding_doc_comment(node, content)
    sym.receiver = class_name
    sym.exported = not is_private

    if is_static or is_private:
        sym.metadata = SymbolMetadata(
            is_static=is_static,
            access_modifier="private" if is_private else None,
        )

    dynamic_imports: list[Import] = []
    if is_function:
        sym.calls, dynamic_imports = walker.walk(value.child_by_field_name("body"))
    return sym, dynamic_imports


def extract_variables(
    node,
    content: bytes,
    file_path: str,
    walker: CallSiteWalker,
    exported: bool = False,
) -> tuple[list[Symbol], list[Import]]:
    """Extract one symbol per named declarator of a var/let/const declaration.

    Arrow-function initializers produce Function symbols; everything else is
    a Variable, or a Constant for ``const``. Destructuring declarators have
    no single name and are skipped.

    Args:
        node: lexical_declaration or variable_declaration node.
        content: Source bytes.
        file_path: File path for IDs and locations.
        walker: Call-site walker for arrow bodies and initializer scans.
        exported: Whether the declaration is wrapped in ``export``.

    Returns:
        Tuple of (symbols, dynamic imports).
    """
    keyword = "var"
    symbols: list[Symbol] = []
    dynamic_imports: list[Import] = []
    doc_comment = preceding_doc_comment(node, content)

    for child in node.children:
        kind = classify(child)
        if kind in (NodeKind.CONST, NodeKind.LET, NodeKind.VAR):
            keyword = kind.value
        elif kind == NodeKind.VARIABLE_DECLARATOR:
            sym, imports = _extract_declarator(child, content, file_path, walker, keyword)
            if sym is None:
                continue
            sym.doc_comment = doc_comment
            sym.exported = exported
            symbols.append(sym)
            dynamic_imports.extend(imports)

    return symbols, dynamic_imports


def _extract_declarator(
    node, content: bytes, file_path: str, walker: CallSiteWalker, keyword: str
) -> tuple[Symbol | None, list[Import]]:
    name_node = node.child_by_field_name("name")
    if classify(name_node) != NodeKind.IDENTIFIER:
        return None, []
    name = node_text(name_node, content)
    value = node.child_by_field_name("value")

    if classify(value) == NodeKind.ARROW_FUNCTION:
        is_async = NodeKind.ASYNC in modifiers(value)
        params: list[str] = []
        param_node = value.child_by_field_name("parameter")
        if param_node is not None:
            params = [node_text(param_node, content)]
        for child in value.children:
            if classify(child) == NodeKind.FORMAL_PARAMETERS:
                params = extract_parameters(child, content)

        sym = _symbol_at(node, file_path, name, SymbolKind.FUNCTION)
        prefix = "async " if is_async else ""
        sym.signature = f"{keyword} {name} = {prefix}({', '.join(params)}) => {{}}"
        if is_async:
            sym.metadata = SymbolMetadata(is_async=True)
        sym.calls, dynamic_imports = walker.walk(value.child_by_field_name("body"))
        return sym, dynamic_imports

    kind = SymbolKind.CONSTANT if keyword == "const" else SymbolKind.VARIABLE
    sym = _symbol_at(node, file_path, name, kind)
    sym.signature = f"{keyword} {name}"
    return sym, walker.scan_dynamic_imports(value)


def collect_class_methods(class_symbol: Symbol) -> None:
    """List the class's non-constructor Method children in ``metadata.methods``."""
    methods = [
        MethodSignature(name=child.name, signature=child.signature)
        for child in class_symbol.children
        if child.kind == SymbolKind.METHOD and child.name != "constructor"
    ]
    if methods:
        class_symbol.ensure_metadata().methods = methods
