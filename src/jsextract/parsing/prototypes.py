"""Recovery of classes, methods and inheritance from prototype-era idioms.

Before class syntax, JavaScript libraries attached behavior after the fact:

    proto.handle = function handle(req, res, out) { ... }
    Router.prototype.route = function (path) { ... }
    util.inherits(Router, EventEmitter)

This module turns those statements into Method symbols and ``extends``
metadata, and decides when a plain function is really a constructor.
"""

import copy
import logging

from jsextract.constants import MAX_THIS_ASSIGNMENT_DEPTH
from jsextract.parsing.call_sites import CallSiteWalker
from jsextract.parsing.models import (
    Import,
    Symbol,
    SymbolKind,
    SymbolMetadata,
    generate_id,
)
from jsextract.parsing.node_kinds import NodeKind, classify
from jsextract.parsing.syntax import (
    argument_nodes,
    end_line,
    extract_parameters,
    modifiers,
    node_text,
    preceding_doc_comment,
    prototype_owner,
    start_line,
)

logger = logging.getLogger(__name__)


def extract_prototype_methods(
    statement,
    content: bytes,
    file_path: str,
    walker: CallSiteWalker,
    aliases: dict[str, str],
) -> tuple[list[Symbol], list[Import], object | None]:
    """Extract methods attached by assignment in an expression statement.

    Recognizes ``alias.prop = fn`` where ``alias`` is a module export alias,
    and ``Ctor.prototype.prop = fn`` for any ``Ctor``. Chains such as
    ``res.set = res.header = function header() {}`` yield one method per
    link, all sharing the function's signature and call sites.

    Args:
        statement: An expression_statement node.
        content: Source bytes.
        file_path: File path for IDs and locations.
        walker: Call-site walker for the function body.
        aliases: Module export alias map (variable name -> type name).

    Returns:
        Tuple of (method symbols, dynamic imports found in the body, the
        function node the methods were built from or None when nothing
        matched). The function node's subtree belongs to the methods.
    """
    assign = _first_child_of_kind(statement, NodeKind.ASSIGNMENT_EXPRESSION)
    if assign is None:
        return [], [], None

    # (receiver type, method name, start line, end line) per chain link
    targets: list[tuple[str, str, int, int]] = []
    node = assign
    while classify(node) == NodeKind.ASSIGNMENT_EXPRESSION:
        left = node.child_by_field_name("left")
        target = _method_target(left, content, aliases)
        if target is not None:
            receiver, name = target
            targets.append((receiver, name, start_line(left), end_line(node)))
        node = node.child_by_field_name("right")

    func = node
    if not targets or not classify(func).is_function_value:
        return [], [], None

    name_node = func.child_by_field_name("name")
    fn_name = node_text(name_node, content) if name_node is not None else ""
    params: list[str] = []
    # Arrow functions with a single bare parameter
    param_node = func.child_by_field_name("parameter")
    if param_node is not None:
        params = [node_text(param_node, content)]

    found = modifiers(func)
    is_async = NodeKind.ASYNC in found
    is_generator = classify(func) == NodeKind.GENERATOR_FUNCTION or NodeKind.STAR in found
    params_node = func.child_by_field_name("parameters")
    if params_node is not None:
        params = extract_parameters(params_node, content)

    calls, dynamic_imports = walker.walk(func.child_by_field_name("body"))

    doc_comment = preceding_doc_comment(statement, content) or preceding_doc_comment(
        assign, content
    )

    signature = ("async " if is_async else "") + fn_name
    if is_generator:
        signature += "*"
    signature += "(" + ", ".join(params) + ")"

    symbols = []
    for receiver, name, first_line, last_line in targets:
        metadata = None
        if is_async or is_generator:
            metadata = SymbolMetadata(is_async=is_async, is_generator=is_generator)
        symbols.append(
            Symbol(
                id=generate_id(file_path, first_line, f"{receiver}.{name}"),
                name=name,
                kind=SymbolKind.METHOD,
                file_path=file_path,
                start_line=first_line,
                end_line=max(first_line, last_line),
                signature=signature,
                doc_comment=doc_comment,
                exported=True,
                receiver=receiver,
                calls=copy.deepcopy(calls),
                metadata=metadata,
            )
        )

    return symbols, dynamic_imports, func


def _method_target(left, content: bytes, aliases: dict[str, str]) -> tuple[str, str] | None:
    """Resolve ``alias.prop`` or ``Ctor.prototype.prop`` to (receiver, name)."""
    if classify(left) != NodeKind.MEMBER_EXPRESSION:
        return None
    obj = left.child_by_field_name("object")
    prop = left.child_by_field_name("property")
    if obj is None or prop is None:
        return None

    name = node_text(prop, content)
    if classify(obj) == NodeKind.IDENTIFIER:
        alias = aliases.get(node_text(obj, content))
        if alias:
            return alias, name
        return None

    owner = prototype_owner(obj, content)
    if owner:
        return owner, name
    return None


def _first_child_of_kind(node, kind: NodeKind):
    for child in node.children:
        if classify(child) == kind:
            return child
    return None


# =============================================================================
# Constructor functions
# =============================================================================


def is_constructor_function(name: str, body, content: bytes) -> bool:
    """Check whether a function declaration follows the constructor convention.

    A constructor has an upper-case first letter and assigns ``this.<x>``
    directly in its body. Assignments inside nested functions do not count.
    """
    if not name or body is None:
        return False
    if not name[0].isupper():
        return False
    return _has_this_assignment(body, content, 0)


def _has_this_assignment(node, content: bytes, depth: int) -> bool:
    # Only expression statements and blocks are searched; conditionals,
    # loops and try blocks are not.
    if depth > MAX_THIS_ASSIGNMENT_DEPTH:
        return False

    for child in node.children:
        kind = classify(child)
        if kind == NodeKind.ASSIGNMENT_EXPRESSION:
            left = child.child_by_field_name("left")
            if classify(left) == NodeKind.MEMBER_EXPRESSION and node_text(
                left, content
            ).startswith("this."):
                return True
        if kind in (NodeKind.EXPRESSION_STATEMENT, NodeKind.STATEMENT_BLOCK):
            if _has_this_assignment(child, content, depth + 1):
                return True
    return False


# =============================================================================
# Inheritance edges
# =============================================================================


def detect_inheritance(statement, content: bytes, symbols: list[Symbol]) -> None:
    """Record prototype-chain inheritance found in an expression statement.

    Sets ``metadata.extends`` on the first already-extracted symbol whose
    name matches the child type. Edges naming a symbol that has not been
    seen yet are dropped.

    Args:
        statement: An expression_statement node.
        content: Source bytes.
        symbols: Top-level symbols extracted so far.
    """
    for child in statement.children:
        kind = classify(child)
        if kind == NodeKind.CALL_EXPRESSION:
            func_node = child.child_by_field_name("function")
            args_node = child.child_by_field_name("arguments")
            if func_node is None or args_node is None:
                continue
            callee = node_text(func_node, content)
            args = argument_nodes(args_node)
            _detect_inherits_call(callee, args, content, symbols)
            _detect_object_assign(callee, args, content, symbols)
            _detect_mixin_call(callee, args, content, symbols)
            _detect_set_prototype_of(callee, args, content, symbols)
        elif kind == NodeKind.ASSIGNMENT_EXPRESSION:
            _detect_object_create(child, content, symbols)


def set_extends(symbols: list[Symbol], child_name: str, parent_name: str) -> bool:
    """Set ``extends`` on the first symbol named child_name.

    Returns:
        True if a symbol was found and updated.
    """
    for sym in symbols:
        if sym.name == child_name:
            sym.ensure_metadata().extends = parent_name
            logger.debug(f"Inheritance edge {child_name} -> {parent_name}")
            return True
    return False


def _identifier_args(args: list, content: bytes) -> list[str]:
    return [node_text(arg, content) for arg in args if classify(arg) == NodeKind.IDENTIFIER]


def _detect_inherits_call(callee: str, args: list, content: bytes, symbols: list[Symbol]) -> None:
    """``inherits(Child, Parent)`` or ``util.inherits(Child, Parent)``."""
    if callee != "inherits" and not callee.endswith(".inherits"):
        return
    names = _identifier_args(args, content)
    if len(names) >= 2:
        set_extends(symbols, names[0], names[1])


def _detect_set_prototype_of(
    callee: str, args: list, content: bytes, symbols: list[Symbol]
) -> None:
    """Bare ``setPrototypeOf(child, parent)``.

    ``Object.setPrototypeOf`` is not matched.
    """
    if callee != "setPrototypeOf":
        return
    names = _identifier_args(args, content)
    if len(names) >= 2:
        set_extends(symbols, names[0], names[1])


def _detect_object_assign(callee: str, args: list, content: bytes, symbols: list[Symbol]) -> None:
    """``Object.assign(Target.prototype, Source.prototype, Other, ...)``; last source wins."""
    if callee != "Object.assign" or len(args) < 2:
        return
    target = prototype_owner(args[0], content)
    if not target:
        return
    for arg in args[1:]:
        source = None
        if classify(arg) == NodeKind.MEMBER_EXPRESSION:
            source = prototype_owner(arg, content)
        elif classify(arg) == NodeKind.IDENTIFIER:
            source = node_text(arg, content)
        if source:
            set_extends(symbols, target, source)


def _detect_mixin_call(callee: str, args: list, content: bytes, symbols: list[Symbol]) -> None:
    """``mixin(target, Source.prototype, ...)`` for any callee ending in ``mixin``."""
    if not callee.endswith("mixin") or len(args) < 2:
        return

    first, second = args[0], args[1]
    target = None
    if classify(first) == NodeKind.IDENTIFIER:
        target = node_text(first, content)
    elif classify(first) == NodeKind.MEMBER_EXPRESSION:
        obj = first.child_by_field_name("object")
        if classify(obj) == NodeKind.IDENTIFIER:
            target = node_text(obj, content)
    if not target:
        return

    source = None
    if classify(second) == NodeKind.IDENTIFIER:
        source = node_text(second, content)
    elif classify(second) == NodeKind.MEMBER_EXPRESSION:
        obj = second.child_by_field_name("object")
        if classify(obj) == NodeKind.IDENTIFIER:
            source = prototype_owner(second, content) or node_text(second, content)
    if source:
        set_extends(symbols, target, source)


def _detect_object_create(assign, content: bytes, symbols: list[Symbol]) -> None:
    """``Child.prototype = Object.create(Parent.prototype)``."""
    left = assign.child_by_field_name("left")
    right = assign.child_by_field_name("right")
    child_name = prototype_owner(left, content)
    if not child_name or classify(right) != NodeKind.CALL_EXPRESSION:
        return

    func_node = right.child_by_field_name("function")
    args_node = right.child_by_field_name("arguments")
    if func_node is None or args_node is None:
        return
    if node_text(func_node, content) != "Object.create":
        return

    for arg in argument_nodes(args_node):
        parent_name = prototype_owner(arg, content)
        if parent_name:
            set_extends(symbols, child_name, parent_name)
            return
