"""Bounded call-site extraction over function bodies."""

import logging

from jsextract.config import ParserConfig
from jsextract.constants import (
    MAX_CALL_TARGET_LENGTH,
    MAX_CALLBACK_ARG_LENGTH,
    NON_CALLBACK_IDENTIFIERS,
)
from jsextract.parsing.cancellation import CancelToken, is_cancelled
from jsextract.parsing.models import CallSite, Import
from jsextract.parsing.node_kinds import NodeKind, classify
from jsextract.parsing.syntax import argument_nodes, node_location, node_text, string_content

logger = logging.getLogger(__name__)


class CallSiteWalker:
    """Collects call sites and dynamic imports from bodies of one file.

    The walk uses an explicit stack instead of recursion, so memory and the
    number of visited nodes stay bounded by the configured depth and call
    limits no matter how deeply the source nests expressions.
    """

    def __init__(
        self,
        content: bytes,
        file_path: str,
        config: ParserConfig,
        cancel: CancelToken | None = None,
    ) -> None:
        self._content = content
        self._file_path = file_path
        self._max_depth = config.max_call_expression_depth
        self._max_calls = config.max_call_sites_per_symbol
        self._check_interval = config.cancel_check_interval
        self._cancel = cancel

    def walk(self, body) -> tuple[list[CallSite], list[Import]]:
        """Extract call sites and inline dynamic imports from a body.

        Args:
            body: Root of the body subtree (statement block or expression).

        Returns:
            Tuple of (calls, dynamic_imports). Both may be truncated when a
            limit is reached or cancellation is observed.
        """
        calls: list[CallSite] = []
        dynamic_imports: list[Import] = []
        if body is None or is_cancelled(self._cancel):
            return calls, dynamic_imports

        stack = [(body, 0)]
        visited = 0
        while stack:
            node, depth = stack.pop()

            if depth > self._max_depth:
                logger.debug(f"Max call expression depth reached in {self._file_path} at {depth}")
                continue

            visited += 1
            if visited % self._check_interval == 0 and is_cancelled(self._cancel):
                logger.debug(
                    f"Call extraction cancelled in {self._file_path} after {len(calls)} calls"
                )
                return calls, dynamic_imports

            if len(calls) >= self._max_calls:
                logger.warning(
                    f"Max call sites per symbol ({self._max_calls}) reached in {self._file_path}"
                )
                return calls, dynamic_imports

            kind = classify(node)
            if kind == NodeKind.CALL_EXPRESSION:
                func_node = node.child_by_field_name("function")
                if classify(func_node) == NodeKind.IMPORT:
                    imp = self._dynamic_import(node)
                    if imp is not None:
                        dynamic_imports.append(imp)
                else:
                    call = self._call_site(node, func_node)
                    if call is not None:
                        calls.append(call)
            elif kind == NodeKind.NEW_EXPRESSION:
                call = self._constructor_call_site(node)
                if call is not None:
                    calls.append(call)

            for child in reversed(node.children):
                stack.append((child, depth + 1))

        return calls, dynamic_imports

    def scan_dynamic_imports(self, node) -> list[Import]:
        """Find ``import('literal')`` calls in a non-function expression.

        Used for variable initializers such as
        ``const Heavy = React.lazy(() => import('./Heavy'))``.
        """
        dynamic_imports: list[Import] = []
        if node is None:
            return dynamic_imports

        stack = [(node, 0)]
        while stack:
            current, depth = stack.pop()
            if depth > self._max_depth:
                continue
            if classify(current) == NodeKind.CALL_EXPRESSION:
                if classify(current.child_by_field_name("function")) == NodeKind.IMPORT:
                    imp = self._dynamic_import(current)
                    if imp is not None:
                        dynamic_imports.append(imp)
            for child in reversed(current.children):
                stack.append((child, depth + 1))

        return dynamic_imports

    def _dynamic_import(self, node) -> Import | None:
        """Build an Import for ``import('path')``; None for non-literal arguments."""
        args_node = node.child_by_field_name("arguments")
        if args_node is None:
            return None
        args = argument_nodes(args_node)
        if not args or classify(args[0]) != NodeKind.STRING:
            return None

        path = string_content(args[0], self._content)
        if not path:
            return None

        logger.debug(f"Dynamic import of {path} in {self._file_path}")
        return Import(
            path=path,
            location=node_location(node, self._file_path),
            is_dynamic=True,
            is_module=True,
            is_relative=path.startswith("."),
        )

    def _call_site(self, node, func_node) -> CallSite | None:
        """Build a CallSite for a ``call_expression``."""
        if func_node is None and node.child_count > 0:
            func_node = node.children[0]
        if func_node is None:
            return None

        call = CallSite(target="", location=node_location(node, self._file_path))
        func_kind = classify(func_node)

        if func_kind == NodeKind.IDENTIFIER:
            call.target = node_text(func_node, self._content)
        elif func_kind == NodeKind.MEMBER_EXPRESSION:
            object_node = func_node.child_by_field_name("object")
            property_node = func_node.child_by_field_name("property")
            if property_node is not None:
                call.target = node_text(property_node, self._content)
            if object_node is not None:
                call.receiver = node_text(object_node, self._content)
                call.is_method = True
        else:
            call.target = node_text(func_node, self._content)[:MAX_CALL_TARGET_LENGTH]

        if not call.target:
            return None

        args_node = node.child_by_field_name("arguments")
        if args_node is not None:
            call.function_args = self._callback_args(args_node)

        return call

    def _constructor_call_site(self, node) -> CallSite | None:
        """Build a CallSite for ``new X()`` or ``new ns.X()``."""
        constructor = node.child_by_field_name("constructor")
        if constructor is None:
            return None

        call = CallSite(target="", location=node_location(node, self._file_path))
        kind = classify(constructor)

        if kind == NodeKind.IDENTIFIER:
            call.target = node_text(constructor, self._content)
        elif kind == NodeKind.MEMBER_EXPRESSION:
            object_node = constructor.child_by_field_name("object")
            property_node = constructor.child_by_field_name("property")
            if property_node is not None:
                call.target = node_text(property_node, self._content)
            if object_node is not None:
                call.receiver = node_text(object_node, self._content)
                call.is_method = True
        else:
            call.target = node_text(constructor, self._content)[:MAX_CALL_TARGET_LENGTH]

        if not call.target:
            return None
        return call

    def _callback_args(self, args_node) -> list[str]:
        """Identifier and short member-expression arguments that may be callbacks."""
        identifiers = []
        for arg in argument_nodes(args_node):
            kind = classify(arg)
            if kind == NodeKind.IDENTIFIER:
                name = node_text(arg, self._content)
                if name not in NON_CALLBACK_IDENTIFIERS:
                    identifiers.append(name)
            elif kind == NodeKind.MEMBER_EXPRESSION:
                text = node_text(arg, self._content)
                if len(text) <= MAX_CALLBACK_ARG_LENGTH and "(" not in text:
                    identifiers.append(text)
        return identifiers
