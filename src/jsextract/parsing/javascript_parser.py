"""JavaScript parser using tree-sitter."""

import hashlib
import logging
import time
from dataclasses import dataclass, field

import tree_sitter_javascript as ts_js
from tree_sitter import Language, Parser

from jsextract.config import ParserConfig, load_settings
from jsextract.constants import JAVASCRIPT_EXTENSIONS
from jsextract.parsing.base import BaseParser
from jsextract.parsing.call_sites import CallSiteWalker
from jsextract.parsing.cancellation import CancelToken, is_cancelled
from jsextract.parsing.declarations import (
    extract_class,
    extract_function,
    extract_variables,
)
from jsextract.parsing.errors import (
    FileTooLargeError,
    InvalidContentError,
    ParseCanceledError,
    ResultValidationError,
    TreeConstructionError,
)
from jsextract.parsing.finisher import emit_synthetic_classes, filter_private, mark_alias_exports
from jsextract.parsing.imports import (
    extract_commonjs_imports,
    extract_es_import,
    extract_exports_require,
    extract_reexport,
)
from jsextract.parsing.models import Import, ParseResult, Symbol, SymbolKind, generate_id
from jsextract.parsing.module_aliases import build_module_export_aliases
from jsextract.parsing.node_kinds import NodeKind, classify
from jsextract.parsing.prototypes import detect_inheritance, extract_prototype_methods
from jsextract.parsing.syntax import (
    end_line,
    node_text,
    preceding_doc_comment,
    start_line,
)

logger = logging.getLogger(__name__)

LANGUAGE = "javascript"


@dataclass
class _ExtractionContext:
    """Per-call accumulator shared by the traversal handlers."""

    content: bytes
    file_path: str
    walker: CallSiteWalker
    aliases: dict[str, str]
    symbols: list[Symbol] = field(default_factory=list)
    imports: list[Import] = field(default_factory=list)
    # (start_byte, end_byte, type) of nodes whose subtree an extractor owns
    owned: set[tuple[int, int, str]] = field(default_factory=set)


def _node_key(node) -> tuple[int, int, str]:
    return node.start_byte, node.end_byte, node.type


class JavaScriptParser(BaseParser):
    """Parser for JavaScript files using tree-sitter.

    Extracts functions, classes, methods, fields, variables and imports with
    per-symbol call sites. Besides ES module and class syntax it recovers
    structure from CommonJS and prototype idioms: ``require`` bindings,
    ``module.exports`` aliases, ``Ctor.prototype.x = fn`` methods,
    constructor functions and ``util.inherits``-style inheritance.

    The parser holds no per-file state, so one instance can be shared across
    threads.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        """Initialize the parser.

        Args:
            config: Extraction limits. Defaults to the loaded settings.
        """
        self._config = config if config is not None else load_settings().parser
        self._js_language = Language(ts_js.language())

    @property
    def supported_extensions(self) -> list[str]:
        """File extensions this parser handles."""
        return list(JAVASCRIPT_EXTENSIONS)

    @property
    def language_name(self) -> str:
        """Language identifier recorded on results."""
        return LANGUAGE

    @property
    def config(self) -> ParserConfig:
        """Limits this parser was built with."""
        return self._config

    def parse(
        self, content: bytes, file_path: str, cancel: CancelToken | None = None
    ) -> ParseResult:
        """Parse JavaScript source and extract symbols.

        Args:
            content: Raw file bytes; must be UTF-8.
            file_path: Path recorded on symbols, imports and IDs.
            cancel: Optional token (e.g. ``threading.Event``) polled during
                extraction.

        Returns:
            ParseResult. Structural problems found after extraction are
            reported in ``errors`` rather than raised.

        Raises:
            ParseCanceledError: If cancelled before or right after tree construction.
            FileTooLargeError: If content exceeds ``max_file_size_bytes``.
            InvalidContentError: If content is not valid UTF-8.
            TreeConstructionError: If tree-sitter fails to build a tree.
        """
        if is_cancelled(cancel):
            raise ParseCanceledError(f"Parse of {file_path} cancelled before start")

        if len(content) > self._config.max_file_size_bytes:
            raise FileTooLargeError(
                f"{file_path} is {len(content)} bytes, "
                f"limit is {self._config.max_file_size_bytes}"
            )

        try:
            content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidContentError(f"{file_path} is not valid UTF-8: {e}") from e

        result = ParseResult(
            file_path=file_path,
            language=LANGUAGE,
            hash=hashlib.sha256(content).hexdigest(),
            parsed_at=int(time.time() * 1000),
        )

        try:
            tree = Parser(self._js_language).parse(content)
        except Exception as e:
            raise TreeConstructionError(f"tree-sitter failed on {file_path}: {e}") from e
        if tree is None:
            raise TreeConstructionError(f"tree-sitter returned no tree for {file_path}")

        if is_cancelled(cancel):
            raise ParseCanceledError(f"Parse of {file_path} cancelled after tree construction")

        root = tree.root_node
        aliases = build_module_export_aliases(root, content, file_path)
        ctx = _ExtractionContext(
            content=content,
            file_path=file_path,
            walker=CallSiteWalker(content, file_path, self._config, cancel),
            aliases=aliases,
        )
        self._walk_tree(root, ctx)

        if aliases:
            mark_alias_exports(ctx.symbols, aliases)
            emit_synthetic_classes(ctx.symbols, aliases, file_path)

        result.symbols = ctx.symbols
        if not self._config.include_private:
            result.symbols = filter_private(ctx.symbols)
        result.imports = ctx.imports

        try:
            result.validate()
        except ResultValidationError as e:
            result.errors.append(f"validation error: {e}")

        logger.debug(
            f"Parsed {file_path}: {len(result.symbols)} symbols, {len(result.imports)} imports"
        )
        return result

    def _walk_tree(self, root, ctx: _ExtractionContext) -> None:
        """Walk the tree top-down, dispatching declarations to their extractors.

        Declarations are handled once and their subtrees are not revisited.
        Other nodes, including expression statements after the prototype and
        inheritance checks, are descended into so nested declarations are found.
        Function values turned into prototype methods are skipped, but callbacks
        and immediately invoked wrappers are descended into.
        """
        stack = [root]
        while stack:
            node = stack.pop()
            if _node_key(node) in ctx.owned:
                continue
            if self._handle_node(node, ctx):
                continue
            stack.extend(reversed(node.children))

    def _handle_node(self, node, ctx: _ExtractionContext) -> bool:
        """Run the handler for node.

        Returns:
            True if the node was fully handled and its children must be skipped.
        """
        kind = classify(node)

        if kind == NodeKind.IMPORT_STATEMENT:
            imp, sym = extract_es_import(node, ctx.content, ctx.file_path)
            if imp is not None:
                ctx.imports.append(imp)
                ctx.symbols.append(sym)
            return True

        if kind == NodeKind.EXPORT_STATEMENT:
            self._extract_export(node, ctx)
            return True

        if kind in (NodeKind.FUNCTION_DECLARATION, NodeKind.GENERATOR_FUNCTION_DECLARATION):
            sym, dynamic_imports = extract_function(node, ctx.content, ctx.file_path, ctx.walker)
            self._add(ctx, [sym] if sym else [], dynamic_imports)
            return True

        if kind == NodeKind.CLASS_DECLARATION:
            sym, dynamic_imports = extract_class(node, ctx.content, ctx.file_path, ctx.walker)
            self._add(ctx, [sym] if sym else [], dynamic_imports)
            return True

        if kind in (NodeKind.LEXICAL_DECLARATION, NodeKind.VARIABLE_DECLARATION):
            imports, import_symbols = extract_commonjs_imports(node, ctx.content, ctx.file_path)
            self._add(ctx, import_symbols, imports)
            symbols, dynamic_imports = extract_variables(
                node, ctx.content, ctx.file_path, ctx.walker
            )
            self._add(ctx, symbols, dynamic_imports)
            return True

        if kind == NodeKind.EXPRESSION_STATEMENT:
            methods, dynamic_imports, method_func = extract_prototype_methods(
                node, ctx.content, ctx.file_path, ctx.walker, ctx.aliases
            )
            self._add(ctx, methods, dynamic_imports)
            if method_func is not None:
                ctx.owned.add(_node_key(method_func))
            detect_inheritance(node, ctx.content, ctx.symbols)
            ctx.imports.extend(extract_exports_require(node, ctx.content, ctx.file_path))
            return False

        return False

    @staticmethod
    def _add(ctx: _ExtractionContext, symbols: list[Symbol], imports: list[Import]) -> None:
        ctx.symbols.extend(symbols)
        ctx.imports.extend(imports)

    def _extract_export(self, node, ctx: _ExtractionContext) -> None:
        """Extract an export statement.

        Handles exported declarations, ``export default <identifier>``,
        ``export { a, b }`` and the source module of re-exports.
        """
        is_default = any(classify(child) == NodeKind.DEFAULT for child in node.children)
        doc_comment = preceding_doc_comment(node, ctx.content)

        for child in node.children:
            kind = classify(child)
            symbols: list[Symbol] = []
            dynamic_imports: list[Import] = []

            if kind in (NodeKind.FUNCTION_DECLARATION, NodeKind.GENERATOR_FUNCTION_DECLARATION):
                sym, dynamic_imports = extract_function(
                    child, ctx.content, ctx.file_path, ctx.walker, exported=True
                )
                symbols = [sym] if sym else []
            elif kind == NodeKind.CLASS_DECLARATION:
                sym, dynamic_imports = extract_class(
                    child, ctx.content, ctx.file_path, ctx.walker, exported=True
                )
                symbols = [sym] if sym else []
            elif kind in (NodeKind.LEXICAL_DECLARATION, NodeKind.VARIABLE_DECLARATION):
                symbols, dynamic_imports = extract_variables(
                    child, ctx.content, ctx.file_path, ctx.walker, exported=True
                )
            elif kind == NodeKind.IDENTIFIER and is_default:
                sym = self._exported_variable(node, node_text(child, ctx.content), ctx)
                sym.doc_comment = doc_comment
                symbols = [sym]
            elif kind == NodeKind.EXPORT_CLAUSE:
                symbols = self._export_clause_symbols(child, ctx)
            elif kind in (NodeKind.STRING, NodeKind.TEMPLATE_STRING):
                imp = extract_reexport(node, ctx.content, ctx.file_path)
                if imp is not None:
                    dynamic_imports = [imp]

            for sym in symbols:
                sym.exported = True
                if doc_comment and not sym.doc_comment:
                    sym.doc_comment = doc_comment
            self._add(ctx, symbols, dynamic_imports)

    def _export_clause_symbols(self, clause, ctx: _ExtractionContext) -> list[Symbol]:
        symbols = []
        for specifier in clause.children:
            if classify(specifier) != NodeKind.EXPORT_SPECIFIER:
                continue
            for part in specifier.children:
                if classify(part) == NodeKind.IDENTIFIER:
                    symbols.append(
                        self._exported_variable(specifier, node_text(part, ctx.content), ctx)
                    )
                    break
        return symbols

    @staticmethod
    def _exported_variable(node, name: str, ctx: _ExtractionContext) -> Symbol:
        return Symbol(
            id=generate_id(ctx.file_path, start_line(node), name),
            name=name,
            kind=SymbolKind.VARIABLE,
            file_path=ctx.file_path,
            start_line=start_line(node),
            end_line=end_line(node),
            start_col=node.start_point[1],
            end_col=node.end_point[1],
            exported=True,
        )
