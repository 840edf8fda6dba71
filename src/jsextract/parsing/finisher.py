"""Post-traversal passes over the extracted top-level symbols."""

import copy
import logging

from jsextract.parsing.declarations import collect_class_methods
from jsextract.parsing.models import Symbol, SymbolKind, generate_id

logger = logging.getLogger(__name__)

_CLASS_LIKE_KINDS = frozenset({SymbolKind.CLASS, SymbolKind.INTERFACE})
_ALIAS_VARIABLE_KINDS = frozenset({SymbolKind.VARIABLE, SymbolKind.CONSTANT})
_MEMBER_KINDS = frozenset({SymbolKind.METHOD, SymbolKind.FUNCTION, SymbolKind.PROPERTY})


def mark_alias_exports(symbols: list[Symbol], aliases: dict[str, str]) -> None:
    """Mark top-level symbols named by a module export alias as exported.

    Aliases are found before the declarations they name are extracted, so
    ``function View() {}`` followed by ``module.exports = View`` is only
    recognized here.
    """
    for sym in symbols:
        if not sym.exported and sym.name in aliases:
            sym.exported = True


def emit_synthetic_classes(symbols: list[Symbol], aliases: dict[str, str], file_path: str) -> None:
    """Append a Class symbol for each module export type with no declaration.

    Alias variables are visited in sorted order, so when several aliases share
    a type name the alphabetically first one supplies the class location.
    Methods with a matching receiver are copied in as children.

    Args:
        symbols: Top-level symbols; modified in place.
        aliases: Module export alias map (variable name -> type name).
        file_path: File path for the synthetic IDs.
    """
    emitted: set[str] = set()
    for var_name in sorted(aliases):
        type_name = aliases[var_name]
        if type_name in emitted:
            continue
        if any(sym.name == type_name and sym.kind in _CLASS_LIKE_KINDS for sym in symbols):
            continue

        anchor = next(
            (
                sym
                for sym in symbols
                if sym.name == var_name and sym.kind in _ALIAS_VARIABLE_KINDS
            ),
            None,
        )
        if anchor is not None:
            span = (anchor.start_line, anchor.end_line, anchor.start_col, anchor.end_col)
        else:
            span = (1, 1, 0, 0)

        children = [
            copy.deepcopy(sym)
            for sym in symbols
            if sym.receiver == type_name and sym.kind in _MEMBER_KINDS
        ]

        synthetic = Symbol(
            id=generate_id(file_path, span[0], type_name),
            name=type_name,
            kind=SymbolKind.CLASS,
            file_path=file_path,
            start_line=span[0],
            end_line=span[1],
            start_col=span[2],
            end_col=span[3],
            doc_comment=f"Synthetic class derived from module.exports alias '{var_name}'.",
            exported=True,
            children=children,
        )
        collect_class_methods(synthetic)
        symbols.append(synthetic)
        emitted.add(type_name)

        logger.debug(
            f"Synthetic class {type_name} in {file_path} from alias {var_name!r} "
            f"with {len(children)} members"
        )


def filter_private(symbols: list[Symbol]) -> list[Symbol]:
    """Drop non-exported top-level symbols, keeping imports."""
    return [sym for sym in symbols if sym.exported or sym.kind == SymbolKind.IMPORT]
