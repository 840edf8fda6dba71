"""Data models for extracted symbols, imports and call sites."""

from dataclasses import dataclass, field
from enum import Enum

from jsextract.parsing.errors import ResultValidationError


class SymbolKind(Enum):
    """Kinds of declared entities the extractor produces."""

    FUNCTION = "function"
    CLASS = "class"
    METHOD = "method"
    FIELD = "field"
    PROPERTY = "property"  # Class field initialized with a function
    VARIABLE = "variable"
    CONSTANT = "constant"
    IMPORT = "import"
    INTERFACE = "interface"  # Never produced for JavaScript


# Kinds that may carry call sites
CALLABLE_KINDS = frozenset(
    {SymbolKind.FUNCTION, SymbolKind.METHOD, SymbolKind.PROPERTY, SymbolKind.CLASS}
)


def generate_id(file_path: str, line: int, qualified_name: str) -> str:
    """Build a symbol ID that is stable for unchanged content.

    Args:
        file_path: Path of the file the symbol lives in.
        line: 1-based declaration line.
        qualified_name: Bare name, or "Type.member" for members.

    Returns:
        The symbol ID.
    """
    return f"{file_path}:{line}:{qualified_name}"


@dataclass
class Location:
    """A source span. Lines are 1-based, columns 0-based."""

    file_path: str
    start_line: int
    end_line: int
    start_col: int = 0
    end_col: int = 0


@dataclass
class CallSite:
    """An invocation found inside a symbol body."""

    target: str
    location: Location
    receiver: str | None = None  # "this", "obj", or a namespace for new ns.X()
    is_method: bool = False
    function_args: list[str] = field(default_factory=list)


@dataclass
class MethodSignature:
    """A method exposed by a class, as listed in class metadata."""

    name: str
    signature: str = ""


@dataclass
class SymbolMetadata:
    """Optional per-symbol flags."""

    is_async: bool = False
    is_generator: bool = False
    is_static: bool = False
    is_constructor: bool = False
    access_modifier: str | None = None
    extends: str | None = None
    methods: list[MethodSignature] = field(default_factory=list)


@dataclass
class Symbol:
    """A declared entity (function, class, method, field, variable, import)."""

    id: str
    name: str
    kind: SymbolKind
    file_path: str
    start_line: int
    end_line: int
    start_col: int = 0
    end_col: int = 0
    language: str = "javascript"
    signature: str = ""
    doc_comment: str = ""
    exported: bool = False
    receiver: str | None = None  # Owning type for methods and fields
    children: list["Symbol"] = field(default_factory=list)
    calls: list[CallSite] = field(default_factory=list)
    metadata: SymbolMetadata | None = None

    def ensure_metadata(self) -> SymbolMetadata:
        """Return the symbol's metadata, creating it if absent."""
        if self.metadata is None:
            self.metadata = SymbolMetadata()
        return self.metadata


@dataclass
class Import:
    """A module dependency reference."""

    path: str
    location: Location
    alias: str | None = None
    names: list[str] = field(default_factory=list)
    is_default: bool = False
    is_namespace: bool = False
    is_module: bool = False
    is_common_js: bool = False
    is_dynamic: bool = False
    is_relative: bool = False


@dataclass
class ParseResult:
    """Everything extracted from one file."""

    file_path: str
    language: str
    hash: str
    parsed_at: int  # Epoch milliseconds
    symbols: list[Symbol] = field(default_factory=list)
    imports: list[Import] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def find_symbol(self, name: str, kind: SymbolKind | None = None) -> Symbol | None:
        """Return the first top-level symbol with the given name (and kind)."""
        for sym in self.symbols:
            if sym.name == name and (kind is None or sym.kind == kind):
                return sym
        return None

    def symbols_of_kind(self, kind: SymbolKind) -> list[Symbol]:
        """Return top-level symbols of the given kind, in declaration order."""
        return [sym for sym in self.symbols if sym.kind == kind]

    def validate(self) -> None:
        """Check the structure of the assembled result.

        Raises:
            ResultValidationError: Describing the first violation found.
        """
        if not self.file_path:
            raise ResultValidationError("file_path is empty")
        if not self.language:
            raise ResultValidationError("language is empty")
        if not self.hash:
            raise ResultValidationError("hash is empty")

        for sym in self.symbols:
            _validate_symbol(sym, self.file_path, parent=None)

        for imp in self.imports:
            if not imp.path:
                raise ResultValidationError(f"import at line {imp.location.start_line} has no path")
            _validate_location(imp.location, f"import {imp.path!r}")


def _validate_symbol(sym: Symbol, file_path: str, parent: Symbol | None) -> None:
    label = f"symbol {sym.name!r}" if sym.name else "symbol"
    if not sym.id:
        raise ResultValidationError(f"{label} has no id")
    if not sym.name:
        raise ResultValidationError(f"symbol {sym.id!r} has no name")
    if sym.file_path != file_path:
        raise ResultValidationError(
            f"{label} belongs to {sym.file_path!r}, expected {file_path!r}"
        )
    if sym.start_line < 1:
        raise ResultValidationError(f"{label} has start_line {sym.start_line}")
    if sym.end_line < sym.start_line:
        raise ResultValidationError(
            f"{label} ends at line {sym.end_line} before it starts at {sym.start_line}"
        )
    if sym.start_col < 0 or sym.end_col < 0:
        raise ResultValidationError(f"{label} has a negative column")
    if sym.children and sym.kind != SymbolKind.CLASS:
        raise ResultValidationError(f"{label} is a {sym.kind.value} but has children")
    if parent is not None and sym.children:
        raise ResultValidationError(f"{label} is nested more than one level deep")

    for call in sym.calls:
        if not call.target:
            raise ResultValidationError(f"{label} has a call site with an empty target")
        _validate_location(call.location, f"call {call.target!r} in {label}")

    for child in sym.children:
        _validate_symbol(child, file_path, parent=sym)


def _validate_location(location: Location, label: str) -> None:
    if location.start_line < 1 or location.end_line < location.start_line:
        raise ResultValidationError(
            f"{label} has invalid lines {location.start_line}-{location.end_line}"
        )
