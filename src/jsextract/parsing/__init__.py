"""Code parsing utilities."""

from jsextract.parsing.models import (
    CallSite,
    Import,
    Location,
    MethodSignature,
    ParseResult,
    Symbol,
    SymbolKind,
    SymbolMetadata,
)
from jsextract.parsing.errors import (
    FileTooLargeError,
    InvalidContentError,
    ParseCanceledError,
    ParseError,
    ResultValidationError,
    TreeConstructionError,
)
from jsextract.parsing.base import BaseParser
from jsextract.parsing.javascript_parser import JavaScriptParser

__all__ = [
    "CallSite",
    "Import",
    "Location",
    "MethodSignature",
    "ParseResult",
    "Symbol",
    "SymbolKind",
    "SymbolMetadata",
    "ParseError",
    "FileTooLargeError",
    "InvalidContentError",
    "ParseCanceledError",
    "ResultValidationError",
    "TreeConstructionError",
    "BaseParser",
    "JavaScriptParser",
]
