"""Exceptions raised by the JavaScript parser."""


class ParseError(Exception):
    """Base exception for parse failures."""

    pass


class FileTooLargeError(ParseError):
    """Raised when the input exceeds the configured size limit."""

    pass


class InvalidContentError(ParseError):
    """Raised when the input is not valid UTF-8."""

    pass


class ParseCanceledError(ParseError):
    """Raised when cancellation is observed before or right after tree construction."""

    pass


class TreeConstructionError(ParseError):
    """Raised when tree-sitter cannot produce a syntax tree."""

    pass


class ResultValidationError(ParseError):
    """Raised by ParseResult.validate() when a result is structurally inconsistent."""

    pass
