"""Base parser interface."""

from abc import ABC, abstractmethod
from pathlib import Path

from jsextract.parsing.cancellation import CancelToken
from jsextract.parsing.models import ParseResult


class BaseParser(ABC):
    """Abstract base class for language-specific parsers."""

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """File extensions this parser handles (e.g., ['.js'])."""
        pass

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Language identifier recorded on results."""
        pass

    @abstractmethod
    def parse(
        self, content: bytes, file_path: str, cancel: CancelToken | None = None
    ) -> ParseResult:
        """Parse file content and extract symbols.

        Args:
            content: Raw file bytes.
            file_path: Path recorded on symbols and imports.
            cancel: Optional cancellation token.

        Returns:
            ParseResult with extracted symbols and imports.

        Raises:
            ParseError: If the input is rejected or no tree can be built.
        """
        pass

    def parse_string(
        self, code: str, filename: str = "<string>", cancel: CancelToken | None = None
    ) -> ParseResult:
        """Parse source text instead of raw bytes.

        Args:
            code: Source code.
            filename: Path recorded on the result.
            cancel: Optional cancellation token.

        Returns:
            ParseResult for the encoded text.
        """
        return self.parse(code.encode("utf-8"), filename, cancel)

    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the given file.

        Args:
            file_path: Path to check.

        Returns:
            True if this parser supports the file extension.
        """
        return file_path.suffix.lower() in self.supported_extensions
