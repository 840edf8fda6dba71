"""Tests for the base parser helpers."""

from pathlib import Path

from jsextract.parsing.base import BaseParser
from jsextract.parsing.models import ParseResult


class ConcreteParser(BaseParser):
    """Minimal concrete parser for testing base class methods."""

    def __init__(self):
        self.received = None

    @property
    def supported_extensions(self) -> list[str]:
        return [".test"]

    @property
    def language_name(self) -> str:
        return "test"

    def parse(self, content, file_path, cancel=None):
        self.received = (content, file_path, cancel)
        return ParseResult(file_path=file_path, language="test", hash="h", parsed_at=0)


def test_can_parse_matches_extension():
    """can_parse compares lower-cased suffixes."""
    parser = ConcreteParser()

    assert parser.can_parse(Path("a.test"))
    assert parser.can_parse(Path("dir/B.TEST"))
    assert not parser.can_parse(Path("a.js"))


def test_parse_string_encodes_utf8():
    """parse_string passes UTF-8 bytes and the filename through."""
    parser = ConcreteParser()
    token = object()

    result = parser.parse_string("const ü = 1;", "u.test", token)

    assert parser.received == ("const ü = 1;".encode("utf-8"), "u.test", token)
    assert result.file_path == "u.test"


def test_parse_string_default_filename():
    """Without a filename the result is labelled <string>."""
    parser = ConcreteParser()

    assert parser.parse_string("x").file_path == "<string>"
