"""Shared pytest fixtures for all tests."""

import pytest

from jsextract.config import CONFIG_ENV_VAR, ParserConfig, load_settings
from jsextract.parsing.javascript_parser import JavaScriptParser


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    """Isolate every test from the caller's JSEXTRACT_CONFIG and cached settings."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


@pytest.fixture
def parser():
    """JavaScript parser with default limits."""
    return JavaScriptParser(ParserConfig())
