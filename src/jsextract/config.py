# src/jsextract/config.py
"""Configuration system for jsextract.

This module handles loading parser settings from an INI file named by the
JSEXTRACT_CONFIG environment variable, validating them against a schema and
falling back to the defaults in ``jsextract.constants`` when a value is
absent.
"""

from configparser import ConfigParser
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional
import os

from jsextract.constants import (
    CANCEL_CHECK_INTERVAL,
    MAX_CALL_EXPRESSION_DEPTH,
    MAX_CALL_SITES_PER_SYMBOL,
    MAX_FILE_SIZE_BYTES,
)

CONFIG_ENV_VAR = "JSEXTRACT_CONFIG"


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# Schema: section -> key -> (type, default, min, max, description)
CONFIG_SCHEMA: dict[str, dict[str, tuple[type, Any, Any, Any, str]]] = {
    "parser": {
        "max_file_size_bytes": (
            int,
            MAX_FILE_SIZE_BYTES,
            1,
            None,
            "Inputs larger than this are rejected",
        ),
        "include_private": (bool, True, None, None, "Keep non-exported top-level symbols"),
        "max_call_sites_per_symbol": (
            int,
            MAX_CALL_SITES_PER_SYMBOL,
            1,
            100_000,
            "Hard cap on call sites collected per body",
        ),
        "max_call_expression_depth": (
            int,
            MAX_CALL_EXPRESSION_DEPTH,
            1,
            1000,
            "Deepest node visited below a body root",
        ),
        "cancel_check_interval": (
            int,
            CANCEL_CHECK_INTERVAL,
            1,
            100_000,
            "Nodes visited between cancellation polls",
        ),
    },
}


@dataclass(frozen=True)
class ParserConfig:
    """Extraction limits and policy flags."""

    max_file_size_bytes: int = MAX_FILE_SIZE_BYTES
    include_private: bool = True
    max_call_sites_per_symbol: int = MAX_CALL_SITES_PER_SYMBOL
    max_call_expression_depth: int = MAX_CALL_EXPRESSION_DEPTH
    cancel_check_interval: int = CANCEL_CHECK_INTERVAL


@dataclass(frozen=True)
class Config:
    """Complete application configuration."""

    parser: ParserConfig = None  # type: ignore[assignment]  # Set in __post_init__ if None
    source_path: Optional[Path] = None

    def __post_init__(self):
        """Initialize section configs with defaults if not provided."""
        if self.parser is None:
            parser_values = {
                key: default for key, (_, default, _, _, _) in CONFIG_SCHEMA["parser"].items()
            }
            object.__setattr__(self, "parser", ParserConfig(**parser_values))


def _read_option(parser: ConfigParser, section: str, key: str, typ: type) -> Any:
    """Read one option with the ConfigParser getter matching its schema type."""
    if typ is bool:
        return parser.getboolean(section, key)
    if typ is int:
        return parser.getint(section, key)
    if typ is float:
        return parser.getfloat(section, key)
    return parser.get(section, key)


def _load_section(
    parser: ConfigParser, section: str, schema: dict[str, tuple[type, Any, Any, Any, str]]
) -> dict[str, Any]:
    """Load and validate a configuration section.

    Absent keys take their schema default. Booleans accept the spellings
    ConfigParser understands (true/false, yes/no, on/off, 1/0).

    Raises:
        ConfigError: If a value has the wrong type or is out of range.
    """
    result = {}

    for key, (typ, default, min_val, max_val, _) in schema.items():
        value = default
        if parser.has_option(section, key):
            try:
                value = _read_option(parser, section, key, typ)
            except ValueError as e:
                raw_value = parser.get(section, key)
                raise ConfigError(
                    f"Invalid value for [{section}].{key}: {raw_value!r} (expected {typ.__name__})"
                ) from e

        # Range limits are for counts and sizes, never flags
        if typ in (int, float):
            if min_val is not None and value < min_val:
                raise ConfigError(
                    f"Value for [{section}].{key} is {value}, but minimum is {min_val}"
                )
            if max_val is not None and value > max_val:
                raise ConfigError(
                    f"Value for [{section}].{key} is {value}, but maximum is {max_val}"
                )

        result[key] = value

    return result


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from an INI file.

    Args:
        config_path: Path to config file. If None or missing, uses schema defaults.

    Returns:
        Config object with all sections populated.

    Raises:
        ConfigError: If validation fails.
    """
    parser = ConfigParser()

    source_path = None
    if config_path and config_path.exists():
        parser.read(config_path)
        source_path = config_path

    parser_values = _load_section(parser, "parser", CONFIG_SCHEMA["parser"])

    return Config(parser=ParserConfig(**parser_values), source_path=source_path)


@lru_cache(maxsize=1)
def load_settings() -> Config:
    """Load settings from the config file named in the environment.

    Settings are cached for the lifetime of the process.
    Use load_settings.cache_clear() to reload settings.

    Returns:
        Config populated from JSEXTRACT_CONFIG, or defaults when it is unset.

    Raises:
        ConfigError: If the file contains invalid values.
    """
    config_path_str = os.getenv(CONFIG_ENV_VAR)
    if not config_path_str:
        return load_config(None)
    return load_config(Path(config_path_str))
