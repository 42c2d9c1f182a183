"""
Configuration for migration discovery.

Settings are merged with a clear precedence (environment > .env file >
JSON config file > schema defaults) and validated against ``schema.json``.
"""

from __future__ import annotations

import json
import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator

from .exceptions import ConfigurationError
from .finder import Finder
from .finders import GlobFinder, RecursiveRegexFinder
from .logging_setup import apply_log_level

LOGGER = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.json"


@dataclass
class FinderSettings:
    """Validated finder configuration."""

    directory: str = "migrations"
    namespace: str | None = None
    finder: str = "glob"
    pattern: str | None = None
    log_level: str = "INFO"


def load_schema(schema_path: Path = SCHEMA_PATH) -> dict[str, Any]:
    """Load the settings JSON schema."""
    try:
        with open(schema_path, encoding="utf-8") as f:
            schema = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to load schema: {e}") from e

    if "schema_version" not in schema:
        raise ConfigurationError("Schema missing 'schema_version' field")
    return schema


def parse_env_file(env_path: Path) -> dict[str, str]:
    """Parse a .env file into key-value pairs."""
    env_vars: dict[str, str] = {}
    if not env_path.exists():
        return env_vars

    with open(env_path, encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                LOGGER.warning("Invalid .env line %d: %s", line_num, line)
                continue

            key, value = line.split("=", 1)
            env_vars[key.strip()] = value.strip().strip('"').strip("'")

    return env_vars


def _env_mappings(schema: dict[str, Any]) -> dict[str, str]:
    return {
        prop["env_var"]: key
        for key, prop in schema.get("properties", {}).items()
        if prop.get("env_var")
    }


def _from_env(env: Mapping[str, str], mappings: dict[str, str]) -> dict[str, Any]:
    # Empty strings clear optional keys
    return {key: env[var] or None for var, key in mappings.items() if var in env}


def load_settings(
    config_path: Path | None = None,
    env_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> FinderSettings:
    """
    Load finder settings from defaults, config file, .env file and environment.

    Args:
        config_path: Optional JSON config file
        env_path: Optional .env file
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If a source cannot be read or the result is invalid
    """
    schema = load_schema()
    mappings = _env_mappings(schema)

    merged: dict[str, Any] = {
        key: prop["default"]
        for key, prop in schema["properties"].items()
        if "default" in prop
    }

    if config_path is not None and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load config file: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config file {config_path} must hold a JSON object")
        merged.update(file_config)

    if env_path is not None:
        try:
            merged.update(_from_env(parse_env_file(env_path), mappings))
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Failed to load .env file: {e}") from e

    merged.update(_from_env(os.environ if environ is None else environ, mappings))

    errors = sorted(Draft7Validator(schema).iter_errors(merged), key=lambda e: list(e.path))
    if errors:
        details = "; ".join(
            f"{'.'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}"
            for e in errors
        )
        raise ConfigurationError(f"Configuration validation failed: {details}")

    if merged.get("pattern"):
        try:
            re.compile(merged["pattern"])
        except re.error as e:
            raise ConfigurationError(f"Invalid finder pattern {merged['pattern']!r}: {e}") from e

    LOGGER.debug("Loaded finder settings: %s", merged)
    return FinderSettings(**merged)


def create_finder(settings: FinderSettings) -> Finder:
    """Build the finder selected by the settings."""
    if settings.finder == "recursive":
        return RecursiveRegexFinder(settings.pattern)
    return GlobFinder()


def discover_migrations(settings: FinderSettings) -> dict[str, str]:
    """Find migrations in the configured directory at the configured log level."""
    apply_log_level(settings.log_level)
    finder = create_finder(settings)
    return finder.find_migrations(settings.directory, settings.namespace)
