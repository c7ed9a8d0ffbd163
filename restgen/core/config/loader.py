"""
Configuration loader — reads restgen.yml into a GenerationConfig.

This is the primary entry point for loading generation configuration.
It reads YAML, resolves relative paths against the config file's
directory, validates against the Pydantic model, and returns an
immutable GenerationConfig.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from restgen.core.models.generation import GenerationConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "restgen.yml"

# Keys holding a single path / a list of paths
_PATH_KEYS = ("idl_dir", "snapshot_dir", "isolated_classpath_dir")
_PATH_LIST_KEYS = ("codegen_classpath", "resolver_path", "input_dirs")


class ConfigError(Exception):
    """Raised when generation configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for restgen.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to restgen.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _resolve(base_dir: Path, value: Any) -> Path:
    path = Path(str(value)).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path


def _resolve_paths(data: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    """Resolve every path-valued key relative to base_dir."""
    resolved = dict(data)

    for key in _PATH_KEYS:
        if resolved.get(key) is not None:
            resolved[key] = _resolve(base_dir, resolved[key])

    for key in _PATH_LIST_KEYS:
        value = resolved.get(key)
        if value is None:
            resolved.pop(key, None)
            continue
        if isinstance(value, (str, Path)):
            value = [value]
        if not isinstance(value, list):
            raise ConfigError(f"'{key}' must be a list of paths, got {type(value).__name__}")
        resolved[key] = [_resolve(base_dir, v) for v in value]

    return resolved


def load_config_data(data: dict[str, Any], base_dir: Path) -> GenerationConfig:
    """Validate an already-parsed mapping into a GenerationConfig.

    Args:
        data: Raw mapping (as read from YAML).
        base_dir: Directory that relative paths are resolved against.

    Raises:
        ConfigError: If the mapping does not describe a valid config.
    """
    # The YAML may wrap everything under a "restgen" key or be flat
    if "restgen" in data and isinstance(data["restgen"], dict):
        data = data["restgen"]

    # "apis: null" reads as "no api items"
    if data.get("apis") is None:
        data = {k: v for k, v in data.items() if k != "apis"}

    payload = _resolve_paths(data, base_dir)
    payload["base_dir"] = base_dir

    try:
        return GenerationConfig.model_validate(payload)
    except Exception as e:
        raise ConfigError(f"Invalid generation configuration: {e}") from e


def load_config(path: Path | None = None) -> GenerationConfig:
    """Load and validate generation configuration.

    Args:
        path: Explicit path to restgen.yml. If None, searches upward.

    Returns:
        Validated GenerationConfig.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        raise ConfigError(f"No {CONFIG_FILE} found. Create one, or specify --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading generation config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    config = load_config_data(data, path.parent.resolve())
    logger.info(
        "Loaded generation config '%s' with %d api item(s)",
        config.task_name,
        len(config.apis),
    )
    return config
