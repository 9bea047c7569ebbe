"""
Locating and parsing environment configuration files.

Files live at ``<root>/<group>/<name>.<ext>``; JSON and YAML are accepted.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from qaharness.exceptions import ConfigError, ConfigNotFoundError

from .constants import (
    CONFIG_DIR_VAR,
    CONFIG_EXTENSIONS,
    DEFAULT_CONFIG_SUBDIR,
    MAX_CONFIG_SIZE_BYTES,
)
from .environments import EnvironmentGroup


def _check_file_size(path: Path) -> None:
    file_size = os.path.getsize(path)
    if file_size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigError(
            f"Configuration file '{path}' is {file_size} bytes, "
            f"exceeding maximum size of {MAX_CONFIG_SIZE_BYTES} bytes",
            path=str(path),
        )


def find_config_root(
    root: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    start: Path | None = None,
) -> Path:
    """
    Determine the config root directory.

    Precedence: explicit ``root``, then ``QAHARNESS_CONFIG_DIR``, then the
    first ``etc/env`` directory found walking upward from ``start`` (the
    working directory by default).

    Raises:
        ConfigNotFoundError: If no root can be found
    """
    env = os.environ if environ is None else environ
    explicit = root if root is not None else env.get(CONFIG_DIR_VAR) or None
    if explicit is not None:
        path = Path(explicit).expanduser().resolve()
        if not path.is_dir():
            raise ConfigNotFoundError(
                f"Configuration directory not found: {path}", path=str(path)
            )
        return path

    current = (start or Path.cwd()).resolve()
    for parent in (current, *current.parents):
        candidate = parent.joinpath(*DEFAULT_CONFIG_SUBDIR)
        if candidate.is_dir():
            return candidate

    raise ConfigNotFoundError(
        f"Could not find a {'/'.join(DEFAULT_CONFIG_SUBDIR)} directory above {current}; "
        f"set {CONFIG_DIR_VAR} to the configuration root"
    )


def find_config_file(root: Path, group: EnvironmentGroup, env_name: str) -> Path:
    """
    Return the config file for an environment.

    Raises:
        ConfigNotFoundError: If no ``<name>.json|yaml|yml`` exists in the group directory
    """
    directory = root / group.value
    for ext in CONFIG_EXTENSIONS:
        path = directory / f"{env_name}.{ext}"
        if path.is_file():
            return path

    expected = directory / f"{env_name}.{CONFIG_EXTENSIONS[0]}"
    raise ConfigNotFoundError(
        f"Configuration file not found: {expected}", env=env_name, group=group.value
    )


def read_config_file(path: Path) -> dict[str, Any]:
    """
    Parse a JSON or YAML config file into a dict.

    Raises:
        ConfigError: If the file is too large, malformed, or not a mapping
    """
    _check_file_size(path)

    try:
        text = path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as e:
        raise ConfigError(f"Failed to read configuration file {path}: {e}", path=str(path)) from e

    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to parse configuration file {path}: {e}", path=str(path)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration file {path} must contain a mapping, got {type(data).__name__}",
            path=str(path),
        )
    return data
