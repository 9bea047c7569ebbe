"""
Rendering of resolved configuration for ``qaharness show``.

Three formats:
- yaml: human-readable (default)
- json: for programmatic consumption
- flat: ``key=value`` lines for shell scripts and grep
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from qaharness.exceptions import ConfigError

FORMATS = ("yaml", "json", "flat")

SECRET_KEYS = frozenset({"password", "passphrase"})

# Keys masked only inside a given parent section
SECTION_SECRET_KEYS = {"ssl": frozenset({"key"})}


def mask_secrets(data: dict[str, Any], mask: str, section: str = "") -> dict[str, Any]:
    """Copy of ``data`` with passwords, passphrases and SSL private keys replaced by ``mask``."""
    secret_keys = SECRET_KEYS | SECTION_SECRET_KEYS.get(section, frozenset())
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            result[key] = mask_secrets(value, mask, key)
        elif key in secret_keys and value is not None:
            result[key] = mask
        else:
            result[key] = value
    return result


def select_section(data: dict[str, Any], section: str) -> dict[str, Any]:
    """
    Narrow ``data`` to a dotted section such as ``app`` or ``db.postgres``.

    A leaf value is returned as a one-key mapping.

    Raises:
        ConfigError: Section not present in the configuration
    """
    current: Any = data
    for part in section.split("."):
        if not isinstance(current, dict) or part not in current:
            raise ConfigError(f"Section not found: {section}", section=section)
        current = current[part]

    if isinstance(current, dict):
        return current
    return {section.split(".")[-1]: current}


def flatten(data: dict[str, Any], prefix: str = "") -> list[tuple[str, str]]:
    """Recursively flatten a mapping to ``(dotted.key, value)`` pairs."""
    result: list[tuple[str, str]] = []
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            result.extend(flatten(value, full_key))
        elif value is None:
            result.append((full_key, ""))
        elif isinstance(value, bool):
            result.append((full_key, str(value).lower()))
        else:
            result.append((full_key, str(value)))
    return result


def render(data: dict[str, Any], fmt: str = "yaml") -> str:
    if fmt == "json":
        return json.dumps(data, indent=2, sort_keys=False)
    if fmt == "flat":
        return "\n".join(f"{key}={value}" for key, value in flatten(data))
    result: str = yaml.safe_dump(
        data,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=2,
    )
    return result.rstrip()
