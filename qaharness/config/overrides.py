"""
Process-environment overrides for configuration values.

Each recognised variable maps to one dotted path in the configuration. An
override applies only when the variable is set and non-empty.
"""

from __future__ import annotations

import copy
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any


def _to_port(value: str) -> int | str:
    # Non-numeric values pass through so validation can report them
    try:
        return int(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class Override:
    """A single environment variable to config path binding."""

    var: str
    path: tuple[str, ...]
    convert: Callable[[str], Any] | None = None

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


OVERRIDES: tuple[Override, ...] = (
    Override("APP_BASE_URL", ("app", "baseUrl")),
    Override("APP_USERNAME", ("app", "username")),
    Override("APP_PASSWORD", ("app", "password")),
    Override("ORACLE_HOST", ("db", "oracle", "host")),
    Override("ORACLE_PORT", ("db", "oracle", "port"), _to_port),
    Override("ORACLE_SERVICE_NAME", ("db", "oracle", "serviceName")),
    Override("ORACLE_USER", ("db", "oracle", "user")),
    Override("ORACLE_PASSWORD", ("db", "oracle", "password")),
    Override("POSTGRES_HOST", ("db", "postgres", "host")),
    Override("POSTGRES_PORT", ("db", "postgres", "port"), _to_port),
    Override("POSTGRES_DATABASE", ("db", "postgres", "database")),
    Override("POSTGRES_USER", ("db", "postgres", "user")),
    Override("PG_PASSWORD", ("db", "postgres", "password")),
    Override("PFX_PATH", ("certs", "client", "pfxPath")),
    Override("PFX_PASSPHRASE", ("certs", "client", "passphrase")),
    Override("CERT_ORIGIN", ("certs", "client", "origin")),
)

# Sections that always exist in a valid config; overrides may create them
_REQUIRED_SECTIONS = {("app",)}


def collect_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """
    Return the overrides that would apply, keyed by dotted path.

    Example:
        >>> collect_overrides({"PG_PASSWORD": "s3cret", "ORACLE_PORT": ""})
        {'db.postgres.password': 's3cret'}
    """
    env = os.environ if environ is None else environ
    result: dict[str, Any] = {}
    for override in OVERRIDES:
        value = env.get(override.var)
        if not value:
            continue
        result[override.dotted] = override.convert(value) if override.convert else value
    return result


def _section(data: dict[str, Any], path: tuple[str, ...]) -> dict[str, Any] | None:
    """Walk to the parent mapping of ``path``; None if an optional section is absent."""
    current = data
    section_path = path[:-1]
    for i, part in enumerate(section_path):
        child = current.get(part)
        if not isinstance(child, dict):
            if section_path[: i + 1] not in _REQUIRED_SECTIONS or child is not None:
                return None
            child = current[part] = {}
        current = child
    return current


def apply_overrides(
    data: dict[str, Any],
    environ: Mapping[str, str] | None = None,
    skipped: list[str] | None = None,
) -> dict[str, Any]:
    """
    Overlay environment overrides onto a config mapping.

    The input is not modified. Overrides targeting an optional section
    (``db.oracle``, ``db.postgres``, ``certs.client``) that the file does
    not define are skipped; their variable names are appended to ``skipped``
    when a list is given.

    Args:
        data: Parsed file contents
        environ: Environment mapping (defaults to ``os.environ``)
        skipped: Optional list collecting names of skipped variables

    Returns:
        New mapping with overrides applied
    """
    env = os.environ if environ is None else environ
    merged = copy.deepcopy(data)

    for override in OVERRIDES:
        value = env.get(override.var)
        if not value:
            continue
        section = _section(merged, override.path)
        if section is None:
            if skipped is not None:
                skipped.append(override.var)
            continue
        section[override.path[-1]] = override.convert(value) if override.convert else value

    return merged
