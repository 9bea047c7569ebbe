"""
Environment configuration resolution.

This package provides:
- the environment name to group table
- file lookup under ``<root>/<group>/<name>.json|yaml|yml``
- process-environment overrides for credentials and endpoints
- Pydantic schema validation reporting every violation
- ConfigResolver with memoization, plus process-wide ``resolve``/``reset``
"""

from .constants import (
    CONFIG_DIR_VAR,
    DEFAULT_ENV_NAME,
    ENV_SELECTOR_VAR,
    MAX_CONFIG_SIZE_BYTES,
)
from .environments import (
    ENV_GROUP_MAP,
    EnvironmentGroup,
    get_env_group,
    is_onprem,
    known_environments,
)
from .loader import find_config_file, find_config_root, read_config_file
from .overrides import OVERRIDES, apply_overrides, collect_overrides
from .resolver import ConfigResolver, get_resolver, reset, resolve
from .schemas import (
    AppSettings,
    CertSettings,
    ClientCertSettings,
    DatabaseSettings,
    OracleSettings,
    PostgresSettings,
    ResolvedConfig,
    validate_config,
)

__all__ = [
    # Resolution
    "ConfigResolver",
    "resolve",
    "reset",
    "get_resolver",
    # Environments
    "EnvironmentGroup",
    "ENV_GROUP_MAP",
    "get_env_group",
    "is_onprem",
    "known_environments",
    # Files
    "find_config_root",
    "find_config_file",
    "read_config_file",
    # Overrides
    "OVERRIDES",
    "apply_overrides",
    "collect_overrides",
    # Schema
    "ResolvedConfig",
    "AppSettings",
    "DatabaseSettings",
    "OracleSettings",
    "PostgresSettings",
    "CertSettings",
    "ClientCertSettings",
    "validate_config",
    # Constants
    "CONFIG_DIR_VAR",
    "DEFAULT_ENV_NAME",
    "ENV_SELECTOR_VAR",
    "MAX_CONFIG_SIZE_BYTES",
]
