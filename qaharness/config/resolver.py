"""
Configuration resolver.

Resolution pipeline for one environment name:

1. map the name to its group (unknown names fail with ConfigNotFoundError)
2. locate ``<root>/<group>/<name>.<ext>`` (missing file: ConfigNotFoundError)
3. parse it, overlay process-environment overrides
4. validate, collecting every violation (ConfigValidationError)
5. memoize the result until ``reset()``
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from qaharness.exceptions import ConfigError, Violation

from .constants import DEFAULT_ENV_NAME, ENV_SELECTOR_VAR
from .environments import get_env_group
from .loader import find_config_file, find_config_root, read_config_file
from .overrides import apply_overrides
from .schemas import ResolvedConfig, validate_config

if TYPE_CHECKING:
    from qaharness.log import Logger

Reader = Callable[[Path], dict[str, Any]]


def _identity_violations(
    data: dict[str, Any], env_name: str, group: str
) -> list[Violation]:
    """Check that a file's declared name/group (if any) match the request."""
    violations = []
    declared_name = data.get("name")
    if declared_name is not None and declared_name != env_name:
        violations.append(
            Violation("name", f"file declares '{declared_name}', expected '{env_name}'")
        )
    declared_group = data.get("group")
    if declared_group is not None and declared_group != group:
        violations.append(
            Violation(
                "group",
                f"file declares '{declared_group}', environment {env_name} belongs to '{group}'",
            )
        )
    return violations


class ConfigResolver:
    """
    Resolves and memoizes the configuration of one environment per process.

    The first ``resolve()`` fixes the active environment; later calls return
    the cached object without touching the filesystem. Asking for a
    different environment while one is cached is an error, since exactly one
    environment may be active per process. ``reset()`` clears the cache.

    Example:
        resolver = ConfigResolver(lg)
        config = resolver.resolve()          # APP_ENV or T5
        assert resolver.resolve() is config  # cached
    """

    def __init__(
        self,
        lg: Logger | None = None,
        root: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
        reader: Reader = read_config_file,
    ):
        """
        Initialize the resolver.

        Args:
            lg: Logger (a silent one is used when omitted)
            root: Config root directory; see ``find_config_root`` for the default
            environ: Environment mapping for the selector and overrides
                (defaults to ``os.environ``, read at resolve time)
            reader: Function parsing a config file into a dict
        """
        if lg is None:
            from qaharness.log import null_lg

            lg = null_lg()
        self._lg = lg
        self._root = root
        self._environ = environ
        self._reader = reader
        self._config: ResolvedConfig | None = None
        self._source: Path | None = None

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    @property
    def source(self) -> Path | None:
        """File the cached configuration was read from."""
        return self._source

    @property
    def is_resolved(self) -> bool:
        return self._config is not None

    def default_env_name(self) -> str:
        """Environment named by ``APP_ENV``, or the fixed fallback."""
        return self.environ.get(ENV_SELECTOR_VAR) or DEFAULT_ENV_NAME

    def resolve(self, env_name: str | None = None) -> ResolvedConfig:
        """
        Return the resolved configuration, loading it on first call.

        Args:
            env_name: Environment to load; defaults to ``APP_ENV`` or T5

        Raises:
            ConfigNotFoundError: Unknown environment or missing file
            ConfigValidationError: Merged configuration is invalid
            ConfigError: Other loading errors, or a different environment
                requested while one is already active
        """
        if self._config is not None:
            if env_name is not None and env_name != self._config.name:
                raise ConfigError(
                    f"Environment {self._config.name} is already active; "
                    f"call reset() before resolving {env_name}",
                    active=self._config.name,
                    requested=env_name,
                )
            return self._config

        name = env_name or self.default_env_name()
        self._lg.info("loading configuration", extra={"env": name})
        try:
            config, source = self._load(name)
        except ConfigError as e:
            self._lg.error("failed to load configuration", extra={"env": name, "error": e.message})
            raise

        self._config = config
        self._source = source
        self._lg.info(
            "configuration loaded",
            extra={"env": config.name, "group": config.group.value, "file": source.name},
        )
        return config

    def _load(self, env_name: str) -> tuple[ResolvedConfig, Path]:
        group = get_env_group(env_name)
        root = find_config_root(self._root, self.environ)
        path = find_config_file(root, group, env_name)
        self._lg.debug("reading configuration file", extra={"path": str(path)})

        data = self._reader(path)
        violations = _identity_violations(data, env_name, group.value)

        skipped: list[str] = []
        merged = apply_overrides(data, self.environ, skipped)
        if skipped:
            self._lg.debug(
                "ignored overrides for sections absent from the file",
                extra={"vars": skipped},
            )
        merged["name"] = env_name
        merged["group"] = group.value

        return validate_config(merged, violations), path

    def reset(self) -> None:
        """Forget the cached configuration; the next resolve() re-reads the file."""
        self._config = None
        self._source = None


_default_resolver: ConfigResolver | None = None


def get_resolver() -> ConfigResolver:
    """Process-wide resolver backing ``resolve()`` and ``reset()``."""
    global _default_resolver

    if _default_resolver is None:
        _default_resolver = ConfigResolver()
    return _default_resolver


def resolve(env_name: str | None = None) -> ResolvedConfig:
    """Resolve through the process-wide resolver."""
    return get_resolver().resolve(env_name)


def reset() -> None:
    """Clear the process-wide resolver's cache."""
    global _default_resolver

    if _default_resolver is not None:
        _default_resolver.reset()
    _default_resolver = None
