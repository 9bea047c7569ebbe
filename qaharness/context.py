"""
Environment context handed to every harness collaborator.

The process entry point builds one EnvironmentContext and passes it to page
objects, API clients and fixtures, instead of those components looking the
configuration up themselves.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import find_dotenv, load_dotenv

from qaharness.config import ConfigResolver, EnvironmentGroup, ResolvedConfig
from qaharness.log import derive_lg
from qaharness.security import get_masker

if TYPE_CHECKING:
    from qaharness.log import Logger


BASE_TIMEOUTS_MS = {
    "navigation": 30000,
    "action": 10000,
    "assertion": 5000,
    "api": 15000,
    "database": 30000,
}

TIMEOUT_MULTIPLIERS = {
    EnvironmentGroup.DEV: 1.5,
    EnvironmentGroup.TEST: 1.0,
    EnvironmentGroup.UAT: 1.2,
    EnvironmentGroup.ONPREM: 2.0,
}


@dataclass(frozen=True)
class Timeouts:
    """Per-kind timeouts in milliseconds."""

    navigation: int
    action: int
    assertion: int
    api: int
    database: int


@dataclass(frozen=True)
class RetrySettings:
    max_retries: int
    retry_delay_ms: int
    exponential_backoff: bool


RETRY_SETTINGS = {
    EnvironmentGroup.DEV: RetrySettings(1, 1000, False),
    EnvironmentGroup.TEST: RetrySettings(2, 2000, True),
    EnvironmentGroup.UAT: RetrySettings(3, 3000, True),
    EnvironmentGroup.ONPREM: RetrySettings(3, 5000, True),
}


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str


class EnvironmentContext:
    """
    Resolved configuration plus group-derived run settings.

    Example:
        ctx = EnvironmentContext.from_env(lg)
        page.goto(ctx.app_url)
        page.set_default_timeout(ctx.timeouts().action)
    """

    def __init__(self, config: ResolvedConfig, lg: Logger, source: Path | None = None):
        """
        Args:
            config: Validated configuration of the active environment
            lg: Parent logger; the context logs through a derived "env" logger
            source: File the configuration was read from, for display
        """
        self._config = config
        self._lg = derive_lg(lg, "env")
        self._source = source
        get_masker().register_config(config)

    @classmethod
    def from_env(
        cls,
        lg: Logger,
        root: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
        env_name: str | None = None,
        dotenv: bool = True,
    ) -> EnvironmentContext:
        """
        Build the context at process start.

        Loads ``.env`` from the working directory (existing variables win)
        unless ``dotenv`` is False or an explicit ``environ`` is given, then
        resolves the configuration.

        Raises:
            ConfigNotFoundError, ConfigValidationError: Resolution failed
        """
        if dotenv and environ is None:
            load_dotenv(find_dotenv(usecwd=True), override=False)
        resolver = ConfigResolver(derive_lg(lg, "config"), root=root, environ=environ)
        config = resolver.resolve(env_name)
        return cls(config, lg, resolver.source)

    @property
    def config(self) -> ResolvedConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def group(self) -> EnvironmentGroup:
        return self._config.group

    @property
    def source(self) -> Path | None:
        return self._source

    @property
    def app_url(self) -> str:
        return self._config.app.base_url

    @property
    def credentials(self) -> Credentials:
        return Credentials(self._config.app.username, self._config.app.password)

    def is_onprem(self) -> bool:
        return self.group is EnvironmentGroup.ONPREM

    def is_cloud(self) -> bool:
        return not self.is_onprem()

    def is_production_like(self) -> bool:
        return self.group in (EnvironmentGroup.UAT, EnvironmentGroup.ONPREM)

    def is_development_like(self) -> bool:
        return self.group in (EnvironmentGroup.DEV, EnvironmentGroup.TEST)

    def timeouts(self) -> Timeouts:
        """Base timeouts scaled by the group multiplier."""
        multiplier = TIMEOUT_MULTIPLIERS[self.group]
        return Timeouts(**{k: int(v * multiplier) for k, v in BASE_TIMEOUTS_MS.items()})

    def retry_settings(self) -> RetrySettings:
        return RETRY_SETTINGS[self.group]

    def _feature_flags(self) -> dict[str, bool]:
        group = self.group
        return {
            "debugMode": group is EnvironmentGroup.DEV,
            "verboseLogging": group is EnvironmentGroup.DEV,
            "parallelExecution": group is EnvironmentGroup.TEST,
            "screenshotOnFailure": True,
            "videoRecording": group is not EnvironmentGroup.DEV,
            "performanceMonitoring": group is EnvironmentGroup.UAT,
            "oracleDatabase": self.is_onprem(),
            "clientCertificates": True,
            "postgresDatabase": self.is_cloud(),
            "awsIntegration": self.is_cloud(),
        }

    def is_feature_enabled(self, feature: str) -> bool:
        """Group-derived feature flag; unknown features are disabled."""
        return self._feature_flags().get(feature, False)

    def tags(self) -> list[str]:
        """Scenario tags matching this environment, e.g. ``@test @t3 @cloud @postgres``."""
        tags = [f"@{self.group.value}", f"@{self.name.lower()}"]
        if self.is_onprem():
            tags += ["@onprem", "@oracle"]
        else:
            tags += ["@cloud", "@postgres"]
        return tags

    def check_completeness(self) -> list[str]:
        """
        Report optional sections this environment is expected to have but lacks.

        Schema validation already guarantees the present sections are well
        formed; this covers what the group implies (Oracle on-premise,
        PostgreSQL in the cloud, a client certificate everywhere).
        """
        gaps = []
        if self._config.primary_database() is None:
            kind = "Oracle" if self._config.database_kind == "oracle" else "PostgreSQL"
            gaps.append(f"{kind} database configuration is missing (db.{self._config.database_kind})")
        if self._config.client_cert is None:
            gaps.append("Client certificate configuration is missing (certs.client)")
        return gaps

    def log_summary(self) -> None:
        """Log the environment banner."""
        config = self._config
        self._lg.info("environment", extra={"env": config.name, "group": config.group.value})
        self._lg.info("application", extra={"url": config.app.base_url, "user": config.app.username})
        database = config.primary_database()
        if database is not None:
            self._lg.info(
                "database",
                extra={"kind": config.database_kind, "host": f"{database.host}:{database.port}"},
            )
        if config.client_cert is not None:
            self._lg.info("client certificate", extra={"origin": config.client_cert.origin})
        for gap in self.check_completeness():
            self._lg.warning(gap)
