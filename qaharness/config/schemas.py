"""
Configuration schema using Pydantic.

Models are frozen; field names are snake_case in Python and camelCase in
the files (``baseUrl``, ``serviceName``, ``pfxPath`` ...). Validation
collects every violation, and ``validate_config`` turns them into a single
``ConfigValidationError``.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from qaharness.exceptions import ConfigValidationError, Violation

from .environments import EnvironmentGroup


def _check_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"'{value}' is not an absolute http(s) URL")
    return value


class _Section(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


Port = StrictInt


class AppSettings(_Section):
    """Application under test."""

    base_url: StrictStr = Field(..., description="Base URL of the application")
    username: StrictStr = Field(..., description="Default username")
    password: StrictStr = Field(..., description="Default password")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        return _check_url(v)


class OracleSettings(_Section):
    """Oracle connection parameters (on-premise environments)."""

    host: StrictStr
    port: Port = Field(..., ge=1, le=65535)
    service_name: StrictStr | None = None
    connect_string: StrictStr | None = None
    user: StrictStr
    password: StrictStr
    pool_min: StrictInt = Field(default=1, ge=0)
    pool_max: StrictInt = Field(default=10, ge=1)
    pool_increment: StrictInt = Field(default=1, ge=1)
    pool_timeout: StrictInt = Field(default=60, ge=1)
    enable_statistics: StrictBool = False

    @model_validator(mode="after")
    def validate_service_or_connect_string(self) -> OracleSettings:
        if not self.service_name and not self.connect_string:
            raise ValueError("Either serviceName or connectString must be provided")
        return self


class PostgresSSLSettings(_Section):
    reject_unauthorized: StrictBool = False
    ca: StrictStr | None = None
    cert: StrictStr | None = None
    key: StrictStr | None = None


class PostgresSettings(_Section):
    """PostgreSQL connection parameters (cloud environments)."""

    host: StrictStr
    port: Port = Field(..., ge=1, le=65535)
    database: StrictStr
    user: StrictStr
    password: StrictStr
    max: StrictInt = Field(default=20, ge=1)
    idle_timeout_millis: StrictInt = Field(default=30000, ge=1)
    connection_timeout_millis: StrictInt = Field(default=2000, ge=1)
    ssl: PostgresSSLSettings | None = None


class DatabaseSettings(_Section):
    oracle: OracleSettings | None = None
    postgres: PostgresSettings | None = None


class ClientCertSettings(_Section):
    """Client certificate for mutual TLS."""

    pfx_path: StrictStr
    passphrase: StrictStr
    origin: StrictStr

    @field_validator("origin")
    @classmethod
    def validate_origin(cls, v: str) -> str:
        return _check_url(v)


class CertSettings(_Section):
    client: ClientCertSettings | None = None


class ResolvedConfig(_Section):
    """
    Validated, immutable configuration of the active environment.

    Example:
        config = resolve("T3")
        config.group            # EnvironmentGroup.TEST
        config.app.base_url     # "https://practicetestautomation.com/..."
    """

    name: StrictStr
    group: EnvironmentGroup
    app: AppSettings
    db: DatabaseSettings | None = None
    certs: CertSettings | None = None

    @property
    def oracle(self) -> OracleSettings | None:
        return self.db.oracle if self.db else None

    @property
    def postgres(self) -> PostgresSettings | None:
        return self.db.postgres if self.db else None

    @property
    def client_cert(self) -> ClientCertSettings | None:
        return self.certs.client if self.certs else None

    @property
    def database_kind(self) -> str:
        """Primary database engine for the group: oracle on-premise, postgres otherwise."""
        return "oracle" if self.group is EnvironmentGroup.ONPREM else "postgres"

    def primary_database(self) -> OracleSettings | PostgresSettings | None:
        return self.oracle if self.database_kind == "oracle" else self.postgres

    def secrets(self) -> list[str]:
        """All configured passwords and passphrases."""
        values = [self.app.password]
        if self.oracle:
            values.append(self.oracle.password)
        if self.postgres:
            values.append(self.postgres.password)
        if self.client_cert:
            values.append(self.client_cert.passphrase)
        return values

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping in file layout (camelCase keys, unset optional sections omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _loc_to_path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def violations_from_error(error: ValidationError) -> list[Violation]:
    """Convert every pydantic error into a Violation with a dotted alias path."""
    return [
        Violation(path=_loc_to_path(err["loc"]), reason=err["msg"])
        for err in error.errors(include_url=False)
    ]


def validate_config(
    data: dict[str, Any], extra_violations: list[Violation] | None = None
) -> ResolvedConfig:
    """
    Validate a merged configuration mapping.

    Args:
        data: Merged configuration mapping (camelCase keys)
        extra_violations: Violations found before schema validation; they
            are reported together with the schema errors

    Returns:
        Validated ResolvedConfig

    Raises:
        ConfigValidationError: Listing every violation found
    """
    violations = list(extra_violations or [])
    config: ResolvedConfig | None = None
    try:
        config = ResolvedConfig.model_validate(data)
    except ValidationError as e:
        violations.extend(violations_from_error(e))

    if violations or config is None:
        raise ConfigValidationError(
            f"Invalid configuration ({len(violations)} violation(s))",
            violations,
            env=data.get("name"),
        )
    return config
