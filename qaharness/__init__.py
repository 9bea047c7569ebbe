from importlib.metadata import PackageNotFoundError, version

from .browser import BrowserSettings
from .certs import ClientCertificate, build_client_certificate
from .config import ConfigResolver, EnvironmentGroup, ResolvedConfig, reset, resolve
from .context import EnvironmentContext
from .exceptions import (
    CertificateError,
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    HarnessError,
    Violation,
)

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("qaharness")
except PackageNotFoundError:
    # Package not installed, use fallback (development mode)
    __version__ = "0.1.0-dev"

__all__ = [
    "__version__",
    # Resolution
    "resolve",
    "reset",
    "ConfigResolver",
    "ResolvedConfig",
    "EnvironmentGroup",
    # Context
    "EnvironmentContext",
    "BrowserSettings",
    "ClientCertificate",
    "build_client_certificate",
    # Exceptions
    "HarnessError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "CertificateError",
    "Violation",
]
