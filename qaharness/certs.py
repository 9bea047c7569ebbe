"""
Client certificate descriptors for mutual TLS.

Turns the ``certs.client`` configuration section into the entry Playwright
expects in ``client_certificates``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from qaharness.exceptions import CertificateError

if TYPE_CHECKING:
    from qaharness.config import ClientCertSettings
    from qaharness.log import Logger


SETUP_INSTRUCTIONS = """\
Setup instructions:
1. Place your client certificate (.pfx file) in the secrets/ directory
2. Set PFX_PASSPHRASE in your .env file
3. Ensure the certificate is valid and not expired
4. Verify the origin matches your API endpoint

Example .env configuration:
PFX_PASSPHRASE=your_certificate_passphrase
PFX_PATH=secrets/client.pfx"""


def _origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}".lower()


@dataclass(frozen=True)
class ClientCertificate:
    """Resolved client certificate ready to hand to a browser context."""

    origin: str
    pfx_path: Path
    passphrase: str

    def to_playwright(self) -> dict[str, str]:
        """Entry for ``browser.new_context(client_certificates=[...])``."""
        return {
            "origin": self.origin,
            "pfxPath": str(self.pfx_path),
            "passphrase": self.passphrase,
        }

    def matches(self, target: str) -> bool:
        """True when ``target`` has the same scheme and host as the configured origin."""
        return _origin(target) == _origin(self.origin)

    def check_origin(self, target: str, lg: Logger) -> bool:
        """Warn when ``target`` is not served under the configured origin."""
        if self.matches(target):
            return True
        lg.warning(
            "certificate origin mismatch, authentication may fail",
            extra={"configured": self.origin, "target": target},
        )
        return False


def resolve_pfx_path(pfx_path: str, base_dir: str | Path) -> Path:
    """Absolute paths are kept; relative ones are anchored at ``base_dir``."""
    path = Path(pfx_path).expanduser()
    if not path.is_absolute():
        path = Path(base_dir) / path
    return path.resolve()


def build_client_certificate(
    settings: ClientCertSettings, base_dir: str | Path, lg: Logger
) -> ClientCertificate:
    """
    Build the client certificate descriptor from configuration.

    Args:
        settings: The ``certs.client`` section
        base_dir: Directory relative ``pfxPath`` values are resolved against
        lg: Logger

    Returns:
        ClientCertificate with an absolute PFX path

    Raises:
        CertificateError: PFX file missing, not a file or empty
    """
    path = resolve_pfx_path(settings.pfx_path, base_dir)

    if not path.is_file():
        problem = f"PFX certificate file not found: {path}"
    elif path.stat().st_size == 0:
        problem = f"PFX certificate file is empty: {path}"
    else:
        problem = None

    if problem is not None:
        lg.error("certificate validation failed", extra={"path": str(path)})
        raise CertificateError(
            f"Failed to load client certificate: {problem}\n\n{SETUP_INSTRUCTIONS}",
            path=str(path),
        )

    lg.info("using client certificate", extra={"path": str(path), "origin": settings.origin})
    return ClientCertificate(origin=settings.origin, pfx_path=path, passphrase=settings.passphrase)
