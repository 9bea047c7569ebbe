"""
pytest plugin wiring the resolved environment into test sessions.

Registered through the ``pytest11`` entry point, so installing the package
is enough. The configuration is resolved once per session; a failure aborts
the session with the resolver's message. Browser fixtures need the
``browser`` extra (playwright) and import it lazily.

Fixtures:
    harness_lg              session logger
    harness_context         EnvironmentContext of the active environment
    harness_config          its ResolvedConfig
    browser_settings        BrowserSettings from HEADLESS/BROWSER/SLOW_MO
    client_certificates     Playwright ``client_certificates`` entries
    harness_browser         launched browser (session)
    harness_browser_context isolated browser context per test
    harness_page            new page per test
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from qaharness.browser import BrowserSettings
from qaharness.certs import build_client_certificate
from qaharness.config import ENV_SELECTOR_VAR, ResolvedConfig
from qaharness.context import EnvironmentContext
from qaharness.exceptions import HarnessError
from qaharness.log import LogConfig, Logger, LoggerFactory, derive_lg

SCREENSHOTS_DIR = Path("test-results") / "screenshots"


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("qaharness", "e2e harness environment")
    group.addoption(
        "--harness-env",
        default=None,
        help=f"Environment to resolve (default: ${ENV_SELECTOR_VAR} or T5)",
    )
    group.addoption(
        "--harness-config-dir",
        default=None,
        help="Config root directory holding <group>/<name>.json files",
    )


def pytest_report_header(config: pytest.Config) -> str:
    env_name = config.getoption("--harness-env") or os.environ.get(ENV_SELECTOR_VAR) or "T5"
    return f"qaharness: environment {env_name}"


@pytest.fixture(scope="session")
def harness_lg() -> Logger:
    return LoggerFactory.create("/harness", LogConfig.from_env())


@pytest.fixture(scope="session")
def harness_context(pytestconfig: pytest.Config, harness_lg: Logger) -> EnvironmentContext:
    try:
        ctx = EnvironmentContext.from_env(
            harness_lg,
            root=pytestconfig.getoption("--harness-config-dir"),
            env_name=pytestconfig.getoption("--harness-env"),
        )
    except HarnessError as e:
        pytest.exit(f"qaharness: {e}", returncode=1)
    ctx.log_summary()
    return ctx


@pytest.fixture(scope="session")
def harness_config(harness_context: EnvironmentContext) -> ResolvedConfig:
    return harness_context.config


@pytest.fixture(scope="session")
def browser_settings() -> BrowserSettings:
    return BrowserSettings.from_env()


@pytest.fixture(scope="session")
def client_certificates(
    pytestconfig: pytest.Config, harness_context: EnvironmentContext, harness_lg: Logger
) -> list[dict[str, str]]:
    """Empty when the environment has no ``certs.client`` section."""
    settings = harness_context.config.client_cert
    if settings is None:
        return []
    cert = build_client_certificate(settings, pytestconfig.rootpath, derive_lg(harness_lg, "certs"))
    cert.check_origin(harness_context.app_url, derive_lg(harness_lg, "certs"))
    return [cert.to_playwright()]


@pytest.fixture(scope="session")
def harness_browser(browser_settings: BrowserSettings) -> Iterator[Any]:
    from playwright.sync_api import sync_playwright

    with sync_playwright() as pw:
        browser_type = getattr(pw, browser_settings.browser_type)
        browser = browser_type.launch(**browser_settings.launch_options())
        yield browser
        browser.close()


@pytest.fixture()
def harness_browser_context(
    harness_browser: Any,
    harness_context: EnvironmentContext,
    client_certificates: list[dict[str, str]],
) -> Iterator[Any]:
    """Isolated context per test: clean cookies and storage, environment timeouts."""
    options: dict[str, Any] = {"base_url": harness_context.app_url, "ignore_https_errors": True}
    if client_certificates:
        options["client_certificates"] = client_certificates
    ctx = harness_browser.new_context(**options)

    timeouts = harness_context.timeouts()
    ctx.set_default_timeout(timeouts.action)
    ctx.set_default_navigation_timeout(timeouts.navigation)
    yield ctx
    ctx.close()


@pytest.fixture()
def harness_page(harness_browser_context: Any) -> Iterator[Any]:
    page = harness_browser_context.new_page()
    yield page
    page.close()


def _screenshot_path(nodeid: str) -> Path:
    name = nodeid.replace("::", "_").replace("/", "_").replace("\\", "_")
    return SCREENSHOTS_DIR / f"{name}.png"


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]) -> Iterator[None]:
    """Capture a screenshot of ``harness_page`` when a test fails."""
    outcome = yield
    report = outcome.get_result()
    if report.when != "call" or not report.failed:
        return

    funcargs = getattr(item, "funcargs", {})
    page = funcargs.get("harness_page")
    ctx = funcargs.get("harness_context")
    if page is None or page.is_closed():
        return
    if ctx is not None and not ctx.is_feature_enabled("screenshotOnFailure"):
        return

    path = _screenshot_path(item.nodeid)
    path.parent.mkdir(parents=True, exist_ok=True)
    page.screenshot(path=str(path))
    report.sections.append(("qaharness", f"screenshot saved: {path}"))
