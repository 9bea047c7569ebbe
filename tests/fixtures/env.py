"""
Environment and configuration-file fixtures.

Every test starts from a process environment without harness variables,
and gets a private config root to write ``<group>/<name>.<ext>`` files into.
"""

import copy
import json
import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import yaml

from qaharness.config import OVERRIDES, reset
from qaharness.config.environments import get_env_group

HARNESS_VARS = [
    "APP_ENV",
    "QAHARNESS_CONFIG_DIR",
    "HEADLESS",
    "BROWSER",
    "SLOW_MO",
    "LOG_LEVEL",
    "LOG_FILE",
    "NO_COLOR",
] + [override.var for override in OVERRIDES]


T3_DATA: dict[str, Any] = {
    "name": "T3",
    "group": "test",
    "app": {
        "baseUrl": "https://practicetestautomation.com/practice-test-login/",
        "username": "student",
        "password": "Password123",
    },
}

QD1_DATA: dict[str, Any] = {
    "name": "QD1",
    "group": "onprem",
    "app": {
        "baseUrl": "https://qd1.corp.example.com",
        "username": "qa_user",
        "password": "onprem-secret",
    },
    "db": {
        "oracle": {
            "host": "qd1-oracle.corp.example.com",
            "port": 1521,
            "serviceName": "QD1SVC",
            "user": "harness",
            "password": "oracle-secret",
        }
    },
    "certs": {
        "client": {
            "pfxPath": "secrets/client.pfx",
            "passphrase": "pfx-passphrase",
            "origin": "https://qd1.corp.example.com",
        }
    },
}

T5_DATA: dict[str, Any] = {
    "app": {
        "baseUrl": "https://www.saucedemo.com",
        "username": "standard_user",
        "password": "secret_sauce",
    },
    "db": {
        "postgres": {
            "host": "t5-postgres.internal",
            "port": 5432,
            "database": "harness_t5",
            "user": "harness",
            "password": "pg-secret",
        }
    },
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Remove harness variables and the process-wide resolver between tests."""
    for var in HARNESS_VARS:
        monkeypatch.delenv(var, raising=False)
    reset()
    yield
    reset()


@pytest.fixture
def config_root(tmp_path: Path) -> Path:
    """Empty config root with the four group directories."""
    root = tmp_path / "env"
    for group in ("dev", "test", "uat", "onprem"):
        (root / group).mkdir(parents=True)
    return root


@pytest.fixture
def write_env(config_root: Path) -> Callable[..., Path]:
    """
    Write an environment file under the config root.

    Usage:
        path = write_env("T3", T3_DATA)
        path = write_env("D1", data, ext="yaml")
    """

    def _write(env_name: str, data: Any, ext: str = "json") -> Path:
        path = config_root / get_env_group(env_name).value / f"{env_name}.{ext}"
        if ext == "json":
            path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def t3_data() -> dict[str, Any]:
    return copy.deepcopy(T3_DATA)


@pytest.fixture
def qd1_data() -> dict[str, Any]:
    return copy.deepcopy(QD1_DATA)


@pytest.fixture
def t5_data() -> dict[str, Any]:
    return copy.deepcopy(T5_DATA)


@pytest.fixture
def isolated_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    """Swap ``os.environ`` for a copy so variables loaded from ``.env`` do not leak."""
    monkeypatch.setattr(os, "environ", os.environ.copy())
