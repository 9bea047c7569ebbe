"""
Tests for ConfigResolver.

Tests key functionality including:
- Default environment selection (APP_ENV, then T5)
- Group directory lookup and file formats
- Override precedence
- Memoization and reset
- Name/group consistency
- Process-wide resolve()/reset()
"""

from unittest.mock import Mock

import pytest

from qaharness.config import (
    ConfigResolver,
    EnvironmentGroup,
    get_resolver,
    read_config_file,
    reset,
    resolve,
)
from qaharness.exceptions import ConfigError, ConfigNotFoundError, ConfigValidationError


def _counting_reader():
    return Mock(side_effect=read_config_file)


# =============================================================================
# Selection and lookup
# =============================================================================


@pytest.mark.unit
class TestEnvironmentSelection:
    def test_t3_scenario(self, config_root, write_env, t3_data):
        write_env("T3", t3_data)
        resolver = ConfigResolver(root=config_root, environ={"APP_ENV": "T3"})

        config = resolver.resolve()

        assert config.name == "T3"
        assert config.group is EnvironmentGroup.TEST
        assert config.app.base_url == "https://practicetestautomation.com/practice-test-login/"
        assert config.app.username == "student"
        assert config.app.password == "Password123"
        assert resolver.source == config_root / "test" / "T3.json"

    def test_default_is_t5(self, config_root, write_env, t5_data):
        write_env("T5", t5_data)
        resolver = ConfigResolver(root=config_root, environ={})
        assert resolver.default_env_name() == "T5"
        assert resolver.resolve().name == "T5"

    def test_empty_app_env_falls_back_to_t5(self, config_root):
        assert ConfigResolver(root=config_root, environ={"APP_ENV": ""}).default_env_name() == "T5"

    def test_explicit_name_beats_app_env(self, config_root, write_env, t3_data, qd1_data):
        write_env("T3", t3_data)
        write_env("QD1", qd1_data)
        resolver = ConfigResolver(root=config_root, environ={"APP_ENV": "T3"})
        assert resolver.resolve("QD1").group is EnvironmentGroup.ONPREM

    def test_yaml_file(self, config_root, write_env):
        write_env(
            "D1",
            {"app": {"baseUrl": "http://localhost:3000", "username": "dev", "password": "dev-pass"}},
            ext="yaml",
        )
        config = ConfigResolver(root=config_root, environ={}).resolve("D1")
        assert config.group is EnvironmentGroup.DEV
        assert config.app.base_url == "http://localhost:3000"

    def test_root_from_env_var(self, config_root, write_env, t3_data):
        write_env("T3", t3_data)
        environ = {"QAHARNESS_CONFIG_DIR": str(config_root), "APP_ENV": "T3"}
        assert ConfigResolver(environ=environ).resolve().name == "T3"

    def test_reads_os_environ_by_default(self, config_root, write_env, t3_data, monkeypatch):
        write_env("T3", t3_data)
        monkeypatch.setenv("APP_ENV", "T3")
        monkeypatch.setenv("APP_USERNAME", "from-shell")
        config = ConfigResolver(root=config_root).resolve()
        assert config.app.username == "from-shell"


@pytest.mark.unit
class TestResolutionFailures:
    def test_unknown_environment(self, config_root):
        resolver = ConfigResolver(root=config_root, environ={})
        with pytest.raises(ConfigNotFoundError, match="Unknown environment: X9"):
            resolver.resolve("X9")
        assert not resolver.is_resolved

    def test_missing_file(self, config_root):
        with pytest.raises(ConfigNotFoundError, match="T4.json"):
            ConfigResolver(root=config_root, environ={}).resolve("T4")

    def test_file_in_wrong_group(self, config_root):
        (config_root / "dev" / "T3.json").write_text("{}")
        with pytest.raises(ConfigNotFoundError):
            ConfigResolver(root=config_root, environ={}).resolve("T3")

    def test_missing_base_url_names_field(self, config_root, write_env, t3_data):
        del t3_data["app"]["baseUrl"]
        write_env("T3", t3_data)
        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigResolver(root=config_root, environ={}).resolve("T3")
        assert "app.baseUrl" in exc_info.value.paths

    def test_declared_name_mismatch(self, config_root, write_env, t3_data):
        t3_data["name"] = "T4"
        write_env("T3", t3_data)
        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigResolver(root=config_root, environ={}).resolve("T3")
        assert exc_info.value.paths == ["name"]

    def test_declared_group_mismatch(self, config_root, write_env, t3_data):
        t3_data["group"] = "uat"
        write_env("T3", t3_data)
        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigResolver(root=config_root, environ={}).resolve("T3")
        assert exc_info.value.paths == ["group"]

    def test_name_and_group_may_be_omitted(self, config_root, write_env, t3_data):
        del t3_data["name"]
        del t3_data["group"]
        write_env("T3", t3_data)
        config = ConfigResolver(root=config_root, environ={}).resolve("T3")
        assert (config.name, config.group) == ("T3", EnvironmentGroup.TEST)

    def test_malformed_file(self, config_root):
        (config_root / "test" / "T3.json").write_text("{broken")
        with pytest.raises(ConfigError, match="Failed to parse"):
            ConfigResolver(root=config_root, environ={}).resolve("T3")

    def test_non_utf8_file(self, config_root):
        (config_root / "test" / "T3.json").write_bytes(b'{"app": {"username": "J\xf6rg"}}')
        with pytest.raises(ConfigError, match="Failed to read configuration file .*T3.json"):
            ConfigResolver(root=config_root, environ={}).resolve("T3")

    def test_failure_is_logged(self, config_root, test_lg, log_stream):
        with pytest.raises(ConfigNotFoundError):
            ConfigResolver(test_lg, root=config_root, environ={}).resolve("T4")
        assert "failed to load configuration" in log_stream.getvalue()


# =============================================================================
# Overrides
# =============================================================================


@pytest.mark.unit
class TestOverridePrecedence:
    def test_override_beats_file(self, config_root, write_env, t3_data):
        write_env("T3", t3_data)
        environ = {"APP_PASSWORD": "FromEnv789"}
        config = ConfigResolver(root=config_root, environ=environ).resolve("T3")
        assert config.app.password == "FromEnv789"

    def test_empty_override_keeps_file_value(self, config_root, write_env, t3_data):
        write_env("T3", t3_data)
        config = ConfigResolver(root=config_root, environ={"APP_PASSWORD": ""}).resolve("T3")
        assert config.app.password == "Password123"

    def test_invalid_override_is_a_violation(self, config_root, write_env, qd1_data):
        write_env("QD1", qd1_data)
        resolver = ConfigResolver(root=config_root, environ={"ORACLE_PORT": "abc"})
        with pytest.raises(ConfigValidationError) as exc_info:
            resolver.resolve("QD1")
        assert exc_info.value.paths == ["db.oracle.port"]

    def test_override_for_absent_section_ignored(self, config_root, write_env, t3_data, test_lg, log_stream):
        write_env("T3", t3_data)
        resolver = ConfigResolver(test_lg, root=config_root, environ={"PG_PASSWORD": "pg-pass"})
        config = resolver.resolve("T3")
        assert config.db is None
        assert "PG_PASSWORD" in log_stream.getvalue()

    def test_override_can_fill_missing_required_field(self, config_root, write_env, t3_data):
        del t3_data["app"]["password"]
        write_env("T3", t3_data)
        config = ConfigResolver(root=config_root, environ={"APP_PASSWORD": "injected"}).resolve("T3")
        assert config.app.password == "injected"


# =============================================================================
# Memoization
# =============================================================================


@pytest.mark.unit
class TestMemoization:
    def test_second_resolve_does_not_read(self, config_root, write_env, t3_data):
        write_env("T3", t3_data)
        reader = _counting_reader()
        resolver = ConfigResolver(root=config_root, environ={"APP_ENV": "T3"}, reader=reader)

        first = resolver.resolve()
        second = resolver.resolve()

        assert first is second
        assert reader.call_count == 1

    def test_same_name_returns_cached(self, config_root, write_env, t3_data):
        write_env("T3", t3_data)
        resolver = ConfigResolver(root=config_root, environ={})
        assert resolver.resolve("T3") is resolver.resolve("T3")

    def test_cached_value_ignores_later_env_changes(self, config_root, write_env, t3_data):
        write_env("T3", t3_data)
        environ = {"APP_ENV": "T3"}
        resolver = ConfigResolver(root=config_root, environ=environ)
        resolver.resolve()
        environ["APP_PASSWORD"] = "changed-later"
        assert resolver.resolve().app.password == "Password123"

    def test_reset_forces_reread(self, config_root, write_env, t3_data):
        path = write_env("T3", t3_data)
        reader = _counting_reader()
        resolver = ConfigResolver(root=config_root, environ={"APP_ENV": "T3"}, reader=reader)
        resolver.resolve()

        path.write_text(path.read_text().replace('"student"', '"student2"'))
        resolver.reset()

        assert not resolver.is_resolved
        assert resolver.resolve().app.username == "student2"
        assert reader.call_count == 2

    def test_different_environment_while_cached(self, config_root, write_env, t3_data, qd1_data):
        write_env("T3", t3_data)
        write_env("QD1", qd1_data)
        resolver = ConfigResolver(root=config_root, environ={})
        resolver.resolve("T3")
        with pytest.raises(ConfigError, match="already active") as exc_info:
            resolver.resolve("QD1")
        assert exc_info.value.context == {"active": "T3", "requested": "QD1"}

        resolver.reset()
        assert resolver.resolve("QD1").name == "QD1"

    def test_failed_resolve_is_not_cached(self, config_root, write_env, t3_data):
        resolver = ConfigResolver(root=config_root, environ={})
        with pytest.raises(ConfigNotFoundError):
            resolver.resolve("T3")
        write_env("T3", t3_data)
        assert resolver.resolve("T3").name == "T3"


@pytest.mark.unit
class TestProcessWideResolver:
    def test_resolve_and_reset(self, config_root, write_env, t3_data, monkeypatch):
        write_env("T3", t3_data)
        monkeypatch.setenv("QAHARNESS_CONFIG_DIR", str(config_root))
        monkeypatch.setenv("APP_ENV", "T3")

        config = resolve()
        assert resolve() is config
        assert get_resolver().is_resolved

        reset()
        assert not get_resolver().is_resolved
        assert resolve() is not config
