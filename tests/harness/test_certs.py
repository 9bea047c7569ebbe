"""Tests for client certificate descriptors."""

import pytest

from qaharness.certs import ClientCertificate, build_client_certificate, resolve_pfx_path
from qaharness.config.schemas import ClientCertSettings
from qaharness.exceptions import CertificateError


def _settings(pfx_path="secrets/client.pfx", origin="https://api.example.com"):
    return ClientCertSettings(pfx_path=pfx_path, passphrase="pfx-pass", origin=origin)


@pytest.fixture
def pfx_file(tmp_path):
    path = tmp_path / "secrets" / "client.pfx"
    path.parent.mkdir()
    path.write_bytes(b"\x30\x82\x01\x00fake-pkcs12")
    return path


@pytest.mark.unit
class TestResolvePfxPath:
    def test_relative_anchored_at_base_dir(self, tmp_path):
        assert resolve_pfx_path("secrets/client.pfx", tmp_path) == tmp_path / "secrets" / "client.pfx"

    def test_absolute_kept(self, tmp_path):
        absolute = tmp_path / "elsewhere" / "c.pfx"
        assert resolve_pfx_path(str(absolute), "/unused") == absolute


@pytest.mark.unit
class TestBuildClientCertificate:
    def test_builds_playwright_entry(self, tmp_path, pfx_file, test_lg):
        cert = build_client_certificate(_settings(), tmp_path, test_lg)
        assert cert.pfx_path == pfx_file
        assert cert.to_playwright() == {
            "origin": "https://api.example.com",
            "pfxPath": str(pfx_file),
            "passphrase": "pfx-pass",
        }

    def test_logs_path_not_passphrase(self, tmp_path, pfx_file, test_lg, log_stream):
        build_client_certificate(_settings(), tmp_path, test_lg)
        output = log_stream.getvalue()
        assert "using client certificate" in output
        assert "pfx-pass" not in output

    def test_missing_file(self, tmp_path, test_lg):
        with pytest.raises(CertificateError) as exc_info:
            build_client_certificate(_settings(), tmp_path, test_lg)
        message = exc_info.value.message
        assert "PFX certificate file not found" in message
        assert "Setup instructions" in message
        assert "PFX_PASSPHRASE" in message
        assert exc_info.value.context["path"] == str(tmp_path / "secrets" / "client.pfx")

    def test_empty_file(self, tmp_path, test_lg):
        path = tmp_path / "empty.pfx"
        path.touch()
        with pytest.raises(CertificateError, match="is empty"):
            build_client_certificate(_settings(pfx_path=str(path)), tmp_path, test_lg)

    def test_directory_is_not_a_certificate(self, tmp_path, test_lg):
        (tmp_path / "secrets" / "client.pfx").mkdir(parents=True)
        with pytest.raises(CertificateError, match="not found"):
            build_client_certificate(_settings(), tmp_path, test_lg)


@pytest.mark.unit
class TestCheckOrigin:
    @pytest.fixture
    def cert(self, pfx_file):
        return ClientCertificate("https://api.example.com", pfx_file, "pfx-pass")

    def test_matching_origin(self, cert, test_lg, log_stream):
        assert cert.check_origin("https://api.example.com/v1/users", test_lg)
        assert "mismatch" not in log_stream.getvalue()

    def test_host_case_ignored(self, cert):
        assert cert.matches("https://API.example.com")

    def test_mismatch_warns(self, cert, test_lg, log_stream):
        assert not cert.check_origin("https://other.example.com", test_lg)
        output = log_stream.getvalue()
        assert "certificate origin mismatch" in output
        assert "[target:https://other.example.com]" in output

    def test_scheme_matters(self, cert):
        assert not cert.matches("http://api.example.com")
