"""Unit tests for issuer configuration."""

from pathlib import Path

import pytest

from cert_issuer.domain.entities.certificate import ExportFormat, FinalFormat
from cert_issuer.domain.errors import ConfigInvalid, ConfigMissing, InvalidExportFormat
from cert_issuer.infrastructure.config import (
    CertificateConfig,
    Config,
    ObservabilityConfig,
    StoreConfig,
    load_config,
    parse_config_file,
)

SAMPLE_CONFIG = """\
# Certificate settings
[Certificate]
Certificate.Name=test-cert
Certificate.Format=pfx
certificate.outputformat = PEM
Certificate.Password="Secr3t!"
; output location
Certificate.Path=/tmp/certs
"""


@pytest.fixture
def config_file(tmp_path) -> Path:
    path = tmp_path / "certificate.conf"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path


@pytest.mark.unit
class TestConfigDefaults:
    """Test configuration defaults."""

    def test_certificate_defaults(self):
        config = CertificateConfig()
        assert config.name is None
        assert config.format is None
        assert config.validity_days == 365
        assert config.password.get_secret_value() == ""

    def test_store_defaults(self):
        config = StoreConfig()
        assert config.backend == "file"
        assert config.path.name == "store"

    def test_observability_defaults(self):
        config = ObservabilityConfig()
        assert config.log_level == "INFO"
        assert config.log_format == "console"
        assert config.otel_endpoint is None
        assert config.metrics_textfile is None


@pytest.mark.unit
class TestParseConfigFile:
    """Test key/value configuration file parsing."""

    def test_parses_known_keys(self, config_file):
        values = parse_config_file(config_file)
        assert values == {
            "certificate": {
                "name": "test-cert",
                "format": "pfx",
                "output_format": "PEM",
                "password": "Secr3t!",
                "path": "/tmp/certs",
            }
        }

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigMissing):
            parse_config_file(tmp_path / "absent.conf")

    def test_malformed_line(self, tmp_path):
        path = tmp_path / "bad.conf"
        path.write_text("Certificate.Name test-cert\n", encoding="utf-8")
        with pytest.raises(ConfigInvalid):
            parse_config_file(path)

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "extra.conf"
        path.write_text("Certificate.Name=a\nCertificate.Colour=blue\n", encoding="utf-8")
        assert parse_config_file(path) == {"certificate": {"name": "a"}}

    def test_value_may_contain_equals(self, tmp_path):
        path = tmp_path / "pw.conf"
        path.write_text("Certificate.Password=a=b=c\n", encoding="utf-8")
        assert parse_config_file(path)["certificate"]["password"] == "a=b=c"


@pytest.mark.unit
class TestLoadConfig:
    """Test layered configuration loading."""

    def test_file_to_request(self, config_file):
        request = load_config(config_file).to_request()

        assert request.subject_common_name == "test-cert"
        assert request.export_format is ExportFormat.PFX
        assert request.final_format is FinalFormat.PEM
        assert request.protection_password == "Secr3t!"
        assert request.output_directory == Path("/tmp/certs")

    def test_overrides_win_over_file(self, config_file, tmp_path):
        config = load_config(
            config_file,
            {"certificate": {"format": "cer", "path": tmp_path, "name": None}},
        )
        assert config.certificate.format == "cer"
        assert config.certificate.path == tmp_path
        assert config.certificate.name == "test-cert"

    def test_environment_values(self, monkeypatch):
        monkeypatch.setenv("CERT_ISSUER_CERTIFICATE__NAME", "env-cert")
        monkeypatch.setenv("CERT_ISSUER_CERTIFICATE__FORMAT", "cer")
        monkeypatch.setenv("CERT_ISSUER_STORE__BACKEND", "memory")

        config = load_config()
        assert config.certificate.name == "env-cert"
        assert config.store.backend == "memory"
        assert config.to_request().export_format is ExportFormat.CER

    def test_file_wins_over_environment(self, config_file, monkeypatch):
        monkeypatch.setenv("CERT_ISSUER_CERTIFICATE__NAME", "env-cert")
        assert load_config(config_file).certificate.name == "test-cert"

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "bad.conf"
        path.write_text("Certificate.ValidityDays=soon\n", encoding="utf-8")
        with pytest.raises(ConfigInvalid):
            load_config(path)

    def test_validity_out_of_range(self, tmp_path):
        path = tmp_path / "long.conf"
        path.write_text("Certificate.ValidityDays=3000000\n", encoding="utf-8")
        with pytest.raises(ConfigInvalid):
            load_config(path)

    def test_password_hidden(self, config_file):
        config = load_config(config_file)
        assert "Secr3t!" not in repr(config)


@pytest.mark.unit
class TestToRequest:
    """Test request construction from configuration."""

    def test_missing_name(self):
        config = Config(certificate=CertificateConfig(format="cer"))
        with pytest.raises(ConfigMissing):
            config.to_request()

    def test_missing_format(self):
        config = Config(certificate=CertificateConfig(name="test-cert"))
        with pytest.raises(ConfigMissing):
            config.to_request()

    @pytest.mark.parametrize("fmt", ["der", ""])
    def test_invalid_format(self, fmt):
        config = Config(certificate=CertificateConfig(name="test-cert", format=fmt))
        with pytest.raises(InvalidExportFormat):
            config.to_request()
