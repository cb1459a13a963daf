"""Configuration management for the certificate issuer.

Values come from three layers, later ones winning field by field:

    defaults -> environment (CERT_ISSUER_CERTIFICATE__NAME, ...) ->
    key/value config file (Certificate.Name=...) -> command-line overrides
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from cert_issuer.domain.entities.certificate import (
    DEFAULT_VALIDITY_DAYS,
    MAX_VALIDITY_DAYS,
    IssuanceRequest,
)
from cert_issuer.domain.errors import ConfigInvalid, ConfigMissing

logger = logging.getLogger(__name__)

# Config-file key (lower-cased) -> (section, field)
FILE_KEYS: dict[str, tuple[str, str]] = {
    "certificate.name": ("certificate", "name"),
    "certificate.format": ("certificate", "format"),
    "certificate.outputformat": ("certificate", "output_format"),
    "certificate.password": ("certificate", "password"),
    "certificate.path": ("certificate", "path"),
    "certificate.validitydays": ("certificate", "validity_days"),
}


class CertificateConfig(BaseModel):
    """Certificate request configuration."""

    name: str | None = Field(default=None)
    format: str | None = Field(default=None)
    output_format: str | None = Field(default=None)
    password: SecretStr = Field(default=SecretStr(""))
    path: Path = Field(default=Path("."))
    validity_days: int = Field(default=DEFAULT_VALIDITY_DAYS, ge=1, le=MAX_VALIDITY_DAYS)


class StoreConfig(BaseModel):
    """Certificate store configuration."""

    backend: Literal["file", "memory"] = Field(default="file")
    path: Path = Field(default_factory=lambda: Path.home() / ".cert_issuer" / "store")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="console")
    otel_endpoint: str | None = Field(default=None)
    otel_service_name: str = Field(default="cert_issuer")
    metrics_textfile: Path | None = Field(default=None)


class Config(BaseSettings):
    """Main configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CERT_ISSUER_",
        env_nested_delimiter="__",
    )

    certificate: CertificateConfig = Field(default_factory=CertificateConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def to_request(self) -> IssuanceRequest:
        """Build the immutable issuance request.

        Raises:
            ConfigMissing: If name or format is not configured.
            InvalidExportFormat: If format is not pfx/cer.
            ConfigInvalid: If another value is unusable.
        """
        cert = self.certificate
        if not cert.name:
            raise ConfigMissing("Certificate.Name is not configured")
        if cert.format is None:
            raise ConfigMissing("Certificate.Format is not configured")
        return IssuanceRequest.from_values(
            name=cert.name,
            export_format=cert.format,
            final_format=cert.output_format,
            password=cert.password.get_secret_value(),
            output_directory=cert.path,
            validity_days=cert.validity_days,
        )


def parse_config_file(path: str | Path) -> dict[str, dict[str, str]]:
    """Parse a ``Key.Name=value`` configuration file.

    Blank lines, ``#``/``;`` comments and ``[section]`` headers are ignored.
    Keys are case-insensitive; unknown keys are logged and skipped.

    Args:
        path: Configuration file.

    Returns:
        Nested values keyed by section then field.

    Raises:
        ConfigMissing: If the file does not exist.
        ConfigInvalid: If the file cannot be read or a line is malformed.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise ConfigMissing(f"Configuration file {path} not found") from e
    except OSError as e:
        raise ConfigInvalid(f"Cannot read configuration file {path}: {e}") from e

    values: dict[str, dict[str, str]] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line[0] in "#;" or (line.startswith("[") and line.endswith("]")):
            continue
        if "=" not in line:
            raise ConfigInvalid(f"{path}:{lineno}: expected 'Key=Value', got {line!r}")

        key, value = (part.strip() for part in line.split("=", 1))
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]

        target = FILE_KEYS.get(key.lower())
        if target is None:
            logger.warning(f"{path}:{lineno}: ignoring unknown key {key!r}")
            continue
        section, field = target
        values.setdefault(section, {})[field] = value
    return values


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, dict[str, Any]] | None = None,
) -> Config:
    """Load configuration from environment, an optional file and overrides.

    Args:
        path: Optional key/value configuration file.
        overrides: Values that win over file and environment (e.g. CLI flags).

    Raises:
        ConfigMissing: If the file does not exist.
        ConfigInvalid: If a value fails validation.
    """
    values: dict[str, dict[str, Any]] = parse_config_file(path) if path is not None else {}
    for section, fields in (overrides or {}).items():
        values.setdefault(section, {}).update(
            {name: value for name, value in fields.items() if value is not None}
        )

    try:
        return Config(**values)
    except ValidationError as e:
        raise ConfigInvalid(f"Invalid configuration: {e}") from e


@lru_cache
def get_config() -> Config:
    """Get the global configuration (environment only)."""
    return load_config()
