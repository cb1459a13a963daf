"""Pytest configuration and shared fixtures for certificate issuer tests."""

import logging
from datetime import datetime, timezone

import pytest
import structlog
from cryptography.hazmat.primitives.asymmetric import rsa

from cert_issuer.adapters.outbound import InMemoryCertificateStore
from cert_issuer.domain.entities.certificate import KEY_LENGTH_BITS, IssuanceRequest
from cert_issuer.domain.services.certificate_issuer import CertificateIssuer, generate_rsa_key
from cert_issuer.infrastructure.config import get_config
from cert_issuer.infrastructure.container import Container

FIXED_NOW = datetime(2025, 5, 8, 9, 30, 15, 123456, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_container():
    """Reset the DI container and root log handlers around each test."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    Container.reset()
    get_config.cache_clear()
    yield
    Container.reset()
    get_config.cache_clear()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    """One 4096-bit key shared by the whole session (generation is slow)."""
    return generate_rsa_key(KEY_LENGTH_BITS)


@pytest.fixture
def key_factory(rsa_key):
    """Key factory that hands out the session key and records requested sizes."""
    requested: list[int] = []

    def factory(key_size: int) -> rsa.RSAPrivateKey:
        requested.append(key_size)
        return rsa_key

    factory.requested = requested
    return factory


@pytest.fixture
def store() -> InMemoryCertificateStore:
    """Provide an empty in-memory certificate store."""
    return InMemoryCertificateStore()


@pytest.fixture
def fixed_now() -> datetime:
    """Issuance time used by the issuer fixture."""
    return FIXED_NOW


@pytest.fixture
def issuer(store, key_factory) -> CertificateIssuer:
    """Provide an issuer with a fixed clock and the shared key."""
    return CertificateIssuer(store, key_factory=key_factory, clock=lambda: FIXED_NOW)


@pytest.fixture
def output_dir(tmp_path):
    """Output directory that does not exist yet."""
    return tmp_path / "certs"


@pytest.fixture
def make_request(output_dir):
    """Build issuance requests with sensible defaults."""

    def _make(
        name: str = "test-cert",
        export_format: str = "pfx",
        final_format: str | None = "pem",
        password: str = "Secr3t!",
        **kwargs,
    ) -> IssuanceRequest:
        return IssuanceRequest.from_values(
            name=name,
            export_format=export_format,
            final_format=final_format,
            password=password,
            output_directory=kwargs.pop("output_directory", output_dir),
            **kwargs,
        )

    return _make


# Pytest markers
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
