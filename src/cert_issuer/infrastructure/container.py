"""Dependency injection container for the certificate issuer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from cert_issuer.adapters.outbound import FileCertificateStore, InMemoryCertificateStore
from cert_issuer.domain.services.certificate_issuer import CertificateIssuer
from cert_issuer.infrastructure.config import Config, get_config
from cert_issuer.infrastructure.logging import get_logger, setup_logging
from cert_issuer.infrastructure.metrics import MetricsRegistry, get_metrics
from cert_issuer.infrastructure.tracing import setup_tracing
from cert_issuer.ports.outbound import CertificateStorePort


def create_store(config: Config) -> CertificateStorePort:
    """Build the configured certificate store adapter."""
    if config.store.backend == "memory":
        return InMemoryCertificateStore()
    return FileCertificateStore(config.store.path)


@dataclass
class Container:
    """Dependency injection container for issuer components."""

    config: Config
    metrics: MetricsRegistry
    store: CertificateStorePort
    issuer: CertificateIssuer

    _instance: ClassVar["Container | None"] = None

    @classmethod
    def create(cls, config: Config | None = None) -> "Container":
        """Create and initialize the container with all dependencies.

        An explicit config always builds a fresh container; without one the
        existing instance is reused, or one is built from the environment.
        """
        if config is None and cls._instance is not None:
            return cls._instance

        config = config or get_config()
        setup_logging(config.observability.log_level, config.observability.log_format)
        setup_tracing(config.observability.otel_service_name, config.observability.otel_endpoint)
        store = create_store(config)

        cls._instance = cls(
            config=config,
            metrics=get_metrics(),
            store=store,
            issuer=CertificateIssuer(store),
        )

        get_logger("cert_issuer").debug("container_initialized", store_backend=config.store.backend)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the container (useful for testing)."""
        cls._instance = None
