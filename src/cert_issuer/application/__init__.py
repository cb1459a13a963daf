"""Application layer for the certificate issuer."""

from cert_issuer.application.coordinator import IssuanceCoordinator

__all__ = [
    "IssuanceCoordinator",
]
