"""Domain services for certificate issuance."""

from cert_issuer.domain.services.certificate_issuer import CertificateIssuer, check_crypto_backend

__all__ = ["CertificateIssuer", "check_crypto_backend"]
