"""In-memory certificate store adapter.

A simple in-memory implementation of CertificateStorePort for testing and
for hosts where installing into a store is not wanted. Entries are lost
when the process exits.
"""

from __future__ import annotations

from cryptography import x509

from cert_issuer.domain.errors import PrivilegeDenied, StoreOperationFailed
from cert_issuer.domain.value_objects.identifiers import (
    SubjectName,
    Thumbprint,
    compute_thumbprint,
    subject_of,
)


class InMemoryCertificateStore:
    """In-memory implementation of CertificateStorePort."""

    def __init__(self, read_only: bool = False) -> None:
        """Initialize empty store.

        Args:
            read_only: Simulate a store this process may not modify
        """
        self._certificates: dict[Thumbprint, x509.Certificate] = {}
        self._read_only = read_only

    def check_access(self) -> None:
        if self._read_only:
            raise PrivilegeDenied("Certificate store is read-only")

    def find(self, subject: SubjectName) -> list[Thumbprint]:
        return [
            thumbprint
            for thumbprint, certificate in self._certificates.items()
            if subject_of(certificate) == subject
        ]

    def remove(self, thumbprint: Thumbprint) -> None:
        if thumbprint not in self._certificates:
            raise StoreOperationFailed(f"No store entry {thumbprint}")
        del self._certificates[thumbprint]

    def install(self, certificate: x509.Certificate) -> Thumbprint:
        thumbprint = compute_thumbprint(certificate)
        self._certificates[thumbprint] = certificate
        return thumbprint

    def get(self, thumbprint: Thumbprint) -> x509.Certificate | None:
        """Return an installed certificate, or None if absent."""
        return self._certificates.get(thumbprint)

    def __len__(self) -> int:
        return len(self._certificates)
