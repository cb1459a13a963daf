"""Outbound ports - interfaces to the certificate trust store.

The issuer only needs to find certificates by subject, remove them by
identity, and install a new one. Hosts with an OS-managed store plug in an
adapter for it; everything else uses a local keystore directory or an
in-memory store.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from cryptography import x509

from cert_issuer.domain.value_objects.identifiers import SubjectName, Thumbprint


# =============================================================================
# Certificate Store Port
# =============================================================================


class CertificateStorePort(Protocol):
    """Protocol for certificate trust-store operations.

    Entries are identified by thumbprint. A store may hold several entries
    with the same subject; the issuer removes all of them before installing
    a replacement.

    Thread Safety:
        Not required. The issuer is single-shot and single-threaded.
    """

    @abstractmethod
    def check_access(self) -> None:
        """Verify the store can be mutated by this process.

        Raises:
            PrivilegeDenied: If the store is read-only for this process.
        """
        ...

    @abstractmethod
    def find(self, subject: SubjectName) -> list[Thumbprint]:
        """List entries whose subject matches exactly.

        Args:
            subject: Subject in RFC 4514 form (``CN=<name>``).

        Returns:
            Thumbprints of matching entries, possibly empty.

        Raises:
            StoreOperationFailed: If the store cannot be read.
        """
        ...

    @abstractmethod
    def remove(self, thumbprint: Thumbprint) -> None:
        """Remove one entry.

        Args:
            thumbprint: Identity of the entry.

        Raises:
            StoreOperationFailed: If the entry is missing or cannot be deleted.
        """
        ...

    @abstractmethod
    def install(self, certificate: x509.Certificate) -> Thumbprint:
        """Install a certificate.

        Args:
            certificate: Certificate to add.

        Returns:
            Thumbprint of the new entry.

        Raises:
            StoreOperationFailed: If the certificate cannot be stored.
        """
        ...
