"""File-based certificate store adapter.

Implements CertificateStorePort with a local keystore directory, for hosts
without an OS-managed certificate store.

Usage:
    store = FileCertificateStore("/var/lib/cert-issuer/store")
    store.install(certificate)
    store.find(SubjectName("CN=test-cert"))

Directory structure:
    root/
        3F2A...9C.cer   (DER, named by thumbprint)
        A01B...77.cer
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from cert_issuer.domain.errors import FileWriteFailed, PrivilegeDenied, StoreOperationFailed
from cert_issuer.domain.services.artifact_files import write_atomic
from cert_issuer.domain.value_objects.identifiers import (
    SubjectName,
    Thumbprint,
    compute_thumbprint,
    subject_of,
)

logger = logging.getLogger(__name__)


class FileCertificateStore:
    """File-based implementation of CertificateStorePort.

    Attributes:
        root: Directory holding one DER file per installed certificate
    """

    ENTRY_SUFFIX = ".cer"

    def __init__(self, root: str | Path) -> None:
        """Initialize file store.

        Args:
            root: Keystore directory (created on first access check)
        """
        self._root = Path(root)

    @property
    def root(self) -> Path:
        """Keystore directory."""
        return self._root

    def _entry_path(self, thumbprint: Thumbprint) -> Path:
        return self._root / f"{thumbprint}{self.ENTRY_SUFFIX}"

    def _iter_entries(self) -> Iterator[tuple[Thumbprint, x509.Certificate]]:
        if not self._root.is_dir():
            return
        for path in sorted(self._root.glob(f"*{self.ENTRY_SUFFIX}")):
            try:
                certificate = x509.load_der_x509_certificate(path.read_bytes())
            except ValueError:
                logger.warning(f"Skipping unreadable store entry {path}")
                continue
            except OSError as e:
                raise StoreOperationFailed(f"Cannot read store entry {path}: {e}") from e
            yield Thumbprint(path.stem), certificate

    def check_access(self) -> None:
        """Create the keystore directory and verify it is writable.

        Raises:
            PrivilegeDenied: If the directory cannot be created or written.
        """
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PrivilegeDenied(f"Cannot create certificate store {self._root}: {e}") from e
        if not os.access(self._root, os.W_OK):
            raise PrivilegeDenied(f"Certificate store {self._root} is not writable")

    def find(self, subject: SubjectName) -> list[Thumbprint]:
        """Find entries by exact subject.

        Args:
            subject: Subject in RFC 4514 form

        Returns:
            Matching thumbprints, in directory order
        """
        return [
            thumbprint
            for thumbprint, certificate in self._iter_entries()
            if subject_of(certificate) == subject
        ]

    def remove(self, thumbprint: Thumbprint) -> None:
        """Delete an entry.

        Args:
            thumbprint: Entry identity

        Raises:
            StoreOperationFailed: If the entry is missing or cannot be deleted
        """
        path = self._entry_path(thumbprint)
        if not path.exists():
            raise StoreOperationFailed(f"No store entry {thumbprint}")
        try:
            path.unlink()
        except OSError as e:
            raise StoreOperationFailed(f"Cannot remove store entry {thumbprint}: {e}") from e

    def install(self, certificate: x509.Certificate) -> Thumbprint:
        """Persist a certificate as a DER entry.

        Args:
            certificate: Certificate to install

        Returns:
            Thumbprint used as the entry name
        """
        thumbprint = compute_thumbprint(certificate)
        try:
            write_atomic(
                self._entry_path(thumbprint),
                certificate.public_bytes(serialization.Encoding.DER),
            )
        except FileWriteFailed as e:
            raise StoreOperationFailed(f"Cannot install {thumbprint}: {e.message}") from e
        return thumbprint

    def entries(self) -> dict[Thumbprint, SubjectName]:
        """Map every installed thumbprint to its subject."""
        return {thumbprint: subject_of(cert) for thumbprint, cert in self._iter_entries()}
