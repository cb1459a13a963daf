"""Outbound adapters - implementations of the certificate store port.

Provides a keystore-directory store and an in-memory store for tests and
hosts without an OS-managed certificate store.
"""

from cert_issuer.adapters.outbound.file_store import FileCertificateStore
from cert_issuer.adapters.outbound.memory_store import InMemoryCertificateStore

__all__ = ["FileCertificateStore", "InMemoryCertificateStore"]
