"""Certificate identifiers (type-safe).

Uses Python's NewType for compile-time type safety without runtime overhead.
"""

from __future__ import annotations

import hashlib
from typing import NewType

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.x509.oid import NameOID

# Subject in RFC 4514 form, e.g. "CN=test-cert"
SubjectName = NewType("SubjectName", str)
# Upper-case hex SHA-1 over the DER encoding, as certificate stores display it
Thumbprint = NewType("Thumbprint", str)

_FORBIDDEN_NAME_CHARS = frozenset('/\\:*?"<>|\x00')


def create_subject_name(common_name: str) -> SubjectName:
    """Create the subject distinguished name for a common name.

    Args:
        common_name: Certificate common name (e.g., "test-cert").

    Returns:
        Subject in ``CN=<name>`` form.
    """
    return SubjectName(build_x509_name(common_name).rfc4514_string())


def build_x509_name(common_name: str) -> x509.Name:
    """Build the single-attribute X.509 name used for subject and issuer."""
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def subject_of(certificate: x509.Certificate) -> SubjectName:
    """Return the RFC 4514 subject of a certificate."""
    return SubjectName(certificate.subject.rfc4514_string())


def compute_thumbprint(certificate: x509.Certificate) -> Thumbprint:
    """Compute the thumbprint of a certificate.

    Args:
        certificate: Certificate to fingerprint.

    Returns:
        Upper-case hex SHA-1 digest of the DER encoding.
    """
    der = certificate.public_bytes(serialization.Encoding.DER)
    return Thumbprint(hashlib.sha1(der).hexdigest().upper())


def is_valid_common_name(common_name: str) -> bool:
    """Check that a common name is non-empty and usable as a file name stem."""
    if not common_name or not common_name.strip():
        return False
    if common_name in (".", ".."):
        return False
    return not any(ch in _FORBIDDEN_NAME_CHARS for ch in common_name)
