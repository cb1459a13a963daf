"""Value objects for certificate issuance."""

from cert_issuer.domain.value_objects.identifiers import (
    SubjectName,
    Thumbprint,
    compute_thumbprint,
    create_subject_name,
)
from cert_issuer.domain.value_objects.secrets import SensitiveBytes

__all__ = [
    "SubjectName",
    "Thumbprint",
    "compute_thumbprint",
    "create_subject_name",
    "SensitiveBytes",
]
