"""Certificate Issuer domain layer."""

from cert_issuer.domain.entities.certificate import (
    ExportArtifact,
    ExportFormat,
    FinalFormat,
    IssuanceRequest,
    IssuanceResult,
    IssuedCertificate,
    SummaryRecord,
)
from cert_issuer.domain.errors import (
    ConfigInvalid,
    ConfigMissing,
    FileWriteFailed,
    InvalidExportFormat,
    IssuanceError,
    KeyExtractionFailed,
    PrivilegeDenied,
    StoreOperationFailed,
    ToolUnavailable,
)
from cert_issuer.domain.services.certificate_issuer import CertificateIssuer
from cert_issuer.domain.value_objects.identifiers import (
    SubjectName,
    Thumbprint,
    compute_thumbprint,
    create_subject_name,
)
from cert_issuer.domain.value_objects.secrets import SensitiveBytes

__all__ = [
    # Value objects
    "SubjectName",
    "Thumbprint",
    "compute_thumbprint",
    "create_subject_name",
    "SensitiveBytes",
    # Entities
    "ExportArtifact",
    "ExportFormat",
    "FinalFormat",
    "IssuanceRequest",
    "IssuanceResult",
    "IssuedCertificate",
    "SummaryRecord",
    # Errors
    "IssuanceError",
    "ToolUnavailable",
    "PrivilegeDenied",
    "ConfigMissing",
    "ConfigInvalid",
    "InvalidExportFormat",
    "StoreOperationFailed",
    "FileWriteFailed",
    "KeyExtractionFailed",
    # Services
    "CertificateIssuer",
]
