"""Certificate issuance entities.

Represents the immutable issuance request, the in-memory issued certificate,
the files written for it, and the summary record persisted beside them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa

from cert_issuer.domain.errors import ConfigInvalid, ConfigMissing, InvalidExportFormat
from cert_issuer.domain.value_objects.identifiers import (
    SubjectName,
    Thumbprint,
    create_subject_name,
    is_valid_common_name,
)

KEY_LENGTH_BITS = 4096
PUBLIC_EXPONENT = 65537
SIGNATURE_DIGEST = "sha256"
DEFAULT_VALIDITY_DAYS = 365
# Keeps not-after well inside the X.509 GeneralizedTime range (year 9999)
MAX_VALIDITY_DAYS = 36500

PRIVATE_KEY_FILENAME = "privkey.pem"
SUMMARY_FILENAME = "SSLInfo.txt"
EXPIRATION_DATE_FORMAT = "%m/%d/%Y"


class ExportFormat(Enum):
    """Native export format written by the issuer."""
    PFX = "pfx"  # Certificate + encrypted private key
    CER = "cer"  # DER certificate only

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: object) -> ExportFormat:
        """Parse a configured format value (case-insensitive).

        Raises:
            InvalidExportFormat: If value is not ``pfx`` or ``cer``.
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower() if value is not None else ""
        for member in cls:
            if member.value == normalized:
                return member
        raise InvalidExportFormat(
            f"Invalid certificate format {value!r}: expected 'pfx' or 'cer'"
        )


class FinalFormat(Enum):
    """Final on-disk format after conversion."""
    NATIVE = "native"
    PEM = "pem"

    @classmethod
    def parse(cls, value: object) -> FinalFormat:
        """Anything other than ``pem`` (including unset) keeps the native format."""
        if isinstance(value, cls):
            return value
        if value is not None and str(value).strip().lower() == cls.PEM.value:
            return cls.PEM
        return cls.NATIVE


@dataclass(frozen=True)
class IssuanceRequest:
    """Everything the issuer needs for one run.

    Key length and signature digest are fixed and cannot be passed in.
    """
    subject_common_name: str
    export_format: ExportFormat
    final_format: FinalFormat
    protection_password: str = field(repr=False)
    output_directory: Path
    validity_days: int = DEFAULT_VALIDITY_DAYS
    key_length_bits: int = field(default=KEY_LENGTH_BITS, init=False)
    signature_digest: str = field(default=SIGNATURE_DIGEST, init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.export_format, ExportFormat):
            raise InvalidExportFormat(
                f"Invalid certificate format {self.export_format!r}: expected 'pfx' or 'cer'"
            )
        if not is_valid_common_name(self.subject_common_name):
            raise ConfigInvalid(
                f"Invalid certificate name {self.subject_common_name!r}: "
                "must be non-empty and usable as a file name"
            )
        if not 1 <= self.validity_days <= MAX_VALIDITY_DAYS:
            raise ConfigInvalid(
                f"Validity must be between 1 and {MAX_VALIDITY_DAYS} days, got {self.validity_days}"
            )
        if (
            self.final_format == FinalFormat.PEM
            and f"{self.subject_common_name}.pem".lower() == PRIVATE_KEY_FILENAME.lower()
        ):
            # Case-insensitive filesystems would still map both to one file
            raise ConfigInvalid(
                f"Certificate name {self.subject_common_name!r} collides with {PRIVATE_KEY_FILENAME}"
            )
        if self.needs_private_key and not self.protection_password:
            raise ConfigMissing("Certificate.Password is required for PFX export or PEM output")
        object.__setattr__(self, "output_directory", Path(self.output_directory))

    @classmethod
    def from_values(
        cls,
        name: str,
        export_format: object,
        final_format: object = None,
        password: str = "",
        output_directory: str | Path = ".",
        validity_days: int = DEFAULT_VALIDITY_DAYS,
    ) -> IssuanceRequest:
        """Build a request from raw configuration values.

        Raises:
            InvalidExportFormat: If export_format is not pfx/cer.
            ConfigInvalid: If another value is unusable.
        """
        return cls(
            subject_common_name=name,
            export_format=ExportFormat.parse(export_format),
            final_format=FinalFormat.parse(final_format),
            protection_password=password,
            output_directory=Path(output_directory),
            validity_days=validity_days,
        )

    @property
    def subject(self) -> SubjectName:
        return create_subject_name(self.subject_common_name)

    @property
    def needs_private_key(self) -> bool:
        """Whether a password-protected PFX is produced (final or intermediate)."""
        return self.export_format == ExportFormat.PFX or self.final_format == FinalFormat.PEM

    @property
    def native_path(self) -> Path:
        return self.output_directory / f"{self.subject_common_name}.{self.export_format.extension}"

    @property
    def pem_certificate_path(self) -> Path:
        return self.output_directory / f"{self.subject_common_name}.pem"

    @property
    def private_key_path(self) -> Path:
        return self.output_directory / PRIVATE_KEY_FILENAME

    @property
    def summary_path(self) -> Path:
        return self.output_directory / SUMMARY_FILENAME


@dataclass
class IssuedCertificate:
    """Freshly generated self-signed certificate, held only in memory."""
    certificate: x509.Certificate
    thumbprint: Thumbprint
    subject: SubjectName
    private_key: Optional[rsa.RSAPrivateKey] = field(default=None, repr=False)

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self.certificate.public_key()

    @property
    def not_before(self) -> datetime:
        return self.certificate.not_valid_before_utc

    @property
    def not_after(self) -> datetime:
        return self.certificate.not_valid_after_utc

    @property
    def has_private_key(self) -> bool:
        return self.private_key is not None

    @property
    def expiration_date(self) -> str:
        """Not-after date as ``MM/dd/yyyy`` (UTC)."""
        return self.not_after.strftime(EXPIRATION_DATE_FORMAT)


@dataclass(frozen=True)
class ExportArtifact:
    """Final files produced by one run."""
    certificate_path: Path
    private_key_path: Optional[Path] = None

    @property
    def files(self) -> tuple[Path, ...]:
        if self.private_key_path is None:
            return (self.certificate_path,)
        return (self.certificate_path, self.private_key_path)


@dataclass(frozen=True)
class SummaryRecord:
    """Three-line summary: certificate path, private-key path, expiration date."""
    certificate_path: Path
    expiration_date: str
    private_key_path: Optional[Path] = None

    @classmethod
    def for_artifact(cls, artifact: ExportArtifact, issued: IssuedCertificate) -> SummaryRecord:
        return cls(
            certificate_path=artifact.certificate_path,
            private_key_path=artifact.private_key_path,
            expiration_date=issued.expiration_date,
        )

    def to_text(self) -> str:
        """Render the record; an absent key path is an empty line."""
        key_line = str(self.private_key_path) if self.private_key_path else ""
        return f"{self.certificate_path}\n{key_line}\n{self.expiration_date}\n"

    @classmethod
    def from_text(cls, text: str) -> SummaryRecord:
        """Parse a record previously produced by ``to_text``.

        Raises:
            ValueError: If the text does not hold exactly three lines.
        """
        lines = text.splitlines()
        if len(lines) != 3:
            raise ValueError(f"Summary record must have 3 lines, got {len(lines)}")
        cert_line, key_line, expiration = lines
        return cls(
            certificate_path=Path(cert_line),
            private_key_path=Path(key_line) if key_line else None,
            expiration_date=expiration,
        )


@dataclass(frozen=True)
class IssuanceResult:
    """Everything one issuance run hands back for display."""
    certificate: IssuedCertificate
    artifact: ExportArtifact
    summary: SummaryRecord
