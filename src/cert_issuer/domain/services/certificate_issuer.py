"""Self-signed certificate issuance and multi-format export.

Generates an RSA key pair, signs a certificate with it, and writes the
result as PFX, CER or PEM:

    validate -> pre-flight -> replace store entries -> generate ->
    export -> (convert to PEM) -> install -> summary

The request is validated before the store is touched, so an invalid export
format never destroys an existing certificate. The new certificate is
installed only after its files are written.

References:
    - RFC 5280 (X.509 PKI)
    - RFC 7292 (PKCS #12)
    - RFC 7468 (PEM textual encoding)
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable, Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import ExtendedKeyUsageOID

from cert_issuer.domain.entities.certificate import (
    PUBLIC_EXPONENT,
    ExportArtifact,
    ExportFormat,
    FinalFormat,
    IssuanceRequest,
    IssuanceResult,
    IssuedCertificate,
    SummaryRecord,
)
from cert_issuer.domain.errors import InvalidExportFormat, KeyExtractionFailed, ToolUnavailable
from cert_issuer.domain.services.artifact_files import (
    SECRET_FILE_MODE,
    ensure_directory,
    read_artifact,
    remove_file,
    write_atomic,
)
from cert_issuer.domain.value_objects.identifiers import (
    build_x509_name,
    compute_thumbprint,
    subject_of,
)
from cert_issuer.domain.value_objects.secrets import SensitiveBytes

if TYPE_CHECKING:
    from cert_issuer.ports.outbound import CertificateStorePort

logger = logging.getLogger(__name__)

KeyFactory = Callable[[int], rsa.RSAPrivateKey]
Clock = Callable[[], datetime]


def generate_rsa_key(key_size: int) -> rsa.RSAPrivateKey:
    """Generate an RSA private key with the standard public exponent."""
    return rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=key_size)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def check_crypto_backend() -> None:
    """Verify the installed cryptography build can do everything issuance needs.

    Raises:
        ToolUnavailable: If SHA-256 or PKCS#12 support is missing.
    """
    try:
        from cryptography.hazmat.backends.openssl.backend import backend
    except ImportError as e:
        raise ToolUnavailable(f"OpenSSL backend for cryptography is unavailable: {e}") from e

    if not backend.hash_supported(hashes.SHA256()):
        raise ToolUnavailable("SHA-256 is not supported by the cryptography backend")
    if not hasattr(pkcs12, "serialize_key_and_certificates"):
        raise ToolUnavailable("PKCS#12 serialization is not supported by the cryptography backend")


class CertificateIssuer:
    """Issue a self-signed certificate and export it to disk."""

    def __init__(
        self,
        store: CertificateStorePort,
        key_factory: Optional[KeyFactory] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize the issuer.

        Args:
            store: Trust store whose entries are replaced per subject.
            key_factory: Produces a private key of the requested size.
            clock: Returns the current time as an aware datetime.
        """
        self._store = store
        self._key_factory = key_factory or generate_rsa_key
        self._clock = clock or utc_now

    def issue(self, request: IssuanceRequest) -> IssuanceResult:
        """Run the full issuance pipeline for one request.

        Args:
            request: Validated issuance request.

        Returns:
            The in-memory certificate, the files written and the summary.

        Raises:
            InvalidExportFormat: Export format is not PFX/CER (nothing touched).
            ToolUnavailable: Crypto backend incomplete (nothing touched).
            PrivilegeDenied: Store cannot be mutated (nothing touched).
            StoreOperationFailed: Removing or installing a store entry failed.
            FileWriteFailed: An output file could not be written or deleted.
            KeyExtractionFailed: The private key could not be recovered.
        """
        if not isinstance(request.export_format, ExportFormat):
            raise InvalidExportFormat(f"Invalid certificate format {request.export_format!r}")

        check_crypto_backend()
        self._store.check_access()
        ensure_directory(request.output_directory)

        self._replace_existing(request)
        if remove_file(request.native_path):
            logger.info(f"Removed previous {request.native_path}")

        issued = self.create_certificate(request)
        artifact = self._export(issued, request)

        self._store.install(issued.certificate)
        logger.info(f"Installed {issued.subject} (thumbprint={issued.thumbprint})")

        summary = SummaryRecord.for_artifact(artifact, issued)
        write_atomic(request.summary_path, summary.to_text().encode("utf-8"))

        logger.info(
            f"Issued {issued.subject} valid until {summary.expiration_date} "
            f"-> {', '.join(str(p) for p in artifact.files)}"
        )
        return IssuanceResult(certificate=issued, artifact=artifact, summary=summary)

    def create_certificate(self, request: IssuanceRequest) -> IssuedCertificate:
        """Generate the key pair and the self-signed certificate.

        Args:
            request: Issuance request (name and validity are used).

        Returns:
            Issued certificate holding its exportable private key.
        """
        key = self._key_factory(request.key_length_bits)
        public_key = key.public_key()
        name = build_x509_name(request.subject_common_name)

        # X.509 times have second precision
        not_before = self._clock().astimezone(timezone.utc).replace(microsecond=0)
        not_after = not_before + timedelta(days=request.validity_days)

        builder = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(public_key)
            .serial_number(x509.random_serial_number())
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    content_commitment=False,
                    key_encipherment=True,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=False,
                    crl_sign=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .add_extension(
                x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH, ExtendedKeyUsageOID.CLIENT_AUTH]),
                critical=False,
            )
            .add_extension(x509.SubjectKeyIdentifier.from_public_key(public_key), critical=False)
        )
        certificate = builder.sign(private_key=key, algorithm=hashes.SHA256())

        issued = IssuedCertificate(
            certificate=certificate,
            thumbprint=compute_thumbprint(certificate),
            subject=subject_of(certificate),
            private_key=key,
        )
        logger.debug(f"Generated {request.key_length_bits}-bit certificate {issued.thumbprint}")
        return issued

    def _replace_existing(self, request: IssuanceRequest) -> None:
        for thumbprint in self._store.find(request.subject):
            self._store.remove(thumbprint)
            logger.info(f"Removed existing store entry {thumbprint} for {request.subject}")

    def _export(self, issued: IssuedCertificate, request: IssuanceRequest) -> ExportArtifact:
        if request.export_format == ExportFormat.PFX:
            pfx = self._serialize_pfx(issued, request)
            write_atomic(request.native_path, pfx, mode=SECRET_FILE_MODE)
        else:
            der = issued.certificate.public_bytes(serialization.Encoding.DER)
            write_atomic(request.native_path, der)
        logger.info(f"Exported {request.export_format.value.upper()} to {request.native_path}")

        if request.final_format != FinalFormat.PEM:
            return ExportArtifact(certificate_path=request.native_path)
        return self._convert_to_pem(issued, request)

    def _convert_to_pem(self, issued: IssuedCertificate, request: IssuanceRequest) -> ExportArtifact:
        """Write ``<name>.pem`` and ``privkey.pem`` and drop the native file."""
        if request.export_format == ExportFormat.PFX:
            intermediate = read_artifact(request.native_path)
        else:
            # CER carries no key: build the PFX carrier in memory only
            intermediate = self._serialize_pfx(issued, request)

        key, pfx_certificate = self._extract_key(intermediate, request.protection_password)
        if key.public_key().public_numbers() != issued.public_key.public_numbers():
            raise KeyExtractionFailed("Recovered private key does not match the issued certificate")

        # Only the bytearray copy is wiped; the bytes from private_bytes stay until collected
        with SensitiveBytes(
            key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
        ) as key_pem:
            write_atomic(request.private_key_path, key_pem, mode=SECRET_FILE_MODE)
        del key

        if request.export_format == ExportFormat.PFX:
            certificate = pfx_certificate
        else:
            certificate = x509.load_der_x509_certificate(read_artifact(request.native_path))
        write_atomic(request.pem_certificate_path, certificate.public_bytes(serialization.Encoding.PEM))

        remove_file(request.native_path)
        logger.info(f"Converted to PEM: {request.pem_certificate_path}, {request.private_key_path}")
        return ExportArtifact(
            certificate_path=request.pem_certificate_path,
            private_key_path=request.private_key_path,
        )

    def _serialize_pfx(self, issued: IssuedCertificate, request: IssuanceRequest) -> bytes:
        if issued.private_key is None:
            raise KeyExtractionFailed(f"Private key for {issued.subject} is not exportable")

        # cryptography needs immutable bytes, so bytes(secret) is a copy that is not wiped
        with SensitiveBytes(request.protection_password.encode("utf-8")) as secret:
            return pkcs12.serialize_key_and_certificates(
                name=request.subject_common_name.encode("utf-8"),
                key=issued.private_key,
                cert=issued.certificate,
                cas=None,
                encryption_algorithm=serialization.BestAvailableEncryption(bytes(secret)),
            )

    def _extract_key(
        self, pfx: bytes, password: str
    ) -> tuple[rsa.RSAPrivateKey, x509.Certificate]:
        """Decrypt a PFX and return its key and certificate.

        Raises:
            KeyExtractionFailed: Wrong password, corrupt data or missing key.
        """
        # As in _serialize_pfx, bytes(secret) outlives the wipe
        with SensitiveBytes(password.encode("utf-8")) as secret:
            try:
                key, certificate, _ = pkcs12.load_key_and_certificates(pfx, bytes(secret))
            except ValueError as e:
                raise KeyExtractionFailed(f"Cannot decrypt intermediate PFX: {e}") from e

        if key is None or certificate is None:
            raise KeyExtractionFailed("Intermediate PFX does not contain a private key and certificate")
        if not isinstance(key, rsa.RSAPrivateKey):
            raise KeyExtractionFailed(f"Unexpected key type in PFX: {type(key).__name__}")
        return key, certificate
