"""Application coordinator for the certificate issuer.

Wraps one issuance run with the ambient concerns the domain service does not
know about:
- Structured start/finish/failure events
- A trace span around the whole pipeline
- Run counters, duration and expiry metrics (optionally written to a textfile)
- The human-readable report printed at the end of a run
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

from cert_issuer.domain.entities.certificate import IssuanceRequest, IssuanceResult
from cert_issuer.domain.errors import IssuanceError
from cert_issuer.domain.services.certificate_issuer import CertificateIssuer
from cert_issuer.infrastructure.logging import get_logger
from cert_issuer.infrastructure.metrics import MetricsRegistry, get_metrics
from cert_issuer.infrastructure.tracing import trace_span


class IssuanceCoordinator:
    """Runs the issuer and records what happened."""

    def __init__(
        self,
        issuer: CertificateIssuer,
        metrics: Optional[MetricsRegistry] = None,
        metrics_textfile: Optional[Path] = None,
    ):
        """Initialize coordinator.

        Args:
            issuer: Domain issuer to run.
            metrics: Metrics registry (global registry if omitted).
            metrics_textfile: Where to write metrics after each run.
        """
        self._issuer = issuer
        self._metrics = metrics or get_metrics()
        self._metrics_textfile = metrics_textfile

    def issue(self, request: IssuanceRequest) -> IssuanceResult:
        """Issue a certificate for the request.

        Args:
            request: Issuance request built from configuration.

        Returns:
            Issuance result from the domain service.

        Raises:
            IssuanceError: Any pipeline failure, re-raised after being recorded.
        """
        log = get_logger(
            __name__,
            subject=request.subject,
            export_format=request.export_format.value,
            final_format=request.final_format.value,
        )
        log.info("issuance_started", output_directory=str(request.output_directory))

        start = time.perf_counter()
        try:
            with trace_span(
                "cert_issuer.issue",
                {
                    "cert.subject": request.subject,
                    "cert.export_format": request.export_format.value,
                    "cert.final_format": request.final_format.value,
                },
            ) as span:
                result = self._issuer.issue(request)
                span.set_attribute("cert.thumbprint", result.certificate.thumbprint)
        except IssuanceError as e:
            self._metrics.issuance_total.labels(status=e.code).inc()
            log.error("issuance_failed", error=e.code, reason=e.message)
            self._flush_metrics(log)
            raise
        finally:
            self._metrics.issuance_duration_seconds.observe(time.perf_counter() - start)

        self._metrics.issuance_total.labels(status="success").inc()
        self._metrics.cert_expiry_timestamp_seconds.labels(subject=request.subject).set(
            result.certificate.not_after.timestamp()
        )
        self._flush_metrics(log)

        log.info(
            "issuance_completed",
            thumbprint=result.certificate.thumbprint,
            files=[str(p) for p in result.artifact.files],
            expires=result.summary.expiration_date,
        )
        return result

    def _flush_metrics(self, log) -> None:
        if self._metrics_textfile is None:
            return
        try:
            self._metrics.write_textfile(self._metrics_textfile)
        except OSError as e:
            log.warning("metrics_write_failed", path=str(self._metrics_textfile), reason=str(e))

    @staticmethod
    def render_report(result: IssuanceResult) -> str:
        """Format the end-of-run report."""
        summary = result.summary
        lines = [
            f"Certificate issued: {result.certificate.subject}",
            f"  Thumbprint:  {result.certificate.thumbprint}",
            f"  Certificate: {summary.certificate_path}",
        ]
        if summary.private_key_path is not None:
            lines.append(f"  Private key: {summary.private_key_path}")
        lines.append(f"  Expires:     {summary.expiration_date}")
        return "\n".join(lines)
