"""Prometheus metrics for the certificate issuer.

The issuer runs once and exits, so nothing is served over HTTP. When a
textfile path is configured the registry is written there for the
node-exporter textfile collector.
"""

from __future__ import annotations

from pathlib import Path

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, Info, write_to_textfile


class MetricsRegistry:
    """Registry of all issuer metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

        self.issuance_total = Counter(
            "cert_issuance_total", "Certificate issuance runs", ["status"],
            registry=self._registry,
        )

        self.issuance_duration_seconds = Histogram(
            "cert_issuance_duration_seconds", "Certificate issuance duration",
            buckets=(0.5, 1, 2.5, 5, 10, 30, 60),
            registry=self._registry,
        )

        self.cert_expiry_timestamp_seconds = Gauge(
            "cert_expiry_timestamp_seconds", "Not-after time of the issued certificate", ["subject"],
            registry=self._registry,
        )

        self.info = Info("cert_issuer", "Issuer information", registry=self._registry)

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def write_textfile(self, path: Path) -> None:
        """Write all metrics in Prometheus text format."""
        path.parent.mkdir(parents=True, exist_ok=True)
        write_to_textfile(str(path), self._registry)


_metrics: MetricsRegistry | None = None


def setup_metrics(registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """Set up Prometheus metrics."""
    global _metrics
    _metrics = MetricsRegistry(registry)
    from cert_issuer import __version__
    _metrics.info.info({"version": __version__})
    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = setup_metrics()
    return _metrics
