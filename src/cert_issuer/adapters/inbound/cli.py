"""Command-line adapter for the certificate issuer.

Usage:
    cert-issuer -c certificate.conf
    cert-issuer --name test-cert --format pfx --output-format pem --path /tmp/certs

The password is read from the configuration file or from
CERT_ISSUER_CERTIFICATE__PASSWORD, never from the command line.

Exit codes: 0 on success, 1 on any issuance failure, 2 on usage errors.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    p = argparse.ArgumentParser(
        prog="cert-issuer",
        description="Issue a self-signed certificate and export it as PFX, CER or PEM.",
    )
    p.add_argument("-c", "--config", type=Path, help="Key/value configuration file (Certificate.Name=...)")
    p.add_argument("-n", "--name", help="Certificate common name (Certificate.Name)")
    p.add_argument("-f", "--format", help="Native export format: pfx or cer (Certificate.Format)")
    p.add_argument("-o", "--output-format", help="Final format: pem or native (Certificate.OutputFormat)")
    p.add_argument("-p", "--path", type=Path, help="Output directory (Certificate.Path)")
    p.add_argument("--validity-days", type=int, help="Validity period in days (default 365)")
    p.add_argument("--store", choices=["file", "memory"], dest="store_backend", help="Certificate store backend")
    p.add_argument("--store-dir", type=Path, help="Directory of the file certificate store")
    p.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level")
    p.add_argument("--log-format", choices=["json", "console"], help="Log output format")
    p.add_argument("--metrics-textfile", type=Path, help="Write Prometheus metrics to this file")
    return p


def _overrides(args: argparse.Namespace) -> dict[str, dict[str, object]]:
    return {
        "certificate": {
            "name": args.name,
            "format": args.format,
            "output_format": args.output_format,
            "path": args.path,
            "validity_days": args.validity_days,
        },
        "store": {
            "backend": args.store_backend,
            "path": args.store_dir,
        },
        "observability": {
            "log_level": args.log_level,
            "log_format": args.log_format,
            "metrics_textfile": args.metrics_textfile,
        },
    }


def main(argv: list[str] | None = None) -> int:
    """Run one issuance and return the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        from cert_issuer.application.coordinator import IssuanceCoordinator
        from cert_issuer.domain.errors import IssuanceError
        from cert_issuer.infrastructure.config import load_config
        from cert_issuer.infrastructure.container import Container
        from cert_issuer.infrastructure.tracing import shutdown_tracing
    except ImportError as e:
        print(f"ERROR [tool_unavailable]: required library is not installed: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        config = load_config(args.config, _overrides(args))
        container = Container.create(config)
        coordinator = IssuanceCoordinator(
            container.issuer,
            container.metrics,
            config.observability.metrics_textfile,
        )
        result = coordinator.issue(config.to_request())
    except IssuanceError as e:
        print(f"ERROR [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_FAILURE
    finally:
        shutdown_tracing()

    print(coordinator.render_report(result))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
