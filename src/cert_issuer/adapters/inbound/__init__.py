"""Inbound adapters for the certificate issuer.

Provides the command-line entry point.
"""

from cert_issuer.adapters.inbound.cli import main

__all__ = ["main"]
