"""
Certificate Issuer - self-signed X.509 issuance and multi-format export

Generates an RSA-4096 key pair, builds a SHA-256 self-signed certificate,
and writes it as PFX, CER or PEM together with a short summary record.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
