"""Adapters - concrete implementations of the issuer's ports."""
