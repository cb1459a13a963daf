"""Issuance entities."""
