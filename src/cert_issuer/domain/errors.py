"""Error taxonomy for certificate issuance.

Every error is terminal: the pipeline performs no retries and no partial
recovery. Each class carries a stable ``code`` so callers (the CLI, log
processors) can branch on the kind without parsing messages.
"""

from __future__ import annotations


class IssuanceError(Exception):
    """Base class for all issuance failures."""

    code = "issuance_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ToolUnavailable(IssuanceError):
    """The cryptographic backend lacks a required capability."""

    code = "tool_unavailable"


class PrivilegeDenied(IssuanceError):
    """The certificate store cannot be mutated by this process."""

    code = "privilege_denied"


class ConfigMissing(IssuanceError):
    """Configuration file or a required key is absent."""

    code = "config_missing"


class ConfigInvalid(IssuanceError):
    """Configuration value failed validation."""

    code = "config_invalid"


class InvalidExportFormat(ConfigInvalid):
    """Export format is neither ``pfx`` nor ``cer``."""

    code = "invalid_export_format"


class StoreOperationFailed(IssuanceError):
    """Finding, removing or installing a store entry failed."""

    code = "store_operation_failed"


class FileWriteFailed(IssuanceError):
    """Writing or deleting an output file failed.

    Files written by earlier steps of the same run are left in place.
    """

    code = "file_write_failed"


class KeyExtractionFailed(IssuanceError):
    """Private key could not be recovered (wrong password, corrupt PFX, non-exportable key)."""

    code = "key_extraction_failed"
