"""Filesystem helpers for issuance artifacts.

Every write goes to a temporary file in the destination directory and is
moved into place with ``os.replace``, so a reader never sees a half-written
certificate or key.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from cert_issuer.domain.errors import FileWriteFailed

logger = logging.getLogger(__name__)

PUBLIC_FILE_MODE = 0o644
SECRET_FILE_MODE = 0o600


def write_atomic(path: Path, data: bytes | bytearray, mode: int = PUBLIC_FILE_MODE) -> None:
    """Write data to path, replacing any existing file.

    Args:
        path: Destination file.
        data: Bytes to write.
        mode: Permission bits applied before the file becomes visible.

    Raises:
        FileWriteFailed: If the temporary file cannot be written or moved.
    """
    path = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as e:
        raise FileWriteFailed(f"Cannot write {path}: {e}") from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise FileWriteFailed(f"Cannot write {path}: {e}") from e

    logger.debug(f"Wrote {path} ({len(data)} bytes)")


def read_artifact(path: Path) -> bytes:
    """Read a previously written artifact.

    Raises:
        FileWriteFailed: If the file cannot be read back.
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise FileWriteFailed(f"Cannot read back {path}: {e}") from e


def remove_file(path: Path) -> bool:
    """Delete a file if it exists.

    Returns:
        True if a file was deleted.

    Raises:
        FileWriteFailed: If the file exists but cannot be deleted.
    """
    path = Path(path)
    if not path.exists():
        return False
    try:
        path.unlink()
    except OSError as e:
        raise FileWriteFailed(f"Cannot delete {path}: {e}") from e
    logger.debug(f"Deleted {path}")
    return True


def ensure_directory(path: Path) -> None:
    """Create the output directory (and parents) if needed.

    Raises:
        FileWriteFailed: If the directory cannot be created or is not writable.
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileWriteFailed(f"Cannot create output directory {path}: {e}") from e
    if not os.access(path, os.W_OK):
        raise FileWriteFailed(f"Output directory {path} is not writable")
