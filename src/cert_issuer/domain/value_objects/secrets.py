"""Scoped holder for sensitive byte material.

Passwords and decrypted private keys live in a mutable ``bytearray`` that is
zeroed when the ``with`` block exits, on success and on every error path.

Usage:
    with SensitiveBytes(password.encode("utf-8")) as secret:
        key = decrypt(bytes(secret))

Immutable ``bytes`` copies handed to third-party APIs cannot be wiped; only
the buffer owned by this object is cleared.
"""

from __future__ import annotations

from types import TracebackType
from typing import Optional


class SensitiveBytes:
    """Guarded buffer that is wiped on scope exit."""

    def __init__(self, data: bytes | bytearray) -> None:
        self._buffer = bytearray(data)
        self._wiped = False

    def __enter__(self) -> bytearray:
        if self._wiped:
            raise RuntimeError("Sensitive buffer already wiped")
        return self._buffer

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.wipe()

    def wipe(self) -> None:
        """Overwrite the buffer with zeros in place."""
        self._buffer[:] = bytes(len(self._buffer))
        self._wiped = True

    @property
    def wiped(self) -> bool:
        """Whether the buffer has been cleared."""
        return self._wiped

    def __len__(self) -> int:
        return len(self._buffer)

    def __repr__(self) -> str:
        return f"SensitiveBytes(<{len(self._buffer)} bytes redacted>)"
