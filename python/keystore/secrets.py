"""Secret buffers: passwords are held as bytearray so they can be zeroed in place."""

from __future__ import annotations

from typing import Optional, Union

SecretInput = Union[str, bytes, bytearray]


def to_secret(value: Optional[SecretInput]) -> Optional[bytearray]:
    """Copy a password into a fresh mutable buffer (str is UTF-8 encoded)."""
    if value is None:
        return None
    if isinstance(value, str):
        return bytearray(value.encode("utf-8"))
    if isinstance(value, (bytes, bytearray)):
        return bytearray(value)
    raise TypeError(f"Password must be str or bytes, got {type(value).__name__}")


def wipe(secret: Optional[bytearray]) -> None:
    """Overwrite a secret buffer with zeros."""
    if secret:
        secret[:] = bytes(len(secret))


def reveal(secret: Optional[bytearray]) -> Optional[bytes]:
    return bytes(secret) if secret is not None else None
