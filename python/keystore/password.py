"""Password change checks: new/confirm must match, old must match when known."""

from __future__ import annotations

import hmac
from typing import Optional

from common.errors import IncorrectPassword, PasswordMismatch
from keystore.secrets import SecretInput, to_secret, wipe


def check_password_change(
    new: SecretInput,
    confirm: SecretInput,
    old: Optional[SecretInput] = None,
    expected_old: Optional[SecretInput] = None,
) -> bytearray:
    """Validate a password change and return the new password as a secret buffer."""
    new_secret = to_secret(new)
    confirm_secret = to_secret(confirm)
    try:
        if not hmac.compare_digest(bytes(new_secret), bytes(confirm_secret)):
            raise PasswordMismatch()
        if old is not None and expected_old is not None:
            if not hmac.compare_digest(bytes(to_secret(old)), bytes(to_secret(expected_old))):
                raise IncorrectPassword()
    except Exception:
        wipe(new_secret)
        raise
    finally:
        wipe(confirm_secret)
    return new_secret
