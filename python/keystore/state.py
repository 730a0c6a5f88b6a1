"""Keystore state: one open keystore plus everything needed to save it again.

Holds the keystore handle and its resolved type, the keystore password, a
per-entry password cache keyed by normalized alias, the backing file and an
unsaved-changes flag. No I/O happens here.

Not thread safe: an instance belongs to a single session and must be
externally synchronized if shared.
"""

from __future__ import annotations

import os
from typing import Optional, Union

from common.logger import get_logger
from keystore.password import check_password_change
from keystore.secrets import SecretInput, reveal, to_secret, wipe
from keystore.types import KeystoreType, keystore_type_of, normalize_alias

PathLike = Union[str, "os.PathLike[str]"]


class KeystoreState:
    def __init__(
        self,
        keystore,
        file: Optional[PathLike] = None,
        password: Optional[SecretInput] = None,
        keystore_type: Optional[Union[str, KeystoreType]] = None,
    ):
        self._keystore = None
        self._keystore_type: Optional[KeystoreType] = None
        self._password: Optional[bytearray] = None
        self._entry_passwords: dict[str, bytearray] = {}
        self._file: Optional[str] = None
        self._changed = False

        self.attach(keystore, keystore_type)
        self.set_file(file)
        self.set_keystore_password(password)

    # ---------- keystore handle ----------

    def attach(self, keystore, keystore_type: Optional[Union[str, KeystoreType]] = None) -> None:
        """Replace the wrapped keystore.

        The type is resolved before anything is mutated, so an unsupported type
        leaves the state untouched. Cached entry passwords survive only if the
        new type folds aliases the same way as the previous one.
        """
        log = get_logger(__name__)
        if keystore_type is None:
            new_type = keystore_type_of(keystore)
        else:
            new_type = KeystoreType.from_name(keystore_type)

        previous = self._keystore_type
        if previous is not None and previous.case_sensitive != new_type.case_sensitive:
            log.debug(
                "keystore state: alias case sensitivity changed %s -> %s, dropping %d cached passwords",
                previous,
                new_type,
                len(self._entry_passwords),
            )
            self._clear_entry_passwords()

        self._keystore = keystore
        self._keystore_type = new_type
        log.debug("keystore state: attached type=%s", new_type)

    def get_keystore(self):
        return self._keystore

    def get_type(self) -> KeystoreType:
        return self._keystore_type

    def _normalize(self, alias: str) -> str:
        return normalize_alias(alias, self._keystore_type.case_sensitive)

    # ---------- entry passwords ----------

    def set_entry_password(self, alias: str, password: SecretInput) -> None:
        key = self._normalize(alias)
        wipe(self._entry_passwords.get(key))
        self._entry_passwords[key] = to_secret(password)

    def get_entry_password(self, alias: str) -> Optional[bytes]:
        return reveal(self._entry_passwords.get(self._normalize(alias)))

    def remove_entry_password(self, alias: str) -> None:
        wipe(self._entry_passwords.pop(self._normalize(alias), None))

    def change_entry_password(
        self,
        alias: str,
        new: SecretInput,
        confirm: SecretInput,
        old: Optional[SecretInput] = None,
    ) -> None:
        key = self._normalize(alias)
        current = self._entry_passwords.get(key)
        secret = check_password_change(new, confirm, old=old, expected_old=reveal(current))
        wipe(current)
        self._entry_passwords[key] = secret
        self._changed = True
        get_logger(__name__).info("keystore state: entry password changed alias=%s", alias)

    def _clear_entry_passwords(self) -> None:
        for secret in self._entry_passwords.values():
            wipe(secret)
        self._entry_passwords.clear()

    # ---------- keystore password ----------

    def set_keystore_password(self, password: Optional[SecretInput]) -> None:
        wipe(self._password)
        self._password = to_secret(password)

    def get_keystore_password(self) -> Optional[bytes]:
        return reveal(self._password)

    def change_keystore_password(
        self,
        new: SecretInput,
        confirm: SecretInput,
        old: Optional[SecretInput] = None,
    ) -> None:
        secret = check_password_change(new, confirm, old=old, expected_old=reveal(self._password))
        wipe(self._password)
        self._password = secret
        self._changed = True
        get_logger(__name__).info("keystore state: keystore password changed")

    # ---------- file / changed flag ----------

    def set_file(self, file: Optional[PathLike]) -> None:
        self._file = os.fspath(file) if file is not None else None

    def get_file(self) -> Optional[str]:
        return self._file

    def mark_changed(self, changed: bool = True) -> None:
        self._changed = bool(changed)

    def is_changed(self) -> bool:
        return self._changed

    # ---------- teardown ----------

    def wipe(self) -> None:
        """Zero every held secret. The keystore handle and file are kept."""
        self._clear_entry_passwords()
        wipe(self._password)
        self._password = None

    def close(self) -> None:
        self.wipe()
        self._keystore = None
        get_logger(__name__).debug("keystore state: closed")

    def __enter__(self) -> "KeystoreState":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
