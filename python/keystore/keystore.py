"""Keystore: in-memory handle holding key entries under type-folded aliases."""

from __future__ import annotations

from typing import Any, NamedTuple, Optional, Union

from common.logger import get_logger
from keystore.base import KeystoreBase
from keystore.types import KeystoreType, normalize_alias
from provider.types import KeyPair

DEFAULT_KEYSTORE_TYPE = KeystoreType.JKS


class KeystoreEntry(NamedTuple):
    alias: str
    key_pair: KeyPair
    certificate: Any


class InMemoryKeystore(KeystoreBase):
    """Keystore handle that never touches disk."""

    def __init__(self, keystore_type: Union[str, KeystoreType] = DEFAULT_KEYSTORE_TYPE):
        self._type = KeystoreType.from_name(keystore_type)
        self._entries: dict[str, KeystoreEntry] = {}

    def _key(self, alias: str) -> str:
        return normalize_alias(alias, self._type.case_sensitive)

    def get_type(self) -> str:
        return self._type.type_name

    def aliases(self) -> list[str]:
        return [entry.alias for entry in self._entries.values()]

    def contains_alias(self, alias: str) -> bool:
        return self._key(alias) in self._entries

    def set_key_entry(self, alias: str, key_pair: KeyPair, certificate: Any) -> None:
        self._entries[self._key(alias)] = KeystoreEntry(alias, key_pair, certificate)
        get_logger(__name__).debug(
            "keystore: set key entry alias=%s type=%s entries=%d",
            alias,
            self._type,
            len(self._entries),
        )

    def get_certificate(self, alias: str) -> Optional[Any]:
        entry = self._entries.get(self._key(alias))
        return entry.certificate if entry else None

    def get_key_pair(self, alias: str) -> Optional[KeyPair]:
        entry = self._entries.get(self._key(alias))
        return entry.key_pair if entry else None

    def delete_entry(self, alias: str) -> None:
        if self._entries.pop(self._key(alias), None) is None:
            raise KeyError(alias)
