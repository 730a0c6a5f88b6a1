"""Keystore type registry and alias normalization.

Each keystore format declares whether its aliases are case sensitive. The
alias folding rule used by the password cache and by in-memory handles is a
pure function of that flag.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from common.errors import UnsupportedKeystoreType


class KeystoreType(Enum):
    JKS = ("JKS", False)
    CASE_EXACT_JKS = ("CaseExactJKS", True)
    JCEKS = ("JCEKS", False)
    PKCS12 = ("PKCS12", True)
    BKS = ("BKS", True)
    UBER = ("UBER", True)
    GKR = ("GKR", True)

    def __init__(self, type_name: str, case_sensitive: bool):
        self.type_name = type_name
        self.case_sensitive = case_sensitive

    def __str__(self) -> str:
        return self.type_name

    @classmethod
    def from_name(cls, name: Union[str, "KeystoreType"]) -> "KeystoreType":
        """Resolve a type tag (exact match first, then case-insensitive)."""
        if isinstance(name, KeystoreType):
            return name
        if not isinstance(name, str):
            raise UnsupportedKeystoreType(name)
        for member in cls:
            if member.type_name == name:
                return member
        folded = name.strip().lower()
        for member in cls:
            if member.type_name.lower() == folded:
                return member
        raise UnsupportedKeystoreType(name)


def normalize_alias(alias: str, case_sensitive: bool) -> str:
    return alias if case_sensitive else alias.lower()


def keystore_type_of(keystore: Any) -> KeystoreType:
    """Resolve the type tag of a keystore handle."""
    get_type = getattr(keystore, "get_type", None)
    if get_type is None:
        raise UnsupportedKeystoreType(type(keystore).__name__)
    return KeystoreType.from_name(get_type())
