"""Keystore handle base class (abstract).

Keystore state and callers depend on this type, so alternative keystore
implementations (in-memory, file-backed, hardware) can be attached without
changing the state logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from provider.types import KeyPair


class KeystoreBase(ABC):
    @abstractmethod
    def get_type(self) -> str:
        """Get the keystore format tag (e.g. "JKS", "PKCS12")."""
        ...

    @abstractmethod
    def aliases(self) -> list[str]:
        """List entry aliases."""
        ...

    @abstractmethod
    def contains_alias(self, alias: str) -> bool:
        ...

    @abstractmethod
    def set_key_entry(self, alias: str, key_pair: KeyPair, certificate: Any) -> None:
        """Store a key pair and its certificate under alias (replaces any existing entry)."""
        ...

    @abstractmethod
    def get_certificate(self, alias: str) -> Optional[Any]:
        ...

    @abstractmethod
    def delete_entry(self, alias: str) -> None:
        ...
