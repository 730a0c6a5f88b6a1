"""Common types for crypto providers."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Iterator, Mapping, NamedTuple, Optional, Tuple


class KeyType(str, Enum):
    DSA = "DSA"
    RSA = "RSA"


class SignatureAlgorithm(str, Enum):
    MD2_WITH_RSA = "MD2withRSA"
    MD5_WITH_RSA = "MD5withRSA"
    SHA1_WITH_RSA = "SHA1withRSA"
    SHA224_WITH_RSA = "SHA224withRSA"
    SHA256_WITH_RSA = "SHA256withRSA"
    SHA384_WITH_RSA = "SHA384withRSA"
    SHA512_WITH_RSA = "SHA512withRSA"
    RIPEMD160_WITH_RSA = "RIPEMD160withRSA"
    SHA1_WITH_DSA = "SHA1withDSA"

    def __str__(self) -> str:
        return self.value


class KeyPair(NamedTuple):
    """A generated key pair tagged with the algorithm that produced it."""
    key_type: KeyType
    private_key: Any
    public_key: Any


@dataclass(frozen=True)
class SubjectAttributes:
    """The seven certificate subject attributes, each optional."""
    common_name: Optional[str] = None
    organizational_unit: Optional[str] = None
    organization: Optional[str] = None
    locality: Optional[str] = None
    state: Optional[str] = None
    country_code: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, Optional[str]]) -> "SubjectAttributes":
        return cls(**dict(values))

    def normalized(self) -> "SubjectAttributes":
        """Trim every attribute; empty or all-whitespace values become None."""
        changes = {}
        for f in fields(self):
            raw = getattr(self, f.name)
            if raw is not None and not isinstance(raw, str):
                raise TypeError(
                    f"Subject attribute {f.name} must be a string, got {type(raw).__name__}"
                )
            value = raw.strip() if raw is not None else ""
            changes[f.name] = value or None
        return replace(self, **changes)

    def present(self) -> Iterator[Tuple[str, str]]:
        for f in fields(self):
            value = getattr(self, f.name)
            if value:
                yield f.name, value

    def is_empty(self) -> bool:
        return next(self.present(), None) is None
