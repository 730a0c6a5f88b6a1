from provider.base_provider import BaseCryptoProvider
from provider.cryptography_provider import CryptographyProvider
from provider.types import KeyPair, KeyType, SignatureAlgorithm, SubjectAttributes

__all__ = [
    "BaseCryptoProvider",
    "CryptographyProvider",
    "KeyPair",
    "KeyType",
    "SignatureAlgorithm",
    "SubjectAttributes",
]
