"""Abstract crypto provider: key pair generation and certificate signing.

The key generation task and the certificate builder depend on this type, so
an alternative provider (HSM, PKCS#11, a test fake) can be injected without
changing their logic.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, Optional

from keystore.types import KeystoreType, keystore_type_of
from provider.types import KeyPair, KeyType, SignatureAlgorithm, SubjectAttributes


class BaseCryptoProvider(ABC):
    """Abstract provider base class."""

    @abstractmethod
    def generate_key_pair(
        self,
        key_type: KeyType,
        key_size: int,
        cancel_event: Optional[threading.Event] = None,
    ) -> KeyPair:
        """Generate a key pair.

        Raises KeyGenerationFailure on unsupported parameters or provider error.
        Implementations should check cancel_event wherever they can stop early
        and raise GenerationInterrupted when it is set.
        """
        ...

    @abstractmethod
    def sign_certificate(
        self,
        subject: SubjectAttributes,
        validity_days: int,
        public_key: Any,
        private_key: Any,
        signature_algorithm: SignatureAlgorithm,
    ) -> Any:
        """Produce a self-signed X.509 version 1 certificate.

        Raises CryptoFailure on any signing error.
        """
        ...

    def keystore_type_of(self, keystore: Any) -> KeystoreType:
        """Resolve a keystore handle's type (raises UnsupportedKeystoreType)."""
        return keystore_type_of(keystore)
