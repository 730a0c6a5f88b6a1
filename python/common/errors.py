"""Error taxonomy shared by keystore state, key generation and certificate building.

Validation errors are user-input problems: the caller re-prompts and nothing
was mutated. Provider failures (key generation, signing) are terminal for the
call or task that raised them.
"""

from __future__ import annotations

from typing import Optional


class CertgenError(Exception):
    """Base class for every error raised by this project."""


class ValidationError(CertgenError, ValueError):
    """A candidate input was rejected before any crypto work was done."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class Required(ValidationError):
    pass


class NotInteger(ValidationError):
    pass


class MustBePositive(ValidationError):
    pass


class NoAttributesProvided(ValidationError):
    def __init__(self, message: str = "At least one certificate subject attribute is required"):
        super().__init__(message, field="subject")


class InvalidCountryCodeLength(ValidationError):
    def __init__(self, length: int, expected: int = 2):
        super().__init__(
            f"Country code must be {expected} characters long (got {length})",
            field="country_code",
        )
        self.length = length
        self.expected = expected


class IncompatibleSignatureAlgorithm(ValidationError):
    def __init__(self, algorithm: object, key_type: object):
        super().__init__(
            f"Signature algorithm {algorithm} cannot be used with a {key_type} key pair",
            field="signature_algorithm",
        )
        self.algorithm = algorithm
        self.key_type = key_type


class PasswordMismatch(ValidationError):
    def __init__(self, message: str = "The new password and its confirmation do not match"):
        super().__init__(message, field="password")


class IncorrectPassword(ValidationError):
    def __init__(self, message: str = "The old password is incorrect"):
        super().__init__(message, field="old_password")


class KeyGenerationFailure(CertgenError):
    """Wraps whatever the crypto provider reported while generating a key pair."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class CryptoFailure(CertgenError):
    """Wraps whatever the crypto provider reported while signing a certificate."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class UnsupportedKeystoreType(CertgenError, ValueError):
    def __init__(self, type_name: object):
        super().__init__(f"Unsupported keystore type: {type_name!r}")
        self.type_name = type_name


class InvalidTaskState(CertgenError, RuntimeError):
    pass


class GenerationInterrupted(CertgenError):
    """Raised by a provider that observed a cancellation request mid-generation."""
