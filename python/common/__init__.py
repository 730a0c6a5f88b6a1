from common.errors import (
    CertgenError,
    CryptoFailure,
    GenerationInterrupted,
    IncompatibleSignatureAlgorithm,
    IncorrectPassword,
    InvalidCountryCodeLength,
    InvalidTaskState,
    KeyGenerationFailure,
    MustBePositive,
    NoAttributesProvided,
    NotInteger,
    PasswordMismatch,
    Required,
    UnsupportedKeystoreType,
    ValidationError,
)
from common.logger import get_logger

__all__ = [
    "CertgenError",
    "ValidationError",
    "Required",
    "NotInteger",
    "MustBePositive",
    "NoAttributesProvided",
    "InvalidCountryCodeLength",
    "IncompatibleSignatureAlgorithm",
    "PasswordMismatch",
    "IncorrectPassword",
    "KeyGenerationFailure",
    "CryptoFailure",
    "GenerationInterrupted",
    "UnsupportedKeystoreType",
    "InvalidTaskState",
    "get_logger",
]
