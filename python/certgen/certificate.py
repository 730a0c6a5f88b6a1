"""Certificate builder: validate subject attributes and validity, then sign.

Validation mirrors the certificate dialog: every field is trimmed and checked
independently first, then failures are reported in a fixed order (validity,
empty subject, country code length, signature algorithm). Nothing reaches the
crypto provider unless every check passes.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, NamedTuple, Optional, Union

from certgen.signature import resolve_signature_algorithm
from common.errors import (
    InvalidCountryCodeLength,
    MustBePositive,
    NoAttributesProvided,
    NotInteger,
    Required,
    ValidationError,
)
from common.logger import get_logger
from provider.base_provider import BaseCryptoProvider
from provider.cryptography_provider import CryptographyProvider
from provider.types import KeyPair, SignatureAlgorithm, SubjectAttributes

COUNTRY_CODE_LENGTH = 2
MAX_VALIDITY_DAYS = 2**31 - 1
MAX_VALIDITY_DIGITS = len(str(MAX_VALIDITY_DAYS))

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

AttributesInput = Union[SubjectAttributes, Mapping[str, Optional[str]], None]


class CertificateRequest(NamedTuple):
    subject: SubjectAttributes
    validity_days: int
    signature_algorithm: SignatureAlgorithm
    key_pair: KeyPair


def parse_validity(value: Union[str, int, None]) -> int:
    """Parse a validity period in days.

    Raises Required (absent/blank), NotInteger (not a 32-bit integer) or
    MustBePositive (less than one day).
    """
    if value is None:
        raise Required("A validity period is required", field="validity")
    if isinstance(value, bool):
        raise NotInteger("The validity period must be an integer", field="validity")
    if isinstance(value, int):
        days = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise Required("A validity period is required", field="validity")
        if not _INTEGER_RE.fullmatch(text) or len(text.lstrip("+-")) > MAX_VALIDITY_DIGITS:
            raise NotInteger("The validity period must be an integer", field="validity")
        days = int(text)
    else:
        raise NotInteger("The validity period must be an integer", field="validity")

    if days > MAX_VALIDITY_DAYS or days < -MAX_VALIDITY_DAYS - 1:
        raise NotInteger("The validity period must be an integer", field="validity")
    if days < 1:
        raise MustBePositive("The validity period must be at least one day", field="validity")
    return days


def normalize_attributes(attributes: AttributesInput) -> SubjectAttributes:
    if attributes is None:
        return SubjectAttributes()
    if not isinstance(attributes, SubjectAttributes):
        attributes = SubjectAttributes.from_mapping(attributes)
    return attributes.normalized()


class CertificateBuilder:
    """Builds self-signed version 1 certificates through a crypto provider."""

    def __init__(self, provider: Optional[BaseCryptoProvider] = None):
        self.provider: BaseCryptoProvider = provider or CryptographyProvider()

    def validate(
        self,
        attributes: AttributesInput,
        validity_days: Union[str, int, None],
        signature_algorithm: Union[SignatureAlgorithm, str, None],
        key_pair: KeyPair,
    ) -> CertificateRequest:
        """Run every check and return the normalized request, or raise ValidationError."""
        validity_error: Optional[ValidationError] = None
        try:
            days = parse_validity(validity_days)
        except ValidationError as exc:
            validity_error = exc
        subject = normalize_attributes(attributes)

        if validity_error is not None:
            raise validity_error
        if subject.is_empty():
            raise NoAttributesProvided()
        if subject.country_code is not None and len(subject.country_code) != COUNTRY_CODE_LENGTH:
            raise InvalidCountryCodeLength(len(subject.country_code), COUNTRY_CODE_LENGTH)

        algorithm = resolve_signature_algorithm(key_pair.key_type, signature_algorithm)
        return CertificateRequest(subject, days, algorithm, key_pair)

    def build(
        self,
        attributes: AttributesInput,
        validity_days: Union[str, int, None],
        signature_algorithm: Union[SignatureAlgorithm, str, None],
        key_pair: KeyPair,
    ) -> Any:
        """Validate the inputs and sign a certificate.

        Raises a ValidationError subtype before any provider call, or
        CryptoFailure if the provider cannot produce the certificate.
        """
        log = get_logger(__name__)
        request = self.validate(attributes, validity_days, signature_algorithm, key_pair)
        log.debug(
            "certificate builder: signing fields=%s days=%d alg=%s",
            ",".join(name for name, _ in request.subject.present()),
            request.validity_days,
            request.signature_algorithm,
        )
        certificate = self.provider.sign_certificate(
            request.subject,
            request.validity_days,
            key_pair.public_key,
            key_pair.private_key,
            request.signature_algorithm,
        )
        log.info("certificate builder: certificate built alg=%s", request.signature_algorithm)
        return certificate
