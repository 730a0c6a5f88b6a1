"""Crypto provider backed by the `cryptography` package."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple, Optional

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, padding, rsa
from cryptography.x509.oid import NameOID
from pyasn1.error import PyAsn1Error

from common.errors import CryptoFailure, GenerationInterrupted, KeyGenerationFailure
from common.logger import get_logger
from provider import x509_v1
from provider.base_provider import BaseCryptoProvider
from provider.types import KeyPair, KeyType, SignatureAlgorithm, SubjectAttributes

RSA_PUBLIC_EXPONENT = 65537


class SignatureSpec(NamedTuple):
    key_type: KeyType
    oid: str
    null_parameters: bool
    hash_algorithm: Optional[type]


# hash_algorithm None: the backend has no implementation of that digest.
SIGNATURE_SPECS = {
    SignatureAlgorithm.MD2_WITH_RSA: SignatureSpec(KeyType.RSA, "1.2.840.113549.1.1.2", True, None),
    SignatureAlgorithm.MD5_WITH_RSA: SignatureSpec(KeyType.RSA, "1.2.840.113549.1.1.4", True, hashes.MD5),
    SignatureAlgorithm.SHA1_WITH_RSA: SignatureSpec(KeyType.RSA, "1.2.840.113549.1.1.5", True, hashes.SHA1),
    SignatureAlgorithm.SHA224_WITH_RSA: SignatureSpec(KeyType.RSA, "1.2.840.113549.1.1.14", True, hashes.SHA224),
    SignatureAlgorithm.SHA256_WITH_RSA: SignatureSpec(KeyType.RSA, "1.2.840.113549.1.1.11", True, hashes.SHA256),
    SignatureAlgorithm.SHA384_WITH_RSA: SignatureSpec(KeyType.RSA, "1.2.840.113549.1.1.12", True, hashes.SHA384),
    SignatureAlgorithm.SHA512_WITH_RSA: SignatureSpec(KeyType.RSA, "1.2.840.113549.1.1.13", True, hashes.SHA512),
    SignatureAlgorithm.RIPEMD160_WITH_RSA: SignatureSpec(KeyType.RSA, "1.3.36.3.3.1.2", True, None),
    SignatureAlgorithm.SHA1_WITH_DSA: SignatureSpec(KeyType.DSA, "1.2.840.10040.4.3", False, hashes.SHA1),
}

SUBJECT_OIDS = (
    ("common_name", NameOID.COMMON_NAME),
    ("organizational_unit", NameOID.ORGANIZATIONAL_UNIT_NAME),
    ("organization", NameOID.ORGANIZATION_NAME),
    ("locality", NameOID.LOCALITY_NAME),
    ("state", NameOID.STATE_OR_PROVINCE_NAME),
    ("country_code", NameOID.COUNTRY_NAME),
    ("email", NameOID.EMAIL_ADDRESS),
)


def build_name(subject: SubjectAttributes) -> x509.Name:
    """Subject DN from the present attributes, in CN, OU, O, L, ST, C, E order."""
    attributes = []
    for field_name, oid in SUBJECT_OIDS:
        value = getattr(subject, field_name)
        if value:
            attributes.append(x509.NameAttribute(oid, value))
    return x509.Name(attributes)


class CryptographyProvider(BaseCryptoProvider):
    def generate_key_pair(
        self,
        key_type: KeyType,
        key_size: int,
        cancel_event: Optional[threading.Event] = None,
    ) -> KeyPair:
        log = get_logger(__name__)
        try:
            key_type = KeyType(key_type)
        except ValueError as exc:
            raise KeyGenerationFailure(f"Unsupported key pair type: {key_type!r}") from exc

        # The backend call below cannot be interrupted; this is the last checkpoint.
        if cancel_event is not None and cancel_event.is_set():
            raise GenerationInterrupted(f"{key_type.value} key generation cancelled")

        log.debug("crypto provider: generate_key_pair start type=%s size=%s", key_type.value, key_size)
        try:
            if key_type is KeyType.DSA:
                private_key = dsa.generate_private_key(key_size=key_size)
            else:
                private_key = rsa.generate_private_key(
                    public_exponent=RSA_PUBLIC_EXPONENT, key_size=key_size
                )
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise KeyGenerationFailure(
                f"Could not generate {key_type.value} key pair of {key_size} bits: {exc}"
            ) from exc

        log.debug("crypto provider: generate_key_pair ok type=%s size=%s", key_type.value, key_size)
        return KeyPair(key_type, private_key, private_key.public_key())

    def sign_certificate(
        self,
        subject: SubjectAttributes,
        validity_days: int,
        public_key: Any,
        private_key: Any,
        signature_algorithm: SignatureAlgorithm,
    ) -> x509.Certificate:
        log = get_logger(__name__)
        spec = SIGNATURE_SPECS.get(signature_algorithm)
        if spec is None:
            raise CryptoFailure(f"Unknown signature algorithm: {signature_algorithm!r}")
        if spec.hash_algorithm is None:
            raise CryptoFailure(f"Signature algorithm {signature_algorithm} is not supported by this provider")

        log.debug(
            "crypto provider: sign_certificate start alg=%s days=%s",
            signature_algorithm,
            validity_days,
        )
        try:
            name = build_name(subject)
            not_before = datetime.now(timezone.utc).replace(microsecond=0)
            not_after = not_before + timedelta(days=validity_days)
            draft = (
                x509.CertificateBuilder()
                .subject_name(name)
                .issuer_name(name)
                .serial_number(x509.random_serial_number())
                .not_valid_before(not_before)
                .not_valid_after(not_after)
                .public_key(public_key)
                .sign(private_key, hashes.SHA256())
            )

            tbs = x509_v1.to_version1_tbs(draft.tbs_certificate_bytes, spec.oid, spec.null_parameters)
            signature = self._sign(private_key, x509_v1.encode(tbs), spec)
            der = x509_v1.assemble_certificate(tbs, spec.oid, spec.null_parameters, signature)
            certificate = x509.load_der_x509_certificate(der)
        except (ValueError, TypeError, OverflowError, UnsupportedAlgorithm, PyAsn1Error) as exc:
            raise CryptoFailure(f"Could not generate certificate: {exc}") from exc

        log.info(
            "crypto provider: sign_certificate ok alg=%s serial=%x not_after=%s",
            signature_algorithm,
            certificate.serial_number,
            not_after.isoformat(),
        )
        return certificate

    @staticmethod
    def _sign(private_key: Any, data: bytes, spec: SignatureSpec) -> bytes:
        algorithm = spec.hash_algorithm()
        if spec.key_type is KeyType.RSA and isinstance(private_key, rsa.RSAPrivateKey):
            return private_key.sign(data, padding.PKCS1v15(), algorithm)
        if spec.key_type is KeyType.DSA and isinstance(private_key, dsa.DSAPrivateKey):
            return private_key.sign(data, algorithm)
        raise TypeError(
            f"{spec.key_type.value} signature requested with a {type(private_key).__name__}"
        )
