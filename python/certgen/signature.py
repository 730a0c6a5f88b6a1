"""Permitted signature algorithms per key pair type, with the default selection."""

from __future__ import annotations

from typing import NamedTuple, Tuple, Union

from common.errors import IncompatibleSignatureAlgorithm
from provider.types import KeyType, SignatureAlgorithm


class SignatureChoices(NamedTuple):
    options: Tuple[SignatureAlgorithm, ...]
    default_index: int

    @property
    def default(self) -> SignatureAlgorithm:
        return self.options[self.default_index]


SIGNATURE_ALGORITHMS = {
    KeyType.DSA: SignatureChoices((SignatureAlgorithm.SHA1_WITH_DSA,), 0),
    KeyType.RSA: SignatureChoices(
        (
            SignatureAlgorithm.MD2_WITH_RSA,
            SignatureAlgorithm.MD5_WITH_RSA,
            SignatureAlgorithm.SHA1_WITH_RSA,
            SignatureAlgorithm.SHA224_WITH_RSA,
            SignatureAlgorithm.SHA256_WITH_RSA,
            SignatureAlgorithm.SHA384_WITH_RSA,
            SignatureAlgorithm.SHA512_WITH_RSA,
            SignatureAlgorithm.RIPEMD160_WITH_RSA,
        ),
        2,
    ),
}


def signature_algorithms_for(key_type: KeyType) -> list[SignatureAlgorithm]:
    return list(SIGNATURE_ALGORITHMS[KeyType(key_type)].options)


def default_signature_algorithm(key_type: KeyType) -> SignatureAlgorithm:
    return SIGNATURE_ALGORITHMS[KeyType(key_type)].default


def resolve_signature_algorithm(
    key_type: KeyType,
    requested: Union[SignatureAlgorithm, str, None] = None,
) -> SignatureAlgorithm:
    """Return the requested algorithm if the key type permits it, else raise.

    None selects the key type's default.
    """
    choices = SIGNATURE_ALGORITHMS[KeyType(key_type)]
    if requested is None:
        return choices.default
    try:
        algorithm = SignatureAlgorithm(requested)
    except ValueError as exc:
        raise IncompatibleSignatureAlgorithm(requested, KeyType(key_type).value) from exc
    if algorithm not in choices.options:
        raise IncompatibleSignatureAlgorithm(algorithm, KeyType(key_type).value)
    return algorithm
