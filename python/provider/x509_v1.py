"""Version 1 X.509 certificates on top of pyasn1 / rfc5280.

cryptography only emits version 3 certificates, so the provider signs a draft
with it, then rewrites the draft's TBSCertificate here: the version component
goes back to its v1 default (omitted from DER) and the inner signature
AlgorithmIdentifier is replaced by the requested algorithm. The rewritten TBS
is re-signed by the caller and wrapped into a Certificate.
"""

from __future__ import annotations

from pyasn1.codec.der import decoder, encoder
from pyasn1.type import univ
from pyasn1_modules import rfc5280

# Components a version 1 TBSCertificate must not carry
_V3_ONLY_COMPONENTS = ("issuerUniqueID", "subjectUniqueID", "extensions")


def algorithm_identifier(oid: str, null_parameters: bool) -> rfc5280.AlgorithmIdentifier:
    """AlgorithmIdentifier for oid; RSA algorithms carry an explicit NULL parameter."""
    alg = rfc5280.AlgorithmIdentifier()
    alg["algorithm"] = univ.ObjectIdentifier(oid)
    if null_parameters:
        alg["parameters"] = univ.Any(encoder.encode(univ.Null("")))
    return alg


def to_version1_tbs(tbs_der: bytes, oid: str, null_parameters: bool) -> rfc5280.TBSCertificate:
    tbs, rest = decoder.decode(tbs_der, asn1Spec=rfc5280.TBSCertificate())
    if rest:
        raise ValueError("Trailing data after TBSCertificate")
    for name in _V3_ONLY_COMPONENTS:
        if tbs.getComponentByName(name, default=None, instantiate=False) is not None:
            raise ValueError(f"A version 1 certificate cannot carry {name}")

    tbs["version"] = 0
    tbs["signature"] = algorithm_identifier(oid, null_parameters)
    return tbs


def encode(value) -> bytes:
    return encoder.encode(value)


def assemble_certificate(
    tbs: rfc5280.TBSCertificate, oid: str, null_parameters: bool, signature: bytes
) -> bytes:
    cert = rfc5280.Certificate()
    cert["tbsCertificate"] = tbs
    cert["signatureAlgorithm"] = algorithm_identifier(oid, null_parameters)
    cert["signature"] = univ.BitString.fromOctetString(signature)
    return encoder.encode(cert)
