from certgen.certificate import (
    COUNTRY_CODE_LENGTH,
    CertificateBuilder,
    CertificateRequest,
    parse_validity,
)
from certgen.keypair_task import KeyPairGenerationTask, KeyPairOutcome, TaskState
from certgen.signature import (
    SIGNATURE_ALGORITHMS,
    default_signature_algorithm,
    resolve_signature_algorithm,
    signature_algorithms_for,
)

__all__ = [
    "COUNTRY_CODE_LENGTH",
    "CertificateBuilder",
    "CertificateRequest",
    "parse_validity",
    "KeyPairGenerationTask",
    "KeyPairOutcome",
    "TaskState",
    "SIGNATURE_ALGORITHMS",
    "default_signature_algorithm",
    "resolve_signature_algorithm",
    "signature_algorithms_for",
]
