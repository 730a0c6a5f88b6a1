#!/usr/bin/env python3
"""
Certgen CLI: generate a key pair and a self-signed X.509 v1 certificate.

Usage:
  python -m certgen_cli --cn "Example" [--key-type RSA] [--key-size 2048]
                        [--validity 365] [--sig-alg SHA256withRSA] [--alias mykey]

The key pair and certificate are registered in an in-memory keystore and the
certificate is printed as PEM on stdout. Ctrl-C cancels key generation.

Env (overridden by options): CERTGEN_KEY_TYPE, CERTGEN_KEY_SIZE,
CERTGEN_VALIDITY_DAYS, CERTGEN_SIGNATURE_ALGORITHM, CERTGEN_KEYSTORE_TYPE,
CERTGEN_ENTRY_PASSWORD, KEYSTORE_PASSWORD
"""
import argparse
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Allow running from repo root or from python/
sys.path.insert(0, str(Path(__file__).resolve().parent))

from cryptography.hazmat.primitives import serialization

from certgen import CertificateBuilder, KeyPairGenerationTask, TaskState
from common.errors import CertgenError
from common.logger import get_logger
from keystore import InMemoryKeystore, KeystoreState
from provider import KeyType, SubjectAttributes

load_dotenv()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Certgen CLI - generate a key pair and self-signed certificate",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--key-type",
        type=str.upper,
        choices=[k.value for k in KeyType],
        default=os.environ.get("CERTGEN_KEY_TYPE", "RSA").upper(),
        help="Key pair algorithm",
    )
    parser.add_argument(
        "--key-size",
        type=int,
        default=int(os.environ.get("CERTGEN_KEY_SIZE", "2048")),
        help="Key size in bits",
    )
    parser.add_argument(
        "--validity",
        default=os.environ.get("CERTGEN_VALIDITY_DAYS", "365"),
        help="Validity period in days",
    )
    parser.add_argument(
        "--sig-alg",
        default=os.environ.get("CERTGEN_SIGNATURE_ALGORITHM"),
        help="Signature algorithm (default depends on key type)",
    )
    parser.add_argument("--cn", default="", help="Common name")
    parser.add_argument("--ou", default="", help="Organisation unit")
    parser.add_argument("--o", default="", help="Organisation name")
    parser.add_argument("--l", default="", help="Locality name")
    parser.add_argument("--st", default="", help="State name")
    parser.add_argument("--c", default="", help="Country code (2 letters)")
    parser.add_argument("--email", default="", help="Email address")
    parser.add_argument("--alias", default="mykey", help="Keystore entry alias")
    parser.add_argument(
        "--keystore-type",
        default=os.environ.get("CERTGEN_KEYSTORE_TYPE", "JKS"),
        help="Keystore type",
    )
    parser.add_argument(
        "--entry-password",
        default=os.environ.get("CERTGEN_ENTRY_PASSWORD"),
        help="Password for the new keystore entry",
    )
    return parser


def run(argv: Optional[list] = None) -> int:
    log = get_logger(__name__)
    parsed = _build_parser().parse_args(argv)

    subject = SubjectAttributes(
        common_name=parsed.cn,
        organizational_unit=parsed.ou,
        organization=parsed.o,
        locality=parsed.l,
        state=parsed.st,
        country_code=parsed.c,
        email=parsed.email,
    )
    builder = CertificateBuilder()

    try:
        state = KeystoreState(
            InMemoryKeystore(parsed.keystore_type),
            password=os.environ.get("KEYSTORE_PASSWORD"),
        )
        with state:
            task = KeyPairGenerationTask(parsed.key_type, parsed.key_size)
            with task:
                task.start()
                try:
                    outcome = task.wait()
                except KeyboardInterrupt:
                    task.cancel()
                    outcome = task.wait()

            if outcome.state is TaskState.CANCELLED:
                print("Key pair generation cancelled", file=sys.stderr)
                return 1
            if outcome.state is TaskState.FAILED:
                raise outcome.error

            key_pair = outcome.key_pair
            certificate = builder.build(subject, parsed.validity, parsed.sig_alg, key_pair)

            state.get_keystore().set_key_entry(parsed.alias, key_pair, certificate)
            if parsed.entry_password is not None:
                state.set_entry_password(parsed.alias, parsed.entry_password)
            state.mark_changed(True)
            log.info(
                "certgen: registered alias=%s type=%s changed=%s",
                parsed.alias,
                state.get_type(),
                state.is_changed(),
            )

            sys.stdout.write(certificate.public_bytes(serialization.Encoding.PEM).decode("ascii"))
    except (CertgenError, ValueError) as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
