from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.x509.oid import NameOID

from certgen import (
    CertificateBuilder,
    default_signature_algorithm,
    parse_validity,
    signature_algorithms_for,
)
from common.errors import (
    CryptoFailure,
    IncompatibleSignatureAlgorithm,
    InvalidCountryCodeLength,
    MustBePositive,
    NoAttributesProvided,
    NotInteger,
    Required,
    ValidationError,
)
from provider import KeyPair, KeyType, SignatureAlgorithm, SubjectAttributes
from provider.base_provider import BaseCryptoProvider

RSA_PAIR = KeyPair(KeyType.RSA, "rsa-private", "rsa-public")
DSA_PAIR = KeyPair(KeyType.DSA, "dsa-private", "dsa-public")


@pytest.fixture
def mock_provider(mocker):
    p = mocker.Mock(spec=BaseCryptoProvider)
    p.sign_certificate.return_value = "certificate"
    return p


@pytest.fixture
def builder(mock_provider):
    return CertificateBuilder(provider=mock_provider)


# ============================================================
# Validity parsing
# ============================================================

class TestParseValidity:
    @pytest.mark.parametrize(
        "raw, error",
        [
            ("", Required),
            ("   ", Required),
            (None, Required),
            ("0", MustBePositive),
            ("-5", MustBePositive),
            (0, MustBePositive),
            ("abc", NotInteger),
            ("1.5", NotInteger),
            ("3 65", NotInteger),
            ("1_000", NotInteger),
            ("99999999999", NotInteger),
            ("9" * 5000, NotInteger),
            ("-" + "9" * 5000, NotInteger),
            (True, NotInteger),
            (365.0, NotInteger),
        ],
    )
    def test_rejected(self, raw, error):
        with pytest.raises(error) as exc_info:
            parse_validity(raw)
        assert exc_info.value.field == "validity"

    @pytest.mark.parametrize(
        "raw, days",
        [("365", 365), (" 30 ", 30), ("+7", 7), ("1", 1), (90, 90), ("2147483647", 2147483647)],
    )
    def test_accepted(self, raw, days):
        assert parse_validity(raw) == days

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            parse_validity("abc")


# ============================================================
# Signature algorithm table
# ============================================================

class TestSignatureAlgorithms:
    def test_dsa_has_single_option(self):
        assert signature_algorithms_for(KeyType.DSA) == [SignatureAlgorithm.SHA1_WITH_DSA]
        assert default_signature_algorithm(KeyType.DSA) is SignatureAlgorithm.SHA1_WITH_DSA

    def test_rsa_options_in_order(self):
        assert [str(a) for a in signature_algorithms_for(KeyType.RSA)] == [
            "MD2withRSA",
            "MD5withRSA",
            "SHA1withRSA",
            "SHA224withRSA",
            "SHA256withRSA",
            "SHA384withRSA",
            "SHA512withRSA",
            "RIPEMD160withRSA",
        ]

    def test_rsa_default_is_sha1(self):
        assert default_signature_algorithm(KeyType.RSA) is SignatureAlgorithm.SHA1_WITH_RSA
        assert default_signature_algorithm("RSA") is SignatureAlgorithm.SHA1_WITH_RSA


# ============================================================
# Validation (no provider call on failure)
# ============================================================

class TestValidation:
    def test_no_attributes(self, builder, mock_provider):
        with pytest.raises(NoAttributesProvided):
            builder.build({}, 365, SignatureAlgorithm.SHA1_WITH_RSA, RSA_PAIR)
        with pytest.raises(NoAttributesProvided):
            builder.build(None, "365", None, RSA_PAIR)
        mock_provider.sign_certificate.assert_not_called()

    def test_whitespace_attributes_count_as_absent(self, builder, mock_provider):
        blank = SubjectAttributes(
            common_name="  ",
            organizational_unit="\t",
            organization="",
            locality=" ",
            state="\n",
            country_code="   ",
            email=None,
        )
        with pytest.raises(NoAttributesProvided):
            builder.build(blank, 365, None, RSA_PAIR)
        mock_provider.sign_certificate.assert_not_called()

    def test_validity_reported_before_empty_subject(self, builder):
        with pytest.raises(Required):
            builder.build({}, "", None, RSA_PAIR)

    def test_validity_reported_before_country_code(self, builder):
        with pytest.raises(NotInteger):
            builder.build({"country_code": "USA"}, "abc", None, RSA_PAIR)

    @pytest.mark.parametrize("country", ["U", "USA", " U "])
    def test_bad_country_code_length(self, builder, mock_provider, country):
        with pytest.raises(InvalidCountryCodeLength) as exc_info:
            builder.build({"common_name": "Test", "country_code": country}, 365, None, RSA_PAIR)
        assert exc_info.value.expected == 2
        mock_provider.sign_certificate.assert_not_called()

    def test_country_code_only_is_enough(self, builder, mock_provider):
        builder.build({"country_code": " US "}, 365, None, RSA_PAIR)
        subject = mock_provider.sign_certificate.call_args.args[0]
        assert subject == SubjectAttributes(country_code="US")

    def test_dsa_rejects_rsa_algorithm(self, builder, mock_provider):
        with pytest.raises(IncompatibleSignatureAlgorithm):
            builder.build({"common_name": "Test"}, 365, SignatureAlgorithm.SHA256_WITH_RSA, DSA_PAIR)
        mock_provider.sign_certificate.assert_not_called()

    def test_rsa_rejects_dsa_algorithm(self, builder):
        with pytest.raises(IncompatibleSignatureAlgorithm):
            builder.build({"common_name": "Test"}, 365, "SHA1withDSA", RSA_PAIR)

    def test_unknown_algorithm_name(self, builder):
        with pytest.raises(IncompatibleSignatureAlgorithm):
            builder.build({"common_name": "Test"}, 365, "SHA256withECDSA", RSA_PAIR)

    def test_unknown_attribute_name(self, builder):
        with pytest.raises(TypeError):
            builder.build({"surname": "Doe"}, 365, None, RSA_PAIR)

    @pytest.mark.parametrize("value", [5, b"Example", ["Example"]])
    def test_non_string_attribute_value(self, builder, mock_provider, value):
        with pytest.raises(TypeError, match="common_name"):
            builder.build({"common_name": value}, 365, None, RSA_PAIR)
        mock_provider.sign_certificate.assert_not_called()

    def test_validation_errors_share_base(self, builder):
        for bad in ({}, {"country_code": "X"}):
            with pytest.raises(ValidationError):
                builder.build(bad, 365, None, RSA_PAIR)


# ============================================================
# Delegation to the provider
# ============================================================

class TestDelegation:
    def test_single_attribute_proceeds(self, builder, mock_provider):
        cert = builder.build({"common_name": "  Test  "}, " 365 ", None, RSA_PAIR)

        assert cert == "certificate"
        mock_provider.sign_certificate.assert_called_once_with(
            SubjectAttributes(common_name="Test"),
            365,
            "rsa-public",
            "rsa-private",
            SignatureAlgorithm.SHA1_WITH_RSA,
        )

    def test_dsa_default_algorithm(self, builder, mock_provider):
        builder.build(SubjectAttributes(organization="Acme"), 10, None, DSA_PAIR)
        assert mock_provider.sign_certificate.call_args.args[4] is SignatureAlgorithm.SHA1_WITH_DSA

    def test_algorithm_name_string_accepted(self, builder, mock_provider):
        builder.build({"email": "a@example.com"}, 10, "SHA512withRSA", RSA_PAIR)
        assert mock_provider.sign_certificate.call_args.args[4] is SignatureAlgorithm.SHA512_WITH_RSA

    def test_crypto_failure_propagates(self, builder, mock_provider):
        mock_provider.sign_certificate.side_effect = CryptoFailure("signing failed")
        with pytest.raises(CryptoFailure, match="signing failed"):
            builder.build({"common_name": "Test"}, 365, None, RSA_PAIR)

    def test_validate_returns_normalized_request(self, builder):
        request = builder.validate({"locality": " Paris "}, "30", None, RSA_PAIR)
        assert request.subject == SubjectAttributes(locality="Paris")
        assert request.validity_days == 30
        assert request.signature_algorithm is SignatureAlgorithm.SHA1_WITH_RSA
        assert request.key_pair is RSA_PAIR


# ============================================================
# End to end with the cryptography provider
# ============================================================

class TestRealCertificates:
    def test_rsa_sha1_certificate(self, rsa_key_pair):
        before = datetime.now(timezone.utc).replace(microsecond=0)
        cert = CertificateBuilder().build(
            {"common_name": "Example"}, 365, SignatureAlgorithm.SHA1_WITH_RSA, rsa_key_pair
        )
        after = datetime.now(timezone.utc)

        assert cert.version is x509.Version.v1
        assert cert.subject.rfc4514_string() == "CN=Example"
        assert cert.issuer == cert.subject
        assert before <= cert.not_valid_before_utc <= after
        assert cert.not_valid_after_utc - cert.not_valid_before_utc == timedelta(days=365)
        assert isinstance(cert.signature_hash_algorithm, hashes.SHA1)
        assert list(cert.extensions) == []

        rsa_key_pair.public_key.verify(
            cert.signature,
            cert.tbs_certificate_bytes,
            padding.PKCS1v15(),
            cert.signature_hash_algorithm,
        )

    def test_rsa_sha256_certificate_carries_public_key(self, rsa_key_pair):
        cert = CertificateBuilder().build(
            {"common_name": "Example"}, "30", "SHA256withRSA", rsa_key_pair
        )
        assert isinstance(cert.signature_hash_algorithm, hashes.SHA256)
        assert cert.public_key().public_numbers() == rsa_key_pair.public_key.public_numbers()

    def test_dsa_certificate(self, dsa_key_pair):
        cert = CertificateBuilder().build({"organization": "Acme"}, 1, None, dsa_key_pair)

        assert cert.version is x509.Version.v1
        assert isinstance(cert.signature_hash_algorithm, hashes.SHA1)
        dsa_key_pair.public_key.verify(
            cert.signature, cert.tbs_certificate_bytes, cert.signature_hash_algorithm
        )

    def test_full_subject(self, rsa_key_pair):
        subject = SubjectAttributes(
            common_name="Example",
            organizational_unit="Engineering",
            organization="Acme",
            locality="Springfield",
            state="Oregon",
            country_code="US",
            email="admin@example.com",
        )
        cert = CertificateBuilder().build(subject, 365, SignatureAlgorithm.SHA256_WITH_RSA, rsa_key_pair)

        def value(oid):
            return cert.subject.get_attributes_for_oid(oid)[0].value

        assert value(NameOID.COMMON_NAME) == "Example"
        assert value(NameOID.ORGANIZATIONAL_UNIT_NAME) == "Engineering"
        assert value(NameOID.ORGANIZATION_NAME) == "Acme"
        assert value(NameOID.LOCALITY_NAME) == "Springfield"
        assert value(NameOID.STATE_OR_PROVINCE_NAME) == "Oregon"
        assert value(NameOID.COUNTRY_NAME) == "US"
        assert value(NameOID.EMAIL_ADDRESS) == "admin@example.com"
        assert [a.oid for a in cert.subject][0] == NameOID.COMMON_NAME

    def test_serial_numbers_differ(self, rsa_key_pair):
        builder = CertificateBuilder()
        a = builder.build({"common_name": "A"}, 1, "SHA256withRSA", rsa_key_pair)
        b = builder.build({"common_name": "A"}, 1, "SHA256withRSA", rsa_key_pair)
        assert a.serial_number != b.serial_number

    @pytest.mark.parametrize(
        "algorithm", [SignatureAlgorithm.MD2_WITH_RSA, SignatureAlgorithm.RIPEMD160_WITH_RSA]
    )
    def test_unsupported_digest_is_crypto_failure(self, rsa_key_pair, algorithm):
        with pytest.raises(CryptoFailure):
            CertificateBuilder().build({"common_name": "Example"}, 365, algorithm, rsa_key_pair)

    def test_validity_beyond_time_encoding_is_crypto_failure(self, rsa_key_pair):
        with pytest.raises(CryptoFailure):
            CertificateBuilder().build(
                {"common_name": "Example"}, "2147483647", "SHA256withRSA", rsa_key_pair
            )
