from jwt.exceptions import InvalidKeyError
import pytest

from src.core.errors.exceptions import UnsupportedAlgorithmException
from src.tokens import algorithms
from src.tokens.algorithms import AlgorithmFamily, Curve, HashName
from src.tokens.schemas import JWTAlgorithm
from tests.helpers.keys import KeyPair


def test_table_covers_every_algorithm() -> None:
    assert set(algorithms.ALGORITHMS) == set(JWTAlgorithm)


def test_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        algorithms.ALGORITHMS[JWTAlgorithm.HS256] = algorithms.ALGORITHMS[  # type: ignore[index]
            JWTAlgorithm.HS384
        ]


@pytest.mark.parametrize(
    ("algorithm", "family", "hash_name", "curve"),
    [
        (JWTAlgorithm.HS256, AlgorithmFamily.HMAC, HashName.SHA256, None),
        (JWTAlgorithm.HS512, AlgorithmFamily.HMAC, HashName.SHA512, None),
        (JWTAlgorithm.RS384, AlgorithmFamily.RSASSA_PKCS1_V1_5, HashName.SHA384, None),
        (JWTAlgorithm.PS256, AlgorithmFamily.RSASSA_PSS, HashName.SHA256, None),
        (JWTAlgorithm.ES256, AlgorithmFamily.ECDSA, HashName.SHA256, Curve.P256),
        (JWTAlgorithm.ES384, AlgorithmFamily.ECDSA, HashName.SHA384, Curve.P384),
        (JWTAlgorithm.ES512, AlgorithmFamily.ECDSA, HashName.SHA512, Curve.P521),
    ],
)
def test_algorithm_parameters(
    algorithm: JWTAlgorithm,
    family: AlgorithmFamily,
    hash_name: HashName,
    curve: Curve | None,
) -> None:
    spec = algorithms.resolve(algorithm).spec

    assert spec.family is family
    assert spec.hash is hash_name
    assert spec.curve is curve


def test_resolve_accepts_plain_string() -> None:
    assert algorithms.resolve("RS256").algorithm is JWTAlgorithm.RS256


@pytest.mark.parametrize("algorithm", ["none", "hs256", "EdDSA", ""])
def test_resolve_unknown_algorithm(algorithm: str) -> None:
    with pytest.raises(UnsupportedAlgorithmException):
        algorithms.resolve(algorithm)


@pytest.mark.parametrize("algorithm", list(JWTAlgorithm))
def test_sign_then_verify(
    algorithm: JWTAlgorithm, key_pairs: dict[JWTAlgorithm, KeyPair]
) -> None:
    capability = algorithms.resolve(algorithm)
    keys = key_pairs[algorithm]

    signature = capability.sign(keys.signing, b"header.payload")

    assert capability.verify(keys.verification, signature, b"header.payload")
    assert not capability.verify(keys.verification, signature, b"header.payload2")


def test_hmac_hash_changes_signature(hmac_secret: bytes) -> None:
    sig256 = algorithms.resolve(JWTAlgorithm.HS256).sign(hmac_secret, b"data")
    sig512 = algorithms.resolve(JWTAlgorithm.HS512).sign(hmac_secret, b"data")

    assert len(sig256) == 32
    assert len(sig512) == 64


def test_ecdsa_signature_is_raw_form(ec_keys: dict[str, KeyPair]) -> None:
    signature = algorithms.resolve(JWTAlgorithm.ES256).sign(
        ec_keys["P-256"].signing, b"data"
    )

    assert len(signature) == 64


def test_ecdsa_rejects_key_on_other_curve(ec_keys: dict[str, KeyPair]) -> None:
    capability = algorithms.resolve(JWTAlgorithm.ES256)

    with pytest.raises(InvalidKeyError):
        capability.sign(ec_keys["P-384"].signing, b"data")


def test_hmac_refuses_pem_as_secret(rsa_keys: KeyPair) -> None:
    with pytest.raises(InvalidKeyError):
        algorithms.resolve(JWTAlgorithm.HS256).sign(rsa_keys.verification, b"data")
