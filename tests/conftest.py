from cryptography.hazmat.primitives.asymmetric import ec, rsa
import pytest

from src.tokens.schemas import JWTAlgorithm
from tests.helpers.keys import KeyPair, pem_pair


@pytest.fixture(scope="session")
def hmac_secret() -> bytes:
    return b"k" * 64


@pytest.fixture(scope="session")
def rsa_keys() -> KeyPair:
    return pem_pair(rsa.generate_private_key(public_exponent=65537, key_size=2048))


@pytest.fixture(scope="session")
def ec_keys() -> dict[str, KeyPair]:
    return {
        "P-256": pem_pair(ec.generate_private_key(ec.SECP256R1())),
        "P-384": pem_pair(ec.generate_private_key(ec.SECP384R1())),
        "P-521": pem_pair(ec.generate_private_key(ec.SECP521R1())),
    }


@pytest.fixture(scope="session")
def key_pairs(
    hmac_secret: bytes, rsa_keys: KeyPair, ec_keys: dict[str, KeyPair]
) -> dict[JWTAlgorithm, KeyPair]:
    hmac_pair = KeyPair(signing=hmac_secret, verification=hmac_secret)
    return {
        JWTAlgorithm.HS256: hmac_pair,
        JWTAlgorithm.HS384: hmac_pair,
        JWTAlgorithm.HS512: hmac_pair,
        JWTAlgorithm.RS256: rsa_keys,
        JWTAlgorithm.RS384: rsa_keys,
        JWTAlgorithm.RS512: rsa_keys,
        JWTAlgorithm.PS256: rsa_keys,
        JWTAlgorithm.PS384: rsa_keys,
        JWTAlgorithm.PS512: rsa_keys,
        JWTAlgorithm.ES256: ec_keys["P-256"],
        JWTAlgorithm.ES384: ec_keys["P-384"],
        JWTAlgorithm.ES512: ec_keys["P-521"],
    }
