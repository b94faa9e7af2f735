"""
Static lookup from a JWS algorithm identifier to its sign/verify capability.

Every identifier maps to exactly one family and a fixed hash; ECDSA
identifiers additionally pin the curve. The table is constant data built
at import time, so resolving is a pure read and safe from any thread.
The primitives themselves come from PyJWT's `jwt.algorithms` backends.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from jwt.algorithms import (
    Algorithm,
    ECAlgorithm,
    HMACAlgorithm,
    RSAAlgorithm,
    RSAPSSAlgorithm,
)
from jwt.exceptions import InvalidKeyError

from src.core.errors.exceptions import UnsupportedAlgorithmException
from src.tokens.schemas import JWTAlgorithm


class AlgorithmFamily(StrEnum):
    HMAC = "HMAC"
    RSASSA_PKCS1_V1_5 = "RSASSA-PKCS1-v1_5"
    RSASSA_PSS = "RSASSA-PSS"
    ECDSA = "ECDSA"


class HashName(StrEnum):
    SHA256 = "SHA-256"
    SHA384 = "SHA-384"
    SHA512 = "SHA-512"


class Curve(StrEnum):
    P256 = "P-256"
    P384 = "P-384"
    P521 = "P-521"


@dataclass(frozen=True)
class AlgorithmSpec:
    family: AlgorithmFamily
    hash: HashName
    curve: Curve | None = None


ALGORITHMS: Mapping[JWTAlgorithm, AlgorithmSpec] = MappingProxyType(
    {
        JWTAlgorithm.HS256: AlgorithmSpec(AlgorithmFamily.HMAC, HashName.SHA256),
        JWTAlgorithm.HS384: AlgorithmSpec(AlgorithmFamily.HMAC, HashName.SHA384),
        JWTAlgorithm.HS512: AlgorithmSpec(AlgorithmFamily.HMAC, HashName.SHA512),
        JWTAlgorithm.RS256: AlgorithmSpec(
            AlgorithmFamily.RSASSA_PKCS1_V1_5, HashName.SHA256
        ),
        JWTAlgorithm.RS384: AlgorithmSpec(
            AlgorithmFamily.RSASSA_PKCS1_V1_5, HashName.SHA384
        ),
        JWTAlgorithm.RS512: AlgorithmSpec(
            AlgorithmFamily.RSASSA_PKCS1_V1_5, HashName.SHA512
        ),
        JWTAlgorithm.PS256: AlgorithmSpec(AlgorithmFamily.RSASSA_PSS, HashName.SHA256),
        JWTAlgorithm.PS384: AlgorithmSpec(AlgorithmFamily.RSASSA_PSS, HashName.SHA384),
        JWTAlgorithm.PS512: AlgorithmSpec(AlgorithmFamily.RSASSA_PSS, HashName.SHA512),
        JWTAlgorithm.ES256: AlgorithmSpec(
            AlgorithmFamily.ECDSA, HashName.SHA256, Curve.P256
        ),
        JWTAlgorithm.ES384: AlgorithmSpec(
            AlgorithmFamily.ECDSA, HashName.SHA384, Curve.P384
        ),
        JWTAlgorithm.ES512: AlgorithmSpec(
            AlgorithmFamily.ECDSA, HashName.SHA512, Curve.P521
        ),
    }
)

_HMAC_HASHES: Mapping[HashName, Any] = MappingProxyType(
    {
        HashName.SHA256: HMACAlgorithm.SHA256,
        HashName.SHA384: HMACAlgorithm.SHA384,
        HashName.SHA512: HMACAlgorithm.SHA512,
    }
)

# RSA, RSA-PSS and ECDSA backends share the cryptography hash classes
_ASYMMETRIC_HASHES: Mapping[HashName, Any] = MappingProxyType(
    {
        HashName.SHA256: RSAAlgorithm.SHA256,
        HashName.SHA384: RSAAlgorithm.SHA384,
        HashName.SHA512: RSAAlgorithm.SHA512,
    }
)

# Names as reported by cryptography's EllipticCurve.name
_CURVE_NAMES: Mapping[Curve, str] = MappingProxyType(
    {
        Curve.P256: "secp256r1",
        Curve.P384: "secp384r1",
        Curve.P521: "secp521r1",
    }
)


def _build_backend(spec: AlgorithmSpec) -> Algorithm:
    if spec.family is AlgorithmFamily.HMAC:
        return HMACAlgorithm(_HMAC_HASHES[spec.hash])
    if spec.family is AlgorithmFamily.RSASSA_PKCS1_V1_5:
        return RSAAlgorithm(_ASYMMETRIC_HASHES[spec.hash])
    if spec.family is AlgorithmFamily.RSASSA_PSS:
        return RSAPSSAlgorithm(_ASYMMETRIC_HASHES[spec.hash])
    if spec.family is AlgorithmFamily.ECDSA:
        return ECAlgorithm(_ASYMMETRIC_HASHES[spec.hash])
    raise UnsupportedAlgorithmException(
        "Unsupported algorithm family", {"family": str(spec.family)}
    )


@dataclass(frozen=True)
class SignatureCapability:
    """
    Sign/verify bound to one algorithm identifier.

    Keys are raw bytes: the secret itself for HMAC, PEM for RSA and ECDSA.
    HMAC secrets that look like PEM or SSH public keys are refused with
    InvalidKeyError, so an asymmetric public key can never double as a secret.
    Both operations are blocking; callers on an event loop should run them
    in a worker thread.
    """

    algorithm: JWTAlgorithm
    spec: AlgorithmSpec
    backend: Algorithm

    def sign(self, key: bytes, data: bytes) -> bytes:
        return self.backend.sign(data, self._prepare_key(key))

    def verify(self, key: bytes, signature: bytes, data: bytes) -> bool:
        return bool(self.backend.verify(data, self._prepare_key(key), signature))

    def _prepare_key(self, key: bytes) -> Any:
        prepared = self.backend.prepare_key(key)
        if self.spec.curve is not None:
            curve_name = getattr(getattr(prepared, "curve", None), "name", None)
            if curve_name != _CURVE_NAMES[self.spec.curve]:
                raise InvalidKeyError(
                    f"{self.algorithm} requires a {self.spec.curve} key, got {curve_name}"
                )
        return prepared


_CAPABILITIES: Mapping[JWTAlgorithm, SignatureCapability] = MappingProxyType(
    {
        algorithm: SignatureCapability(algorithm, spec, _build_backend(spec))
        for algorithm, spec in ALGORITHMS.items()
    }
)


def resolve(algorithm: JWTAlgorithm | str) -> SignatureCapability:
    """
    Look up the signing capability for an algorithm identifier.

    Raises:
        UnsupportedAlgorithmException: If the identifier is not one of the
            twelve supported JWS algorithms
    """
    try:
        return _CAPABILITIES[JWTAlgorithm(algorithm)]
    except (KeyError, ValueError):
        raise UnsupportedAlgorithmException(
            "Unsupported algorithm", {"algorithm": str(algorithm)}
        )
