from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Any, Literal, TypedDict


class JWTAlgorithm(StrEnum):
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"
    PS256 = "PS256"
    PS384 = "PS384"
    PS512 = "PS512"

    @classmethod
    def values(cls) -> set[str]:
        return {item.value for item in cls.__members__.values()}


class JWTHeader(TypedDict):
    """Type definition for the JOSE header of a compact token"""

    typ: Literal["JWT"]
    alg: str  # One of JWTAlgorithm


class JWTPayload(TypedDict, total=False):
    """Registered claims. Any other key is an opaque application claim."""

    exp: int  # Expiration timestamp
    nbf: int  # Not-before timestamp
    iat: int  # Issued-at timestamp
    iss: str  # Issuer
    sub: str  # Subject
    aud: str  # Audience
    jti: str  # JWT ID


NUMERIC_CLAIMS = ("exp", "nbf", "iat")
STRING_CLAIMS = ("iss", "sub", "aud", "jti")


@dataclass(frozen=True)
class TokenOptions:
    """
    Optional settings for token creation.

    A field left as None is not written into the payload at all.
    `headers` is accepted for call-site compatibility but never merged
    into the emitted header.
    """

    headers: Mapping[str, Any] | None = None
    expires_in: timedelta | None = None
    issuer: str | None = None
    subject: str | None = None
    audience: str | None = None
    not_before: datetime | None = None
    include_issued_at: bool = False
    jwt_id: str | None = None


@dataclass(frozen=True)
class ParsedToken:
    value: str
    header: Mapping[str, Any]
    payload: Mapping[str, Any]
    parts: tuple[str, str, str]

    algorithm: JWTAlgorithm
    expires_at: datetime | None = None
    issued_at: datetime | None = None
    not_before: datetime | None = None
    issuer: str | None = None
    subject: str | None = None
    audience: str | None = None
    jwt_id: str | None = None

    @property
    def signing_input(self) -> str:
        return f"{self.parts[0]}.{self.parts[1]}"
