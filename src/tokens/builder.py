import asyncio
from collections.abc import Mapping
import json
from typing import Any

from jwt.utils import base64url_encode

from loggers import get_logger
from src.core.errors.exceptions import SigningFailedException
from src.core.utils.datetime_utils import (
    duration_to_seconds,
    get_utc_now,
    to_unix_seconds,
)
from src.tokens.algorithms import resolve
from src.tokens.schemas import JWTAlgorithm, JWTHeader, TokenOptions

logger = get_logger(__name__)


def encode_segment(value: Mapping[str, Any]) -> str:
    """Serialize to compact JSON and base64url-encode without padding."""
    raw = json.dumps(
        value, separators=(",", ":"), ensure_ascii=False, allow_nan=False
    )
    return base64url_encode(raw.encode("utf-8")).decode("ascii")


def build_header(algorithm: JWTAlgorithm) -> JWTHeader:
    return {"typ": "JWT", "alg": algorithm.value}


def build_payload(
    claims: Mapping[str, Any], options: TokenOptions | None = None
) -> dict[str, Any]:
    """
    Overlay the registered claims configured in `options` onto `claims`.

    Only options that were actually provided are written. An absent option
    writes nothing: the key is omitted unless `claims` already carries it,
    in which case the caller's value is kept.

    Args:
        claims: Application claims, copied verbatim
        options: Registered-claim settings

    Returns:
        dict: The payload ready for serialization
    """
    payload = dict(claims)
    if options is None:
        return payload

    overlay = {
        "aud": options.audience,
        "iss": options.issuer,
        "sub": options.subject,
        "jti": options.jwt_id,
    }
    payload.update({k: v for k, v in overlay.items() if v is not None})

    now_seconds = to_unix_seconds(get_utc_now())
    if options.expires_in is not None:
        payload["exp"] = now_seconds + duration_to_seconds(options.expires_in)
    if options.not_before is not None:
        payload["nbf"] = to_unix_seconds(options.not_before)
    if options.include_issued_at:
        payload["iat"] = now_seconds

    return payload


async def create_token(
    algorithm: JWTAlgorithm | str,
    claims: Mapping[str, Any],
    key: bytes,
    options: TokenOptions | None = None,
) -> str:
    """
    Create a signed compact token.

    The header is always {"typ": "JWT", "alg": algorithm}; `options.headers`
    is not merged into it.

    Args:
        algorithm: One of the twelve supported JWS algorithms
        claims: Application claims
        key: Signing key material (HMAC secret or PEM private key)
        options: Registered-claim settings

    Returns:
        str: "header.payload.signature"

    Raises:
        UnsupportedAlgorithmException: If the algorithm is not supported
        SigningFailedException: If the signing backend fails
    """
    capability = resolve(algorithm)
    if options is not None and options.headers:
        logger.debug("Custom headers are not merged into the token header")

    header_part = encode_segment(build_header(capability.algorithm))
    payload_part = encode_segment(build_payload(claims, options))
    signing_input = f"{header_part}.{payload_part}"

    try:
        signature = await asyncio.to_thread(
            capability.sign, key, signing_input.encode("ascii")
        )
    except Exception as e:
        logger.error(f"Signing with {capability.algorithm} failed: {e}", exc_info=True)
        raise SigningFailedException(
            "Token signing failed", {"algorithm": capability.algorithm.value}
        ) from e

    return f"{signing_input}.{base64url_encode(signature).decode('ascii')}"
