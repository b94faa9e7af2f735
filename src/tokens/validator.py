import asyncio
import binascii

from loggers import get_logger
from src.core.errors.exceptions import (
    AlgorithmMismatchException,
    InvalidSignatureException,
    MalformedTokenException,
    TokenExpiredException,
    TokenNotYetActiveException,
)
from src.core.utils.datetime_utils import get_utc_now, is_within_expiration_date
from src.tokens.algorithms import resolve
from src.tokens.parser import decode_base64url, parse_token
from src.tokens.schemas import JWTAlgorithm, ParsedToken

logger = get_logger(__name__)


async def verify_signature(token: ParsedToken, key: bytes) -> bool:
    """
    Recompute the signature check over the token's original signing input.

    Returns False for an undecodable signature segment or any backend
    error, e.g. a key of the wrong type for the algorithm.
    """
    try:
        signature = decode_base64url(token.parts[2])
    except binascii.Error:
        return False

    capability = resolve(token.algorithm)
    try:
        return await asyncio.to_thread(
            capability.verify, key, signature, token.signing_input.encode("ascii")
        )
    except Exception as e:
        logger.info(f"Signature verification with {token.algorithm} errored: {e}")
        return False


async def validate_token(
    algorithm: JWTAlgorithm | str, key: bytes, token: str | ParsedToken
) -> ParsedToken:
    """
    Validate a token against an expected algorithm and verification key.

    Gates run in a fixed order and the first failure aborts:
    structure, algorithm identity, expiry, activation, signature.

    Args:
        algorithm: The algorithm the caller expects; must match exactly
        key: Verification key material (HMAC secret or PEM public key)
        token: A compact token string or an already parsed token

    Returns:
        ParsedToken: The token, unchanged

    Raises:
        MalformedTokenException: If the string is not a well-formed token
        AlgorithmMismatchException: If the token's alg differs from `algorithm`
        TokenExpiredException: If the current time is not before exp
        TokenNotYetActiveException: If the current time is before nbf
        InvalidSignatureException: If the signature does not verify
    """
    parsed = parse_token(token) if isinstance(token, str) else token
    if parsed is None:
        logger.info("Token rejected: malformed")
        raise MalformedTokenException("Invalid token")

    if parsed.algorithm != algorithm:
        logger.info(
            f"Token rejected: algorithm {parsed.algorithm} does not match {algorithm}"
        )
        raise AlgorithmMismatchException(
            "Invalid algorithm",
            {"expected": str(algorithm), "actual": parsed.algorithm.value},
        )

    now = get_utc_now()
    if parsed.expires_at is not None and not is_within_expiration_date(
        parsed.expires_at, now
    ):
        logger.info("Token rejected: expired")
        raise TokenExpiredException(
            "Token has expired", {"expires_at": parsed.expires_at.isoformat()}
        )

    # Activation at exactly nbf is allowed
    if parsed.not_before is not None and now < parsed.not_before:
        logger.info("Token rejected: not yet active")
        raise TokenNotYetActiveException(
            "Token is not yet active", {"not_before": parsed.not_before.isoformat()}
        )

    if not await verify_signature(parsed, key):
        logger.info("Token rejected: invalid signature")
        raise InvalidSignatureException("Invalid signature")

    return parsed
