from collections.abc import Mapping
from datetime import timedelta
from typing import Any
from uuid import uuid4

from loggers import get_logger
from src.core.errors.exceptions import InfrastructureException, UnauthorizedException
from src.main.config import config
from src.tokens.builder import create_token
from src.tokens.schemas import ParsedToken, TokenOptions
from src.tokens.validator import validate_token

logger = get_logger(__name__)


async def create_access_token(
    claims: Mapping[str, Any],
    *,
    subject: str | None = None,
    audience: str | None = None,
) -> str:
    """
    Create a new access token with the configured algorithm and signing key

    Args:
        claims: Application claims to embed
        subject: Optional subject (usually the user ID)
        audience: Optional audience
    Returns:
        str: Encoded access token

    Raises:
        InfrastructureException: If no signing key is configured
    """
    key = config.jwt.signing_key
    if key is None:
        raise InfrastructureException("JWT signing key is not configured")

    options = TokenOptions(
        expires_in=timedelta(minutes=config.jwt.ACCESS_TOKEN_EXPIRE_MINUTES),
        issuer=config.jwt.ISSUER,
        subject=subject,
        audience=audience,
        include_issued_at=config.jwt.INCLUDE_ISSUED_AT,
        jwt_id=str(uuid4()),
    )
    return await create_token(config.jwt.ALGORITHM, claims, key, options)


async def verify_access_token(token: str) -> ParsedToken:
    """
    Validate an access token against the configured algorithm and verification key.

    When an issuer is configured, tokens from any other issuer are rejected.

    Raises:
        InfrastructureException: If no verification key is configured
        UnauthorizedException: If the token fails any validation gate
    """
    key = config.jwt.verification_key
    if key is None:
        raise InfrastructureException("JWT verification key is not configured")

    parsed = await validate_token(config.jwt.ALGORITHM, key, token)

    if config.jwt.ISSUER is not None and parsed.issuer != config.jwt.ISSUER:
        logger.info("Token rejected: unexpected issuer")
        raise UnauthorizedException(
            "Invalid issuer",
            {"expected": config.jwt.ISSUER, "actual": parsed.issuer},
        )
    return parsed
