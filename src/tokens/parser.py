"""
Structural decoding of compact tokens.

Parsing never touches keys or signatures; it only answers whether a string
is a well-formed token and, if so, what it claims. A malformed token yields
None rather than an exception, so callers can treat it as ordinary data.
"""

import binascii
import json
import re
from types import MappingProxyType
from typing import Any

from jwt.utils import base64url_decode, base64url_encode

from loggers import get_logger
from src.core.utils.datetime_utils import from_unix_seconds
from src.tokens.schemas import (
    NUMERIC_CLAIMS,
    STRING_CLAIMS,
    JWTAlgorithm,
    ParsedToken,
)

logger = get_logger(__name__)

BASE64URL_SEGMENT = re.compile(r"[A-Za-z0-9_-]+")


class _RejectedToken(Exception):
    """Internal signal that aborts a parse; never leaves this module."""


def _reject_constant(name: str) -> Any:
    # json accepts NaN/Infinity by default, which are not valid JSON values
    raise _RejectedToken(f"non-standard JSON constant {name}")


def split_token(token: str) -> tuple[str, str, str] | None:
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        return None
    return parts[0], parts[1], parts[2]


def decode_base64url(segment: str) -> bytes:
    """
    Strictly decode an unpadded base64url segment.

    The whole segment must be in the base64url alphabet and be the canonical
    encoding of its bytes, so unused trailing bits must be zero.

    Raises:
        binascii.Error: If the segment is not canonical base64url
    """
    if not BASE64URL_SEGMENT.fullmatch(segment):
        raise binascii.Error("segment is not base64url")
    raw = base64url_decode(segment)
    if base64url_encode(raw).decode("ascii") != segment:
        raise binascii.Error("segment is not canonical base64url")
    return raw


def decode_segment(segment: str) -> Any:
    """Base64url-decode a segment and parse it as UTF-8 JSON."""
    try:
        raw = decode_base64url(segment)
        return json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise _RejectedToken(f"segment is not base64url JSON: {e}")


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid timestamp
    return isinstance(value, int | float) and not isinstance(value, bool)


def _read_header(header: Any) -> JWTAlgorithm:
    if not isinstance(header, dict):
        raise _RejectedToken("header is not a JSON object")
    if "typ" not in header or "alg" not in header:
        raise _RejectedToken("header lacks typ or alg")
    if not isinstance(header["typ"], str) or header["typ"] != "JWT":
        raise _RejectedToken("header typ is not JWT")
    alg = header["alg"]
    if not isinstance(alg, str) or alg not in JWTAlgorithm.values():
        raise _RejectedToken("header alg is not a supported algorithm")
    return JWTAlgorithm(alg)


def _read_claims(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise _RejectedToken("payload is not a JSON object")

    for name in NUMERIC_CLAIMS:
        if name in payload and not _is_number(payload[name]):
            raise _RejectedToken(f"claim {name} is not a number")
    for name in STRING_CLAIMS:
        if name in payload and not isinstance(payload[name], str):
            raise _RejectedToken(f"claim {name} is not a string")

    try:
        return {
            "expires_at": _timestamp(payload, "exp"),
            "not_before": _timestamp(payload, "nbf"),
            "issued_at": _timestamp(payload, "iat"),
            "issuer": payload.get("iss"),
            "subject": payload.get("sub"),
            "audience": payload.get("aud"),
            "jwt_id": payload.get("jti"),
        }
    except (OverflowError, OSError, ValueError) as e:
        raise _RejectedToken(f"timestamp claim out of range: {e}")


def _timestamp(payload: dict[str, Any], name: str) -> Any:
    if name not in payload:
        return None
    return from_unix_seconds(payload[name])


def parse_token(token: str) -> ParsedToken | None:
    """
    Decode a compact token into a ParsedToken without verifying it.

    Args:
        token: The compact serialization "header.payload.signature"

    Returns:
        ParsedToken | None: The decoded token, or None when the string is
        not a well-formed token (wrong segment count, bad base64url or JSON,
        unexpected header, or a registered claim of the wrong type)
    """
    if not isinstance(token, str):
        return None

    parts = split_token(token)
    if parts is None:
        logger.debug("Token rejected: expected three non-empty segments")
        return None

    try:
        algorithm = _read_header(decode_segment(parts[0]))
        payload = decode_segment(parts[1])
        claims = _read_claims(payload)
    except _RejectedToken as e:
        logger.debug(f"Token rejected: {e}")
        return None

    return ParsedToken(
        value=token,
        header=MappingProxyType({"typ": "JWT", "alg": algorithm.value}),
        payload=MappingProxyType(payload),
        parts=parts,
        algorithm=algorithm,
        **claims,
    )
