from __future__ import annotations

import json
from typing import Any

from jwt.utils import base64url_decode, base64url_encode


def encode_raw_segment(value: Any) -> str:
    """Encode a JSON value, or a str taken verbatim as the segment's text."""
    text = value if isinstance(value, str) else json.dumps(value)
    return base64url_encode(text.encode("utf-8")).decode("ascii")


def build_raw_token(
    payload: Any,
    *,
    header: Any | None = None,
    signature: bytes = b"signature",
) -> str:
    if header is None:
        header = {"typ": "JWT", "alg": "HS256"}
    return ".".join(
        [
            encode_raw_segment(header),
            encode_raw_segment(payload),
            base64url_encode(signature).decode("ascii"),
        ]
    )


def decode_segment_json(segment: str) -> Any:
    return json.loads(base64url_decode(segment))


def flip_signature_bit(token: str, *, byte_index: int = 0, bit: int = 0) -> str:
    header, payload, signature = token.split(".")
    raw = bytearray(base64url_decode(signature))
    raw[byte_index] ^= 1 << bit
    return f"{header}.{payload}.{base64url_encode(bytes(raw)).decode('ascii')}"


_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"


def with_noncanonical_tail(segment: str) -> str:
    """Set an unused trailing bit; lenient decoders yield the same bytes."""
    if len(segment) % 4 == 0:
        raise ValueError("segment has no unused trailing bits")
    last = _ALPHABET.index(segment[-1])
    return segment[:-1] + _ALPHABET[last ^ 1]
