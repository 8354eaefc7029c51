"""Reversible obfuscation of QR payloads.

A token is the hex encoding of ``payload + secret``. Decoding hex-decodes the
token, checks that it ends with the shared secret and strips it.

This is obfuscation, not signing: anyone who learns the secret can read and
forge tokens, and the secret is one fixed value shared by every payload. No
MAC or per-payload nonce is involved.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from ..core.exceptions import DecodeError


def _require_secret(secret: str) -> None:
    if not secret:
        raise ValueError("Secret is required")


def decode_secret(raw: str) -> str:
    """Decode a base64-at-rest secret; values that are not base64 are used as-is."""
    try:
        return base64.b64decode(raw, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return raw


def obfuscate_payload(payload: str, secret: str) -> str:
    _require_secret(secret)
    return (payload + secret).encode("utf-8").hex()


def deobfuscate_payload(token: str, secret: str) -> str:
    _require_secret(secret)
    try:
        payload_with_secret = bytes.fromhex(token.strip()).decode("utf-8")
    except (AttributeError, TypeError, ValueError) as exc:
        raise DecodeError("Invalid or malformed QR") from exc

    if not payload_with_secret.endswith(secret):
        raise DecodeError("Invalid or malformed QR: secret mismatch")
    return payload_with_secret[: -len(secret)]


def obfuscate_json_payload(payload: Any, secret: str) -> str:
    _require_secret(secret)
    return obfuscate_payload(json.dumps(payload, separators=(",", ":")), secret)


def deobfuscate_json_payload(token: str, secret: str) -> Any:
    json_string = deobfuscate_payload(token, secret)
    try:
        return json.loads(json_string)
    except ValueError as exc:
        raise DecodeError("Invalid or malformed QR: payload is not JSON") from exc
