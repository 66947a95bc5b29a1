"""Domain layer: bearer token decoding.

Tokens are three-segment JWTs. Only the payload is read; the signature is
checked by the backend on every request.
"""

from __future__ import annotations

import base64
import binascii
import json
import time
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from demandhub.common.exceptions import InvalidTokenFormat
from demandhub.common.models import Identity, TokenClaims


def _payload(token: str) -> dict[str, Any]:
    parts = token.split(".")
    if len(parts) != 3 or not parts[1]:
        msg = "Invalid token format"
        raise InvalidTokenFormat(msg)
    segment = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        data = json.loads(base64.urlsafe_b64decode(segment))
    except (binascii.Error, ValueError) as err:
        msg = "Invalid token format"
        raise InvalidTokenFormat(msg) from err
    if not isinstance(data, dict):
        msg = "Invalid token format"
        raise InvalidTokenFormat(msg)
    return data


def decode(token: str) -> Identity:
    """Decode the token's claims into an Identity (role lower-cased)."""
    try:
        claims = TokenClaims.model_validate(_payload(token))
    except PydanticValidationError as err:
        msg = "Invalid token format"
        raise InvalidTokenFormat(msg) from err
    return Identity(
        id=claims.id, email=claims.email, name=claims.name, role=claims.role
    )


def is_expired(token: str, now: float | None = None) -> bool:
    """Return True if the token is unreadable or its exp claim is in the past.

    A token without an exp claim never expires.
    """
    try:
        exp = _payload(token).get("exp")
    except InvalidTokenFormat:
        return True
    if exp is None:
        return False
    if not isinstance(exp, (int, float)) or isinstance(exp, bool):
        return True
    current = time.time() if now is None else now
    return exp < current
