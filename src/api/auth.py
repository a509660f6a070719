"""HMAC-signed owner tokens and the request dependency that checks them.

# ─── HOW OWNER TOKENS WORK ───────────────────────────────────────────
#
# Every feedback and analysis request must carry
#     Authorization: Bearer {owner_id}.{hmac_hex}
# where hmac_hex = HMAC-SHA256(AUTH_SECRET, owner_id).  The owner id is
# the key every record and result is stored under.
#
# Validation checks:
#   1. Header present with the Bearer scheme
#   2. Token splits into owner id and signature
#   3. Signature matches (constant-time comparison)
#
# Dev mode: if AUTH_SECRET is empty, the bearer value itself is trusted
# as the owner id so local development doesn't need token issuance.
# ─────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import hashlib
import hmac

from fastapi import Request

from src.utils.errors import AuthenticationError

_BEARER_SCHEME = "bearer"


def _sign(owner_id: str, secret: str) -> str:
    return hmac.new(
        secret.encode("utf-8"),
        owner_id.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def create_owner_token(owner_id: str, secret: str) -> str:
    """Issue a bearer token for *owner_id*.

    With an empty *secret* (dev mode) the token is the owner id itself.
    """
    if not owner_id:
        msg = "owner_id must not be empty"
        raise ValueError(msg)
    if not secret:
        return owner_id
    return f"{owner_id}.{_sign(owner_id, secret)}"


def verify_owner_token(token: str, secret: str) -> str | None:
    """Return the owner id carried by *token*, or None if it is invalid."""
    token = token.strip()
    if not token:
        return None
    if not secret:
        return token

    owner_id, sep, signature = token.rpartition(".")
    if not sep or not owner_id or not signature:
        return None
    if not hmac.compare_digest(_sign(owner_id, secret), signature):
        return None
    return owner_id


async def require_owner(request: Request) -> str:
    """FastAPI dependency resolving the caller's owner id.

    Raises:
        AuthenticationError: If the header is missing or the token is invalid.
    """
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != _BEARER_SCHEME or not token:
        raise AuthenticationError()

    secret = getattr(request.app.state, "auth_secret", "")
    owner_id = verify_owner_token(token, secret)
    if owner_id is None:
        raise AuthenticationError("Invalid authentication token.")
    return owner_id
