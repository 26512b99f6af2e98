"""
Bearer token helpers.

Tokens are issued by the external auth service and only verified here.
Format: <user_id>.<exp>.<signature>, signature = HMAC-SHA256 over
"<user_id>.<exp>" truncated to 32 hex chars.
"""

import hmac
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

AUTH_SECRET = os.getenv("AUTH_SECRET", "timetrack-dev-secret-change-in-prod")
AUTH_TOKEN_EXPIRY_HOURS = int(os.getenv("AUTH_TOKEN_EXPIRY_HOURS", "24"))


def _sign(payload: str, secret: str) -> str:
    return hmac.new(secret.encode(), payload.encode(), "sha256").hexdigest()[:32]


def create_access_token(
    user_id: uuid.UUID,
    expires_delta: Optional[timedelta] = None,
    secret: Optional[str] = None,
) -> str:
    """Mint a token the way the auth service does. Used by the seeder and tests."""
    exp = int((datetime.now(timezone.utc) + (expires_delta or timedelta(hours=AUTH_TOKEN_EXPIRY_HOURS))).timestamp())
    payload = f"{user_id}.{exp}"
    return f"{payload}.{_sign(payload, secret or AUTH_SECRET)}"


def decode_access_token(token: str, secret: Optional[str] = None) -> Optional[dict]:
    """Return {"sub": user_id, "exp": int} for a valid token, else None."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    user_id_s, exp_s, sig = parts
    expected = _sign(f"{user_id_s}.{exp_s}", secret or AUTH_SECRET)
    if not hmac.compare_digest(sig.encode(), expected.encode()):
        return None
    try:
        exp = int(exp_s)
        user_id = uuid.UUID(user_id_s)
    except ValueError:
        return None
    if exp < int(datetime.now(timezone.utc).timestamp()):
        return None
    return {"sub": user_id, "exp": exp}
