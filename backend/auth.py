"""Authentication utilities: signed bearer tokens for API clients."""
import os
import uuid
from datetime import datetime, timezone, timedelta
from typing import Optional

from jose import jwt, JWTError

# JWT config
SECRET_KEY = os.getenv("SCRIBE_SECRET_KEY", "scribe-dev-secret-change-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = 24


def create_access_token(user_id: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)
    payload = {"sub": user_id, "jti": uuid.uuid4().hex, "exp": expire}
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Decode a JWT and return its claims, or None if invalid or expired."""
    try:
        claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if not claims.get("sub") or not claims.get("jti"):
        return None
    return claims


class TokenRevocations:
    """Token ids signed out before they expired. Held in memory per process."""

    def __init__(self):
        self._revoked: dict[str, float] = {}

    def revoke(self, claims: dict) -> None:
        self._revoked[claims["jti"]] = float(claims.get("exp", 0))
        self._prune()

    def is_revoked(self, claims: dict) -> bool:
        return claims["jti"] in self._revoked

    def _prune(self) -> None:
        now = datetime.now(timezone.utc).timestamp()
        for jti in [j for j, exp in self._revoked.items() if exp < now]:
            del self._revoked[jti]
