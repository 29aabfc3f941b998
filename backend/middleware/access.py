"""Per-client identity, role and maintenance-mode checks as FastAPI dependencies."""

import os
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.auth import decode_token
from scribe.identity import IdentityManager
from scribe.models import UserRecord
from scribe.session import Session
from scribe.studio import Studio

MAINTENANCE_DETAIL = "The system is under maintenance. Please check back shortly."

security = HTTPBearer(auto_error=False)


def get_studio(request: Request) -> Studio:
    return request.app.state.studio


def get_token_claims(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[dict]:
    """Claims of the caller's bearer token; None when absent, invalid or signed out."""
    if not credentials:
        return None
    claims = decode_token(credentials.credentials)
    if claims is None or request.app.state.revocations.is_revoked(claims):
        return None
    return claims


async def get_identity(
    claims: Optional[dict] = Depends(get_token_claims),
    studio: Studio = Depends(get_studio),
) -> IdentityManager:
    """Identity manager bound to this caller's own session.

    The session starts from the caller's stored user record, or anonymous when
    the token is missing or its user no longer exists (after a reset or restore).
    """
    user = studio.identity.users.get(claims["sub"]) if claims else None
    return studio.identity_for(Session.detached(user))


async def require_open(
    identity: IdentityManager = Depends(get_identity),
    studio: Studio = Depends(get_studio),
) -> IdentityManager:
    """Reject sign-in flows while maintenance mode is on."""
    if studio.config.get().maintenance_mode:
        raise HTTPException(status_code=503, detail=MAINTENANCE_DETAIL)
    return identity


async def require_user(
    identity: IdentityManager = Depends(get_identity),
    studio: Studio = Depends(get_studio),
) -> UserRecord:
    """Return the signed-in user; only admins pass during maintenance."""
    user = identity.get_current_user()
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if studio.config.get().maintenance_mode and not user.is_admin:
        raise HTTPException(status_code=503, detail=MAINTENANCE_DETAIL)
    return user


async def require_admin(user: UserRecord = Depends(require_user)) -> UserRecord:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="This area is for administrators only.")
    return user


def check_admin_key(key: str) -> None:
    """Admin sign-in needs SCRIBE_ADMIN_KEY; without it the flow is disabled."""
    expected = os.getenv("SCRIBE_ADMIN_KEY")
    if not expected:
        raise HTTPException(status_code=403, detail="Administrator sign-in is disabled.")
    if not secrets.compare_digest(key.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=403, detail="Administrator key is incorrect.")
