"""Auth routes: registration, sign-in flows, session and plan."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from backend.auth import create_access_token
from backend.middleware.access import (
    check_admin_key,
    get_identity,
    get_studio,
    get_token_claims,
    require_open,
    require_user,
)
from backend.models import AdminSignInRequest, AuthResponse, SignInRequest, SignUpRequest, UpgradeRequest
from scribe.errors import DuplicateEmail, InvalidCredentials
from scribe.identity import IdentityManager
from scribe.models import Plan, UserRecord
from scribe.studio import Studio

router = APIRouter()


def _public(user: UserRecord) -> UserRecord:
    return user.model_copy(update={"credential_hash": None})


def _signed_in(user: UserRecord) -> AuthResponse:
    return AuthResponse(user=_public(user), token=create_access_token(user.id))


@router.post("/auth/signup", response_model=AuthResponse, response_model_exclude_none=True)
async def signup(body: SignUpRequest, identity: IdentityManager = Depends(require_open)):
    """Create an account and sign it in."""
    try:
        user = await identity.register(body.name, body.email, body.password)
    except DuplicateEmail as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _signed_in(user)


@router.post("/auth/login", response_model=AuthResponse, response_model_exclude_none=True)
async def login(body: SignInRequest, identity: IdentityManager = Depends(require_open)):
    try:
        user = await identity.login(body.email, body.password)
    except InvalidCredentials as e:
        raise HTTPException(status_code=401, detail=str(e))
    return _signed_in(user)


@router.post("/auth/federated", response_model=AuthResponse, response_model_exclude_none=True)
async def login_federated(identity: IdentityManager = Depends(require_open)):
    """Sign in with the demo Google identity."""
    user = await identity.login_federated()
    return _signed_in(user)


@router.post("/auth/admin", response_model=AuthResponse, response_model_exclude_none=True)
async def login_admin(body: AdminSignInRequest, identity: IdentityManager = Depends(get_identity)):
    """Administrator sign-in with the deployment's admin key; stays available during maintenance."""
    check_admin_key(body.key)
    return _signed_in(identity.login_as_admin())


@router.post("/auth/logout")
async def logout(
    request: Request,
    claims: Optional[dict] = Depends(get_token_claims),
    identity: IdentityManager = Depends(get_identity),
):
    """Sign out the caller's token."""
    if claims:
        request.app.state.revocations.revoke(claims)
    identity.logout()
    return {"status": "signed_out"}


@router.get("/auth/me", response_model=UserRecord, response_model_exclude_none=True)
async def get_me(user: UserRecord = Depends(require_user)):
    """Current user, with today's usage counter."""
    return _public(user)


@router.post("/auth/upgrade", response_model=UserRecord, response_model_exclude_none=True)
async def upgrade(
    body: UpgradeRequest,
    user: UserRecord = Depends(require_user),
    identity: IdentityManager = Depends(get_identity),
    studio: Studio = Depends(get_studio),
):
    """Apply a plan change once the payment provider has confirmed it."""
    if body.plan == Plan.PREMIUM and not studio.config.get().shopier_config.is_enabled:
        raise HTTPException(status_code=503, detail="The payment system is currently under maintenance.")
    return _public(identity.upgrade_plan(body.plan))
