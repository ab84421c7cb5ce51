"""
Session endpoints.

Legacy (email/password) sessions are created, fetched, renewed and revoked
under one path; Google sign-in lands on the OAuth redirect callback.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from modules.auth.interfaces import IAuthService
from modules.auth.models import LegacyLoginRequest
from shared.models import ApiResponse, ok

from ..dependencies import get_auth_service
from ..middleware.auth import get_session_token

router = APIRouter()


@router.post("/legacy", response_model=ApiResponse)
async def login(
    request: LegacyLoginRequest,
    auth: IAuthService = Depends(get_auth_service),
) -> ApiResponse:
    grant = await auth.login_legacy(request.email, request.password)
    return ok("Session created", grant.model_dump())


@router.get("/legacy", response_model=ApiResponse)
async def get_session(
    token: str = Depends(get_session_token),
    auth: IAuthService = Depends(get_auth_service),
) -> ApiResponse:
    session = await auth.get_session(token)
    return ok(
        "Session found",
        {
            "customer_id": session.customer_id,
            "scopes": sorted(scope.value for scope in session.scopes),
        },
    )


@router.patch("/legacy", response_model=ApiResponse)
async def renew_session(
    token: str = Depends(get_session_token),
    auth: IAuthService = Depends(get_auth_service),
) -> ApiResponse:
    """Swap the current token for a fresh one with the same scopes."""
    grant = await auth.renew_session(token)
    return ok("Session renewed", grant.model_dump())


@router.delete("/legacy", response_model=ApiResponse)
async def revoke_session(
    token: str = Depends(get_session_token),
    auth: IAuthService = Depends(get_auth_service),
) -> ApiResponse:
    await auth.revoke_session(token)
    return ok("Session revoked")


@router.get("/google", response_model=ApiResponse)
async def google_callback(
    code: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    auth: IAuthService = Depends(get_auth_service),
) -> ApiResponse:
    """OAuth redirect target; signs the customer in, creating the account on first visit."""
    grant = await auth.login_google(code, error)
    return ok("Session created", grant.model_dump())
