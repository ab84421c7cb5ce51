"""
Self-service endpoints for the signed-in customer.

Each mutation declares the scope it needs; TotalAccess sessions pass every
check.
"""

from fastapi import APIRouter, Depends, Query

from modules.auth.models import SessionData
from modules.auth.scopes import SessionScope
from modules.customers.interfaces import ICustomerService
from modules.customers.models import (
    AddEmailRequest,
    UpdateNameRequest,
    UpdatePasswordRequest,
    UpdatePreferencesRequest,
)
from shared.models import ApiResponse, ok

from ..dependencies import get_customer_service
from ..middleware.auth import require_scopes

router = APIRouter()


@router.patch("/name", response_model=ApiResponse)
async def update_name(
    request: UpdateNameRequest,
    session: SessionData = Depends(require_scopes(SessionScope.UPDATE_NAME)),
    customers: ICustomerService = Depends(get_customer_service),
) -> ApiResponse:
    name = await customers.update_name(session.customer_id, request)
    return ok("Name updated", {"name": name})


@router.patch("/password", response_model=ApiResponse)
async def update_password(
    request: UpdatePasswordRequest,
    session: SessionData = Depends(require_scopes(SessionScope.TOTAL_ACCESS)),
    customers: ICustomerService = Depends(get_customer_service),
) -> ApiResponse:
    """Change the password of a legacy (email/password) account."""
    await customers.update_password(session.customer_id, request)
    return ok("Password updated")


@router.patch("/preferences", response_model=ApiResponse)
async def update_preferences(
    request: UpdatePreferencesRequest,
    session: SessionData = Depends(require_scopes(SessionScope.UPDATE_PREFERENCES)),
    customers: ICustomerService = Depends(get_customer_service),
) -> ApiResponse:
    preferences = await customers.update_preferences(session.customer_id, request)
    return ok("Preferences updated", {"preferences": preferences.model_dump()})


@router.patch("/emails", response_model=ApiResponse)
async def add_email(
    request: AddEmailRequest,
    session: SessionData = Depends(require_scopes(SessionScope.UPDATE_EMAIL_ADDRESSES)),
    customers: ICustomerService = Depends(get_customer_service),
) -> ApiResponse:
    """Add a secondary, unverified email address and send its verification link."""
    email = await customers.add_email(session.customer_id, request)
    return ok("Email added", {"email": email.model_dump()})


@router.get("/emails/verify", response_model=ApiResponse)
async def verify_email(
    token: str = Query(..., min_length=1, description="One-time verification token"),
    customers: ICustomerService = Depends(get_customer_service),
) -> ApiResponse:
    """Redeem a verification link. No session is required; the token is the credential."""
    address = await customers.verify_email(token)
    return ok("Email verified", {"email": address})
