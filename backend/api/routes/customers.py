"""
Customer endpoints.

Sign-up, the scope-filtered private profile and the public profile.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from modules.auth.models import SessionData
from modules.auth.scopes import ScopeSet
from modules.customers.interfaces import ICustomerService
from modules.customers.models import CreateCustomerRequest
from modules.customers.views import filter_customer_for_scopes
from shared.models import ApiResponse, ok

from ..dependencies import get_customer_service
from ..middleware.auth import get_current_session

router = APIRouter()
public_router = APIRouter()


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    request: CreateCustomerRequest,
    customers: ICustomerService = Depends(get_customer_service),
) -> ApiResponse:
    """
    Create a customer with email and password.

    The customer starts on the free tier with one unverified main email.
    """
    customer = await customers.create_customer(request)
    view = filter_customer_for_scopes(customer, ScopeSet.total_access())
    return ok("Customer created", {"customer": view.model_dump(mode="json", by_alias=True)})


@router.get("/me", response_model=ApiResponse)
async def get_customer(
    id: Optional[str] = Query(None, description="Customer ID; defaults to the session owner"),
    session: SessionData = Depends(get_current_session),
    customers: ICustomerService = Depends(get_customer_service),
) -> ApiResponse:
    """
    Get the caller's own record.

    Fields the session's scopes do not cover are returned as null.
    """
    view = await customers.get_customer_for_session(session, id)
    return ok("Customer found", {"customer": view.model_dump(mode="json", by_alias=True)})


@public_router.get("/{customer_id}", response_model=ApiResponse)
async def get_public_customer(
    customer_id: str,
    customers: ICustomerService = Depends(get_customer_service),
) -> ApiResponse:
    """Get the public profile of any customer."""
    view = await customers.get_public_customer(customer_id)
    return ok("Customer found", {"customer": view.model_dump(mode="json", by_alias=True)})
