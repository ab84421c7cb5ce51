"""
Lemon Squeezy webhook endpoints.

The body is read as raw bytes and its signature checked before anything
parses it. Success and intentionally ignored events both return 200;
signature, payload and reconciliation failures return 400 so the sender's
retry policy decides what happens next.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from modules.billing.exceptions import WebhookVerificationError
from modules.billing.interfaces import ISubscriptionReconciler
from modules.billing.webhook import verify_signature
from shared.models import ApiResponse, ok

from ..dependencies import get_reconciler, get_webhook_secret

logger = logging.getLogger(__name__)

router = APIRouter()


async def verified_body(
    request: Request,
    x_signature: Optional[str] = Header(None),
    secret: str = Depends(get_webhook_secret),
) -> bytes:
    """Dependency returning the raw request body once its signature checks out."""
    raw_body = await request.body()
    if not verify_signature(raw_body, x_signature, secret):
        logger.warning("Rejected webhook with invalid signature on %s", request.url.path)
        raise WebhookVerificationError()
    return raw_body


@router.post("/orders", response_model=ApiResponse)
async def order_events(
    raw_body: bytes = Depends(verified_body),
    reconciler: ISubscriptionReconciler = Depends(get_reconciler),
) -> ApiResponse:
    result = await reconciler.handle_order_webhook(raw_body)
    return ok("Order event captured", result.model_dump())


@router.post("/subscriptions", response_model=ApiResponse)
async def subscription_events(
    raw_body: bytes = Depends(verified_body),
    reconciler: ISubscriptionReconciler = Depends(get_reconciler),
) -> ApiResponse:
    result = await reconciler.handle_subscription_webhook(raw_body)
    message = "Subscription event applied" if result.handled else "Subscription event ignored"
    return ok(message, result.model_dump())
