"""
Billing module data models.

Two groups live here: the subscription sub-document embedded in every
customer record, and the Lemon Squeezy webhook payloads that drive it.
Webhook models only declare the attributes the reconciler reads; everything
else in the payload is accepted and ignored.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.exceptions import UnknownVariantError


class Slug(str, Enum):
    """Subscription tiers."""

    FREE = "free"
    PRO = "pro"

    @classmethod
    def parse(cls, raw: str) -> "Slug":
        try:
            return cls(raw.strip().lower())
        except (ValueError, AttributeError):
            raise UnknownVariantError("Slug", raw)


class Frequency(str, Enum):
    """Billing frequency of a subscription."""

    MONTHLY = "MONTHLY"
    ANNUALLY = "ANNUALLY"
    UNDEFINED = "UNDEFINED"  # free tier

    @classmethod
    def parse(cls, raw: str) -> "Frequency":
        try:
            return cls(raw.strip().upper())
        except (ValueError, AttributeError):
            raise UnknownVariantError("Frequency", raw)


class SubscriptionEventName(str, Enum):
    """Lemon Squeezy subscription events this service reconciles."""

    CREATED = "subscription_created"
    UPDATED = "subscription_updated"
    CANCELLED = "subscription_cancelled"
    RESUMED = "subscription_resumed"
    EXPIRED = "subscription_expired"
    PAUSED = "subscription_paused"
    UNPAUSED = "subscription_unpaused"
    PAYMENT_SUCCESS = "subscription_payment_success"
    PAYMENT_FAILED = "subscription_payment_failed"
    PAYMENT_RECOVERED = "subscription_payment_recovered"


class SubscriptionHistoryLog(BaseModel):
    """One entry of the append-only subscription history."""

    event: str = Field(..., description="Webhook event name")
    date: str = Field(..., description="Event timestamp from the provider")


class Subscription(BaseModel):
    """
    Subscription sub-document embedded in a customer.

    Never deleted: a customer without a paid plan holds a free-tier
    subscription. created_at tracks account creation, not billing events.
    """

    id: str = Field(..., description="Subscription ID (regenerated on subscription_created)")
    product_id: int = Field(default=0, description="Lemon Squeezy product ID")
    variant_id: int = Field(default=0, description="Lemon Squeezy variant ID")
    slug: Slug = Field(default=Slug.FREE, description="Tier")
    frequency: Frequency = Field(default=Frequency.UNDEFINED, description="Billing frequency")
    status: str = Field(default="", description="Provider status, mirrored verbatim")

    created_at: str = Field(..., description="Account creation time")
    updated_at: str = Field(..., description="Last subscription change")

    starts_at: str = Field(default="")
    ends_at: str = Field(default="")
    renews_at: str = Field(default="")

    history_logs: list[SubscriptionHistoryLog] = Field(default_factory=list)

    @classmethod
    def free_tier(cls, subscription_id: str, created_at: str) -> "Subscription":
        return cls(id=subscription_id, created_at=created_at, updated_at=created_at)


class ProductCatalog(BaseModel):
    """Configured Lemon Squeezy identifiers for the paid plan."""

    model_config = ConfigDict(frozen=True)

    pro_product_id: int
    pro_monthly_variant_id: int
    pro_annually_variant_id: int

    def frequency_for(self, variant_id: int) -> Frequency:
        """
        Map a variant to its billing frequency.

        Raises:
            UnknownVariantError: If the variant is not one of the configured plans
        """
        if variant_id == self.pro_monthly_variant_id:
            return Frequency.MONTHLY
        if variant_id == self.pro_annually_variant_id:
            return Frequency.ANNUALLY
        raise UnknownVariantError("variant_id", variant_id)

    def slug_for(self, product_id: int) -> Slug:
        return Slug.PRO if product_id == self.pro_product_id else Slug.FREE


# ---------------------------------------------------------------------------
# Webhook payloads
# ---------------------------------------------------------------------------


class CustomData(BaseModel):
    """Checkout custom data; carries our customer ID."""

    model_config = ConfigDict(extra="ignore")

    customer_id: str = Field(default="", max_length=100)


class WebhookMeta(BaseModel):
    model_config = ConfigDict(extra="ignore")

    event_name: str
    webhook_id: Optional[str] = None
    custom_data: Optional[CustomData] = None
    test_mode: Optional[bool] = None


class SubscriptionAttributes(BaseModel):
    model_config = ConfigDict(extra="ignore")

    store_id: Optional[int] = None
    customer_id: Optional[int] = None
    order_id: Optional[int] = None
    product_id: int
    variant_id: int
    product_name: Optional[str] = None
    variant_name: Optional[str] = None
    user_name: Optional[str] = None
    user_email: str = ""
    status: str
    status_formatted: Optional[str] = None
    cancelled: Optional[bool] = None
    renews_at: Optional[str] = None
    ends_at: Optional[str] = None
    trial_ends_at: Optional[str] = None
    created_at: str
    updated_at: str
    test_mode: Optional[bool] = None


class SubscriptionData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = "subscriptions"
    id: str
    attributes: SubscriptionAttributes


class SubscriptionEvent(BaseModel):
    """A Lemon Squeezy subscription webhook delivery."""

    model_config = ConfigDict(extra="ignore")

    meta: WebhookMeta
    data: SubscriptionData

    @property
    def customer_id(self) -> str:
        return self.meta.custom_data.customer_id if self.meta.custom_data else ""

    @property
    def user_email(self) -> str:
        return self.data.attributes.user_email.strip().lower()


class OrderEvent(BaseModel):
    """A Lemon Squeezy order webhook delivery (acknowledged, not processed)."""

    model_config = ConfigDict(extra="ignore")

    meta: WebhookMeta
    data: dict = Field(default_factory=dict)


class WebhookResult(BaseModel):
    """Outcome of handling one webhook delivery."""

    event_name: str
    handled: bool = Field(..., description="False when the event was intentionally ignored")
    customer_id: Optional[str] = None
