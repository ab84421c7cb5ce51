"""
Scope-filtered views of a customer record.

Each optional field of PrivateSensitiveCustomer is governed by exactly one
scope; fields whose scope the session lacks are left as None.
"""

from modules.auth.scopes import ScopeSet, SessionScope

from .models import Customer, PrivateSensitiveCustomer, PublicCustomer

# Fields disclosed together under ViewPublicProfile.
PUBLIC_PROFILE_FIELDS = ("name", "class_", "preferences", "created_at", "updated_at", "deleted")


def filter_customer_for_scopes(customer: Customer, scopes: ScopeSet) -> PrivateSensitiveCustomer:
    """Project customer onto the fields scopes allow."""
    if scopes.has_total_access:
        return PrivateSensitiveCustomer(
            id=customer.id,
            emails=customer.emails,
            subscription=customer.subscription,
            auth_provider=customer.auth_provider,
            **{field: getattr(customer, field) for field in PUBLIC_PROFILE_FIELDS},
        )

    fields = {}
    if SessionScope.VIEW_PUBLIC_ID in scopes:
        fields["id"] = customer.id
    if SessionScope.VIEW_EMAIL_ADDRESSES in scopes:
        fields["emails"] = customer.emails
    if SessionScope.VIEW_SUBSCRIPTION in scopes:
        fields["subscription"] = customer.subscription
    if SessionScope.VIEW_PRIVATE_SENSITIVE_PROFILE in scopes:
        fields["auth_provider"] = customer.auth_provider
    if SessionScope.VIEW_PUBLIC_PROFILE in scopes:
        for field in PUBLIC_PROFILE_FIELDS:
            fields[field] = getattr(customer, field)
    return PrivateSensitiveCustomer(**fields)


def to_public_customer(customer: Customer) -> PublicCustomer:
    return PublicCustomer(
        id=customer.id,
        name=customer.name,
        class_=customer.class_,
        created_at=customer.created_at,
    )
