"""
Customer repository for database access.

Encapsulates all MongoDB queries against the customers collection.
Every mutation is a partial update ($set / $push) issued through a single
update_one call; documents are never replaced wholesale, so concurrent
writers touching different fields cannot clobber each other.
"""

from typing import Any, Optional

from pymongo import ASCENDING, IndexModel
from pymongo.errors import DuplicateKeyError, PyMongoError

from shared.exceptions import ValidationError
from shared.repository import BaseRepository
from .exceptions import EmailTakenError
from .models import MAX_EMAILS, Customer, Email

COLLECTION_NAME = "customers"

# Never leak Mongo's internal ObjectId into the models.
_PROJECTION = {"_id": 0}

# Uniqueness of customer IDs and email addresses (across all customers).
INDEXES = [
    IndexModel([("id", ASCENDING)], name="customer_id_unique", unique=True),
    IndexModel([("emails.address", ASCENDING)], name="email_address_unique", unique=True),
]


class CustomerRepository(BaseRepository[Customer]):
    """
    Repository for customer data access.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for verifying session scopes.
    """

    @staticmethod
    def build_filter(customer_id: str = "", email: str = "") -> dict[str, Any]:
        """
        Build an id-or-email filter from whichever parts are present.

        Raises:
            ValidationError: If both the ID and the email are empty
        """
        clauses: list[dict[str, Any]] = []
        if customer_id:
            clauses.append({"id": customer_id})
        if email:
            clauses.append({"emails": {"$elemMatch": {"address": email.lower()}}})
        if not clauses:
            raise ValidationError(
                "A customer ID or email address is required",
                code="MISSING_CUSTOMER_IDENTIFIER",
            )
        if len(clauses) == 1:
            return clauses[0]
        return {"$or": clauses}

    async def find_by_id_or_email(
        self,
        customer_id: str = "",
        email: str = "",
    ) -> Optional[Customer]:
        """
        Find a customer by ID, email address, or either.

        Returns:
            The matching Customer, or None if nothing matched.
        """
        query = self.build_filter(customer_id, email)
        try:
            doc = await self._collection.find_one(query, _PROJECTION)
        except PyMongoError as e:
            raise self._storage_error("fetching customer", e)
        return Customer.model_validate(doc) if doc else None

    async def get_by_id(self, customer_id: str) -> Optional[Customer]:
        return await self.find_by_id_or_email(customer_id=customer_id)

    async def get_by_email(self, email: str) -> Optional[Customer]:
        return await self.find_by_id_or_email(email=email)

    async def insert(self, customer: Customer) -> Customer:
        """
        Insert a new customer document.

        Raises:
            EmailTakenError: If a unique index rejects the document
        """
        document = customer.model_dump(mode="json", by_alias=True)
        try:
            await self._collection.insert_one(document)
        except DuplicateKeyError:
            raise EmailTakenError()
        except PyMongoError as e:
            raise self._storage_error("inserting customer", e)
        return customer

    async def update_by_id_or_email(
        self,
        query: dict[str, Any],
        set_fields: dict[str, Any],
        push_fields: Optional[dict[str, Any]] = None,
    ) -> bool:
        """
        Apply a partial update to the first matching customer.

        Args:
            query: Filter, usually from build_filter()
            set_fields: Dotted paths to overwrite
            push_fields: Dotted array paths to append one value to each

        Returns:
            True if a customer matched the filter.
        """
        update: dict[str, Any] = {"$set": set_fields}
        if push_fields:
            update["$push"] = push_fields
        try:
            result = await self._collection.update_one(query, update)
        except PyMongoError as e:
            raise self._storage_error("updating customer", e)
        return result.matched_count > 0

    async def mark_email_verified(self, address: str, updated_at: str) -> bool:
        """Flip the verified flag of one email entry; returns False if no customer owns it."""
        try:
            result = await self._collection.update_one(
                {"emails.address": address},
                {"$set": {"emails.$.verified": True, "updated_at": updated_at}},
            )
        except PyMongoError as e:
            raise self._storage_error("verifying email", e)
        return result.matched_count > 0

    async def push_email(
        self,
        customer_id: str,
        email: Email,
        updated_at: str,
        max_emails: int = MAX_EMAILS,
    ) -> bool:
        """
        Append an email to a customer while the list is below max_emails.

        The size guard lives in the filter, so two concurrent adds cannot
        push the list past the limit.

        Returns:
            False if the customer is missing or already at the limit.
        """
        query = {
            "id": customer_id,
            f"emails.{max_emails - 1}": {"$exists": False},
            "emails.address": {"$ne": email.address},
        }
        update = {
            "$push": {"emails": email.model_dump(mode="json")},
            "$set": {"updated_at": updated_at},
        }
        try:
            result = await self._collection.update_one(query, update)
        except DuplicateKeyError:
            raise EmailTakenError()
        except PyMongoError as e:
            raise self._storage_error("adding email", e)
        return result.matched_count > 0

    async def ensure_indexes(self) -> list[str]:
        """Create the declared indexes; existing ones are left as they are."""
        try:
            return await self._collection.create_indexes(INDEXES)
        except PyMongoError as e:
            raise self._storage_error("creating indexes", e)

    async def index_names(self) -> list[str]:
        try:
            info = await self._collection.index_information()
        except PyMongoError as e:
            raise self._storage_error("listing indexes", e)
        return sorted(info)
