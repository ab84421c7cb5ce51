"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
MongoDB collection access and storage-error translation.
"""

import logging
from typing import TypeVar, Generic

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from .exceptions import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Motor collection access via self._collection
    - Generic type parameter for model type hints
    - _storage_error() to surface driver failures uniformly

    Subclasses should implement domain-specific data access methods
    and handle document-to-Pydantic model mapping internally.

    Example:
        class CustomerRepository(BaseRepository[Customer]):
            async def get(self, customer_id: str) -> Optional[Customer]:
                try:
                    doc = await self._collection.find_one({"id": customer_id})
                except PyMongoError as e:
                    raise self._storage_error("fetching customer", e)
                return Customer.model_validate(doc) if doc else None
    """

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        """
        Initialize the repository with a Motor collection.

        Args:
            collection: Collection the repository reads and writes.
        """
        self._collection = collection

    @staticmethod
    def _storage_error(action: str, error: PyMongoError) -> StorageError:
        logger.error("Database error while %s: %s", action, error)
        # The driver message can include connection strings; keep it out of the response.
        return StorageError(f"Database error while {action}", store="mongodb")
