"""
Shared infrastructure for Identa backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: MongoDB and Redis client factories
- exceptions: Base exception classes
- models: Response envelope

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings, load_settings
from .database import (
    get_mongo_client,
    get_database,
    get_redis_client,
    close_clients,
    reset_client_cache,
)
from .exceptions import (
    IdentaError,
    NotFoundError,
    ValidationError,
    UnknownVariantError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    StorageError,
    ExternalServiceError,
    ConfigurationError,
)
from .models import ApiResponse, ok

__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
    "get_mongo_client",
    "get_database",
    "get_redis_client",
    "close_clients",
    "reset_client_cache",
    "IdentaError",
    "NotFoundError",
    "ValidationError",
    "UnknownVariantError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "StorageError",
    "ExternalServiceError",
    "ConfigurationError",
    "ApiResponse",
    "ok",
]
