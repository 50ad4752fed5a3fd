"""
Cart error taxonomy.

Exceptions here are raised only by collaborators (HTTP API, snapshot store).
The cart engine turns them into ``CartErrorKind`` values and never lets them
reach its callers.
"""
from enum import Enum


class RocketCartError(Exception):
    """Base exception for RocketCart."""


class ApiError(RocketCartError):
    """Stock or catalog request failed (network, HTTP status, bad payload)."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class PersistenceError(RocketCartError):
    """Cart snapshot could not be written to the store."""


class CartErrorKind(str, Enum):
    """Why a cart operation did not commit."""

    STOCK_EXCEEDED = "stock_exceeded"
    LOOKUP_FAILURE = "lookup_failure"
    NOT_FOUND = "not_found"
    PERSISTENCE_FAILURE = "persistence_failure"


class CartOperation(str, Enum):
    """Mutating operations exposed by the cart engine."""

    ADD = "add"
    REMOVE = "remove"
    UPDATE = "update"


# Snapshot errors
ERROR_STORE_NOT_CONFIGURED = "UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set"
ERROR_STORE_WRITE_REJECTED = "Cart snapshot write was rejected by the store"

# API errors
ERROR_API_UNREACHABLE = "Shop API unreachable"
ERROR_API_BAD_PAYLOAD = "Shop API returned an unexpected payload"
