"""Core utilities: exceptions, logging and middleware."""

from bookingdesk.core.exceptions import (
    AppException,
    AuthorizationError,
    Contention,
    IllegalTransition,
    MissingReason,
    NotFoundError,
    Unauthorized,
    UnknownCurrency,
    UnknownStatus,
    ValidationError,
)

__all__ = [
    "AppException",
    "AuthorizationError",
    "Contention",
    "IllegalTransition",
    "MissingReason",
    "NotFoundError",
    "Unauthorized",
    "UnknownCurrency",
    "UnknownStatus",
    "ValidationError",
]
