"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception.

    Every subclass carries a stable machine-readable ``code`` and says whether
    the caller may retry the same request unchanged.
    """

    code: str = "internal_error"
    retryable: bool = False

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.context = context or {}
        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def to_dict(self) -> dict[str, Any]:
        """Structured error body."""
        return {
            "detail": self.detail,
            "code": self.code,
            "retryable": self.retryable,
            **self.context,
        }


class ValidationError(AppException):
    """Validation error exception."""

    code = "validation_error"

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    code = "not_found"

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        self.resource = resource
        self.identifier = identifier
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthorizationError(AppException):
    """Actor is not allowed to perform the operation."""

    code = "unauthorized"

    def __init__(self, detail: str = "You don't have permission to perform this action") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


# Name used throughout the lifecycle engine.
Unauthorized = AuthorizationError


class UnknownCurrency(AppException):
    """Currency code is not registered in the catalog."""

    code = "unknown_currency"

    def __init__(self, currency_code: str) -> None:
        self.currency_code = currency_code
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown currency: {currency_code!r}",
            context={"currency_code": currency_code},
        )


class UnknownStatus(AppException):
    """Booking status code outside the registry."""

    code = "unknown_status"

    def __init__(self, status_code: Any) -> None:
        self.status = status_code
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown booking status: {status_code!r}",
        )


class IllegalTransition(AppException):
    """No transition is defined for the booking's status and the attempted action."""

    code = "illegal_transition"

    def __init__(self, current_status: int, action: str, detail: str | None = None) -> None:
        self.current_status = int(current_status)
        self.action = action
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail or f"Action '{action}' is not allowed from booking status {int(current_status)}",
            context={"current_status": int(current_status), "action": action},
        )


class MissingReason(AppException):
    """Transition requires a non-empty reason."""

    code = "missing_reason"

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Action '{action}' requires a reason",
            context={"action": action},
        )


class Contention(AppException):
    """Booking is locked by a concurrent transition; safe to retry."""

    code = "contention"
    retryable = True

    def __init__(self, booking_id: int, retry_after: int = 1) -> None:
        self.booking_id = booking_id
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Booking {booking_id} is being updated by another request. Please retry.",
            headers={"Retry-After": str(retry_after)},
            context={"booking_id": booking_id},
        )
