"""Custom exceptions and error response schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standardized error response."""

    error: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class AppError(Exception):
    """Base exception for all app-level errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> ErrorDetail:
        """Convert to API response schema."""
        return ErrorDetail(
            error=self.message,
            code=self.code,
            details=self.details if self.details else None,
        )


class ValidationError(AppError):
    """Raised when request validation fails."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details=details,
        )


class NotFoundError(AppError):
    """Raised when resource doesn't exist."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource} with ID {resource_id} not found",
            status_code=404,
            details={"resource": resource, "resource_id": resource_id},
        )


class ConflictError(AppError):
    """Raised when resource already exists or operation conflicts."""

    def __init__(self, message: str, details: Optional[dict] = None, code: str = "CONFLICT"):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details,
        )


class InvalidStateError(AppError):
    """Raised when operation conflicts with resource state."""

    def __init__(
        self, message: str, details: Optional[dict] = None, code: str = "INVALID_STATE"
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=400,
            details=details,
        )


class AuthenticationRequiredError(AppError):
    """Raised when there is no valid session."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401,
        )


class BadCredentialsError(AppError):
    """Raised when an allow-listed email fails password verification."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(
            code="BAD_CREDENTIALS",
            message=message,
            status_code=401,
        )


class AuthorizationDeniedError(AppError):
    """Raised when the resolved role lacks permission for an action."""

    def __init__(self, message: str = "Forbidden", details: Optional[dict] = None):
        super().__init__(
            code="FORBIDDEN",
            message=message,
            status_code=403,
            details=details,
        )


class AccessDeniedError(AppError):
    """Raised when an email is not on the access allow-list."""

    def __init__(self, message: str = "This email is not authorized to access the system"):
        super().__init__(
            code="ACCESS_DENIED",
            message=message,
            status_code=403,
        )


class ProfileMissingError(AppError):
    """Raised when an authenticated identity has no active directory entry."""

    def __init__(self, account_id: str):
        super().__init__(
            code="PROFILE_MISSING",
            message="No account profile exists for this identity",
            status_code=403,
            details={"account_id": account_id},
        )


class RoleMissingError(AppError):
    """Raised when a directory entry has no role assigned."""

    def __init__(self, account_id: str):
        super().__init__(
            code="ROLE_MISSING",
            message="Account profile has no role assigned",
            status_code=403,
            details={"account_id": account_id},
        )


class RoleLookupError(AppError):
    """Raised when the directory lookup itself fails."""

    def __init__(self, account_id: str):
        super().__init__(
            code="ROLE_LOOKUP_FAILED",
            message="Could not verify account role, try again",
            status_code=503,
            details={"account_id": account_id},
        )


class InsufficientStockError(AppError):
    """Raised when a sale asks for more units than are on hand."""

    def __init__(self, product_name: str, requested: int, available: int):
        super().__init__(
            code="INSUFFICIENT_STOCK",
            message=f"Insufficient stock for {product_name}",
            status_code=400,
            details={
                "product": product_name,
                "requested": requested,
                "available": available,
            },
        )


class NoActiveProductsError(InvalidStateError):
    """Raised when a day is initialized with an empty catalog."""

    def __init__(self):
        super().__init__(
            "No active products found in the catalog",
            code="NO_ACTIVE_PRODUCTS",
        )


class AlreadyInitializedError(ConflictError):
    """Raised when a stock sheet already exists for the date."""

    def __init__(self, day: str):
        super().__init__(
            f"Daily stock for {day} has already been initialized",
            details={"date": day},
            code="ALREADY_INITIALIZED",
        )


class RecordLockedError(ConflictError):
    """Raised when writing to a published stock sheet."""

    def __init__(self, day: str, record_id: str | None = None):
        details = {"date": day}
        if record_id:
            details["record_id"] = record_id
        super().__init__(
            f"Daily stock for {day} is published and locked",
            details=details,
            code="RECORD_LOCKED",
        )


class PublishFailedError(ConflictError):
    """Raised when publishing cannot update a product's inventory."""

    def __init__(
        self,
        day: str,
        product_id: Optional[str],
        product_name: Optional[str],
        reason: str,
    ):
        if product_name:
            message = f"Publishing {day} failed at {product_name}: {reason}"
        else:
            message = f"Publishing {day} failed: {reason}"
        super().__init__(
            message,
            details={
                "date": day,
                "product_id": product_id,
                "product_name": product_name,
            },
            code="PUBLISH_FAILED",
        )
