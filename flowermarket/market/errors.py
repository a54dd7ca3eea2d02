"""Error conventions for the flower market.

Two layers share one vocabulary of codes and categories:

1. Registry exceptions (``RegistryError`` subclasses) raised by the core
   registry. Every failure aborts the operation with no state change.
2. Structured error responses (plain dicts) returned by the market endpoint
   so callers can switch on ``code`` without catching exceptions.

Usage:
    from flowermarket.market.errors import validation_error, ErrorCode

    return validation_error(
        "index must be an integer",
        code=ErrorCode.INVALID_TYPE,
        index="3",
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - VALIDATION: Caller provided bad input
    - PERMISSION: Caller not authorized, or payment refused
    - RESOURCE: Unknown flower index or method
    - EXECUTION: Call ordering problems (reentrancy)
    - SYSTEM: Internal errors
    """

    VALIDATION = "validation"
    PERMISSION = "permission"
    RESOURCE = "resource"
    EXECUTION = "execution"
    SYSTEM = "system"


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Validation errors
    MISSING_ARGUMENT = "missing_argument"
    INVALID_ARGUMENT = "invalid_argument"
    INVALID_TYPE = "invalid_type"

    # Permission errors
    NOT_OWNER = "not_owner"
    PAYMENT_REJECTED = "payment_rejected"

    # Resource errors
    NOT_FOUND = "not_found"
    OUT_OF_RANGE = "out_of_range"

    # Execution errors
    REENTRANT_CALL = "reentrant_call"

    # System errors
    INTERNAL_ERROR = "internal_error"


@dataclass
class ErrorResponse:
    """Standardized error response.

    All error responses include:
    - success: Always False
    - error: Human-readable message
    - code: Machine-readable error code
    - category: Error category (validation, permission, etc.)
    - retriable: Whether resubmitting the same call could succeed
    - details: Optional additional context
    """

    success: bool = False
    error: str = ""
    code: str = ""
    category: str = ""
    retriable: bool = False
    details: dict[str, object] | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


def _response(
    message: str,
    code: ErrorCode,
    category: ErrorCategory,
    retriable: bool,
    details: dict[str, object],
) -> dict[str, object]:
    return ErrorResponse(
        error=message,
        code=code.value,
        category=category.value,
        retriable=retriable,
        details=details or None,
    ).to_dict()


def validation_error(
    message: str,
    code: ErrorCode = ErrorCode.INVALID_ARGUMENT,
    **details: object,
) -> dict[str, object]:
    """Create a validation error response.

    Args:
        message: Human-readable error message
        code: Specific error code (default: INVALID_ARGUMENT)
        **details: Additional context (e.g., required=["index"])
    """
    return _response(message, code, ErrorCategory.VALIDATION, False, details)


def resource_error(
    message: str,
    code: ErrorCode = ErrorCode.NOT_FOUND,
    **details: object,
) -> dict[str, object]:
    """Create a resource error response (unknown index, unknown method)."""
    return _response(message, code, ErrorCategory.RESOURCE, False, details)


# =============================================================================
# REGISTRY EXCEPTIONS
# =============================================================================


class RegistryError(Exception):
    """Base class for failures raised by the flower registry.

    Subclasses fix ``code`` and ``category``; ``details`` carries the
    context that ends up in the structured response.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    category: ErrorCategory = ErrorCategory.SYSTEM
    retriable: bool = False

    def __init__(self, message: str, **details: object) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, object] = dict(details)

    def to_response(self) -> dict[str, object]:
        """Render this failure as a structured error response."""
        return _response(
            self.message, self.code, self.category, self.retriable, self.details
        )


class Unauthorized(RegistryError):
    """Caller is not the current owner of the flower."""

    code = ErrorCode.NOT_OWNER
    category = ErrorCategory.PERMISSION

    def __init__(self, index: int, caller: str, owner: str) -> None:
        super().__init__(
            f"{caller} is not the owner of flower {index} (owner is {owner})",
            index=index,
            caller=caller,
            owner=owner,
        )
        self.index = index
        self.caller = caller
        self.owner = owner


class PaymentRejected(RegistryError):
    """The ledger refused the payment for a purchase."""

    code = ErrorCode.PAYMENT_REJECTED
    category = ErrorCategory.PERMISSION
    retriable = True

    def __init__(self, index: int, buyer: str, seller: str, price: int, reason: str) -> None:
        super().__init__(
            f"Payment of {price} from {buyer} to {seller} for flower {index} "
            f"was rejected: {reason}",
            index=index,
            buyer=buyer,
            seller=seller,
            price=price,
            reason=reason,
        )
        self.index = index
        self.buyer = buyer
        self.seller = seller
        self.price = price
        self.reason = reason


class OutOfRange(RegistryError, IndexError):
    """Index does not address a registered flower."""

    code = ErrorCode.OUT_OF_RANGE
    category = ErrorCategory.RESOURCE

    def __init__(self, index: int, count: int) -> None:
        super().__init__(
            f"Flower index {index} is out of range (count is {count})",
            index=index,
            count=count,
        )
        self.index = index
        self.count = count


class InvalidArgument(RegistryError, ValueError):
    """An argument violates a data-model constraint (price, identity)."""

    code = ErrorCode.INVALID_ARGUMENT
    category = ErrorCategory.VALIDATION


class ReentrantCall(RegistryError):
    """The registry was re-entered while an operation was in progress."""

    code = ErrorCode.REENTRANT_CALL
    category = ErrorCategory.EXECUTION

    def __init__(self, operation: str, active: str) -> None:
        super().__init__(
            f"Cannot run '{operation}' while '{active}' is in progress",
            operation=operation,
            active=active,
        )
        self.operation = operation
        self.active = active
