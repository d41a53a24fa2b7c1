"""
Custom exception hierarchy for structured error handling.

WHY: Custom exceptions provide:
1. Consistent error handling across the API
2. HTTP status code mapping for FastAPI
3. Structured error responses with contextual data
4. No sensitive data leaks in error messages (OWASP A04)
5. Easier debugging with detailed context

IMPORTANT: NEVER use base Exception class. Always use custom exceptions.
"""

from typing import Any, Dict, Optional


class AppException(Exception):
    """
    Base exception class for all application exceptions.

    WHY: Centralizing exception handling in a base class ensures consistent
    error responses, HTTP status code mapping, and prevents sensitive data
    leaks in error messages.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        **context: Any,
    ):
        """
        Initialize exception with message and context.

        WHY: Context parameters allow including debugging information
        (order_code, notification_id, etc.) without leaking sensitive data
        like API keys or callback tokens.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (overrides class default)
            **context: Additional context for debugging (filtered in to_dict)
        """
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize exception to dictionary for JSON response.

        Returns:
            Dictionary with error details (sensitive fields filtered out)
        """
        sensitive_fields = {
            "password",
            "token",
            "secret",
            "key",
            "api_key",
            "callback_token",
        }
        filtered_context = {
            k: v for k, v in self.context.items() if k.lower() not in sensitive_fields
        }

        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": filtered_context if filtered_context else None,
        }


# ============================================================================
# Authentication & Authorization Exceptions (OWASP A07)
# ============================================================================


class AuthenticationError(AppException):
    """
    Raised when authentication fails.

    HTTP Status: 401 Unauthorized
    """

    status_code = 401
    default_message = "Authentication failed"


class TokenExpiredError(AuthenticationError):
    """
    Raised when JWT token has expired.

    HTTP Status: 401 Unauthorized
    """

    default_message = "Token has expired"


class TokenInvalidError(AuthenticationError):
    """
    Raised when JWT token is malformed or has invalid signature.

    HTTP Status: 401 Unauthorized
    """

    default_message = "Token is invalid"


# ============================================================================
# Validation & Input Exceptions
# ============================================================================


class ValidationError(AppException):
    """
    Raised when input validation fails.

    HTTP Status: 400 Bad Request
    """

    status_code = 400
    default_message = "Validation failed"


# ============================================================================
# Resource Exceptions
# ============================================================================


class ResourceNotFoundError(AppException):
    """
    Raised when a requested resource doesn't exist.

    WHY: 404 Not Found is the standard HTTP status for missing resources.
    Including resource type and ID in context helps debugging.

    HTTP Status: 404 Not Found
    """

    status_code = 404
    default_message = "Resource not found"


class ChannelNotFoundError(ResourceNotFoundError):
    """
    Raised when no channel matches a channel token.

    WHY: Callbacks carry the channel token inside the invoice description.
    An unknown token means the order cannot be located in any tenant.
    """

    default_message = "Channel not found"


class CustomerNotFoundError(ResourceNotFoundError):
    """
    Raised when an order has no customer to bill.

    WHY: Xendit invoices require a payer email. An order without a
    customer should never reach checkout, so this is reported loudly.
    """

    default_message = "Customer not found"


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(AppException):
    """
    Raised when the deployment is set up incorrectly.

    WHY: Configuration problems are not caused by the caller and will not
    fix themselves on retry by the same caller without an operator. They
    are kept apart from business-data errors so alerts can target them.

    HTTP Status: 500 Internal Server Error
    """

    status_code = 500
    default_message = "Payment gateway is misconfigured"


class PaymentMethodMissingError(ConfigurationError):
    """
    Raised when no payment method uses the Xendit handler.

    WHY: A settled Xendit invoice can only be recorded against a payment
    method whose handler is the Xendit handler. Without one, the channel
    was never set up for Xendit payments.
    """

    default_message = "Could not find Xendit PaymentMethod"


# ============================================================================
# External Service Exceptions (OWASP A08: Software Integrity)
# ============================================================================


class ExternalServiceError(AppException):
    """
    Base exception for external service failures.

    WHY: External API failures should return 502 Bad Gateway, indicating
    the problem is with an upstream service, not our application.

    HTTP Status: 502 Bad Gateway
    """

    status_code = 502
    default_message = "External service error"


class XenditError(ExternalServiceError):
    """
    Raised when Xendit API calls fail.

    HTTP Status: 502 Bad Gateway
    """

    default_message = "Payment provider error"


class InvoiceCreationError(XenditError):
    """
    Raised when a Xendit invoice cannot be created.

    WHY: Every failure of the outbound create call (timeout, connection
    error, non-2xx response, unparseable body) is reported as this single
    error. No partial invoice state exists on our side.
    """

    default_message = "Error on Creating Xendit Payment"


class InvoiceCancellationError(XenditError):
    """Raised when a Xendit invoice cannot be expired."""

    default_message = "Error on Canceling Xendit Payment"


# ============================================================================
# Database Exceptions
# ============================================================================


class DatabaseError(AppException):
    """
    Raised when database operations fail.

    WHY: SQLAlchemy errors reaching the API are answered with this error
    (no SQL exposed). 503 tells Xendit to retry the callback later.

    HTTP Status: 503 Service Unavailable
    """

    status_code = 503
    default_message = "Database error"
