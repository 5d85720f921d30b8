"""Error hierarchy for the OpenWeatherMap client and payload decoding.

Every error carries an ErrorCode, a retry hint and the endpoint that failed,
and logs itself once on construction. The fetch service maps these errors
to user-facing messages.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

import requests

from src.shared.config.logging import get_logger

logger = get_logger(__name__)


class ErrorCode(Enum):
    """Error codes for API exceptions."""

    # Transport (1xxx)
    NETWORK_TIMEOUT = 1001
    NETWORK_CONNECTION = 1002

    # HTTP status (2xxx, last three digits are the status)
    HTTP_BAD_REQUEST = 2400
    HTTP_UNAUTHORIZED = 2401
    HTTP_NOT_FOUND = 2404
    HTTP_RATE_LIMIT = 2429
    HTTP_SERVER_ERROR = 2500
    HTTP_BAD_GATEWAY = 2502
    HTTP_SERVICE_UNAVAILABLE = 2503
    HTTP_GATEWAY_TIMEOUT = 2504

    # Credentials (3xxx)
    AUTH_INVALID_CREDENTIALS = 3001

    # Payloads (4xxx)
    DATA_INVALID_RESPONSE = 4001
    DATA_PARSE_ERROR = 4002

    # Quota (5xxx)
    RATE_LIMIT_EXCEEDED = 5001

    # Optional lookups (6xxx)
    ENRICHMENT_UNAVAILABLE = 6001

    UNKNOWN_ERROR = 9999


STATUS_ERROR_CODES: dict[int, ErrorCode] = {
    400: ErrorCode.HTTP_BAD_REQUEST,
    401: ErrorCode.HTTP_UNAUTHORIZED,
    404: ErrorCode.HTTP_NOT_FOUND,
    429: ErrorCode.HTTP_RATE_LIMIT,
    500: ErrorCode.HTTP_SERVER_ERROR,
    502: ErrorCode.HTTP_BAD_GATEWAY,
    503: ErrorCode.HTTP_SERVICE_UNAVAILABLE,
    504: ErrorCode.HTTP_GATEWAY_TIMEOUT,
}

RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


class APIError(Exception):
    """Base exception for all weather API errors.

    Subclasses may override ``log_event`` and ``log_level`` to change how
    construction is reported.
    """

    log_event = "api_error"
    log_level = "error"

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        retryable: bool = False,
        endpoint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize API error.

        Args:
            message: Human-readable error message
            error_code: Structured error code
            retryable: Whether a later identical request may succeed
            endpoint: Provider endpoint that failed, e.g. "/weather"
            details: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.retryable = retryable
        self.endpoint = endpoint
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

        getattr(logger, self.log_level)(
            self.log_event,
            error_code=error_code.name,
            message=message,
            retryable=retryable,
            endpoint=endpoint,
            details=self.details,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serializable view of the error."""
        return {
            "error_code": self.error_code.name,
            "error_value": self.error_code.value,
            "message": self.message,
            "retryable": self.retryable,
            "endpoint": self.endpoint,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class NetworkError(APIError):
    """Request never produced an HTTP response."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.NETWORK_CONNECTION,
        endpoint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, retryable=True, endpoint=endpoint, details=details)


class TimeoutError(NetworkError):
    """Provider did not answer within the configured timeout."""

    def __init__(
        self,
        endpoint: str | None = None,
        timeout_seconds: float | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        message = "Request timed out"
        if timeout_seconds is not None:
            details["timeout_seconds"] = timeout_seconds
            message = f"{message} after {timeout_seconds}s"
        super().__init__(message, ErrorCode.NETWORK_TIMEOUT, endpoint=endpoint, details=details)


class ConnectionError(NetworkError):
    """DNS, TLS or socket failure reaching the provider."""

    def __init__(
        self,
        endpoint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            "Failed to establish connection",
            ErrorCode.NETWORK_CONNECTION,
            endpoint=endpoint,
            details=details,
        )


class HTTPError(APIError):
    """Provider answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: ErrorCode | None = None,
        endpoint: str | None = None,
        response_body: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize HTTP error.

        Args:
            message: Error message
            status_code: HTTP status code
            error_code: Specific error code (derived from the status if None)
            endpoint: Failed endpoint
            response_body: Raw body, usually ``{"cod": ..., "message": ...}``
            details: Additional context
        """
        self.status_code = status_code
        self.response_body = response_body

        details = {**(details or {}), "status_code": status_code}
        if response_body:
            details["response_body"] = response_body

        super().__init__(
            message,
            error_code or STATUS_ERROR_CODES.get(status_code, ErrorCode.UNKNOWN_ERROR),
            retryable=status_code in RETRYABLE_STATUSES,
            endpoint=endpoint,
            details=details,
        )


class AuthenticationError(HTTPError):
    """API key rejected (HTTP 401)."""

    def __init__(
        self,
        message: str = "API key is invalid or expired",
        endpoint: str | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(
            message,
            401,
            error_code=ErrorCode.AUTH_INVALID_CREDENTIALS,
            endpoint=endpoint,
            response_body=response_body,
        )


class RateLimitError(HTTPError):
    """Account quota exhausted (HTTP 429)."""

    def __init__(
        self,
        message: str = "API rate limit exceeded",
        retry_after: int | None = None,
        endpoint: str | None = None,
        response_body: str | None = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(
            message,
            429,
            error_code=ErrorCode.RATE_LIMIT_EXCEEDED,
            endpoint=endpoint,
            response_body=response_body,
            details={"retry_after": retry_after} if retry_after is not None else None,
        )


class DataError(APIError):
    """Response arrived but its body is unusable."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.DATA_INVALID_RESPONSE,
        endpoint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, retryable=False, endpoint=endpoint, details=details)


class DecodeError(DataError):
    """Provider payload could not be decoded into a typed record.

    Raised for malformed JSON and for payloads whose shape does not match
    the expected schema. No partial record is ever produced.
    """

    def __init__(
        self,
        kind: str,
        errors: list[dict[str, Any]] | None = None,
        message: str | None = None,
    ) -> None:
        """Initialize decode error.

        Args:
            kind: Payload kind that was being decoded (e.g. "forecast")
            errors: Field-level mismatches reported by the validator
            message: Override for the default message
        """
        self.kind = kind
        self.errors = errors or []
        super().__init__(
            message or f"Failed to decode {kind} payload",
            ErrorCode.DATA_PARSE_ERROR,
            details={"kind": kind, "errors": self.errors},
        )


class EnrichmentUnavailable(APIError):
    """Optional lookup (air quality) failed; callers substitute a default."""

    log_event = "enrichment_unavailable"
    log_level = "warning"

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.ENRICHMENT_UNAVAILABLE,
            retryable=False,
            endpoint=endpoint,
            details=details,
        )


def _retry_after(response: requests.Response) -> int | None:
    # Only the delta-seconds form; HTTP-date values are ignored
    header = response.headers.get("Retry-After", "")
    return int(header) if header.isdigit() else None


def classify_error(exception: Exception, endpoint: str | None = None) -> APIError:
    """Translate a requests exception into an APIError.

    Args:
        exception: Exception raised while talking to the provider
        endpoint: Provider endpoint that failed

    Returns:
        Classified APIError instance
    """
    if isinstance(exception, APIError):
        return exception

    if isinstance(exception, requests.Timeout):
        return TimeoutError(endpoint=endpoint)

    if isinstance(exception, requests.ConnectionError):
        return ConnectionError(endpoint=endpoint, details={"reason": str(exception)})

    if isinstance(exception, requests.HTTPError):
        response = exception.response
        # Response.__bool__ is False for error statuses
        if response is None:
            return HTTPError(str(exception), status_code=500, endpoint=endpoint)

        body = response.text or None
        if response.status_code == 401:
            return AuthenticationError(endpoint=endpoint, response_body=body)
        if response.status_code == 429:
            return RateLimitError(
                retry_after=_retry_after(response), endpoint=endpoint, response_body=body
            )
        return HTTPError(
            str(exception),
            status_code=response.status_code,
            endpoint=endpoint,
            response_body=body,
        )

    return APIError(
        str(exception),
        ErrorCode.UNKNOWN_ERROR,
        endpoint=endpoint,
        details={"exception_type": type(exception).__name__},
    )
