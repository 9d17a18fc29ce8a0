"""
DMM Client Error Model

This module provides the error handling framework for the DMM Affiliate API
client. Every failure raised by the client derives from :class:`DmmSdkError`
and carries an :class:`ErrorCode`, optional details and the underlying cause.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes for the failure classes the client distinguishes."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INVALID_CONFIG = 2
    INVALID_URL = 3

    # API errors (100-199)
    API_ERROR = 100
    HTTP_ERROR = 101
    INVALID_JSON = 102
    MISSING_RESULT = 103
    RETRIES_EXHAUSTED = 104

    # Network errors (200-299)
    NETWORK_ERROR = 200
    TIMEOUT = 202
    RATE_LIMITED = 203
    SERVICE_UNAVAILABLE = 204

    # Iteration errors (300-399)
    PAGINATION_FAILED = 300


class DmmSdkError(Exception):
    """
    Base class for all DMM client errors.

    Provides structured error information: a code, free-form details and
    the exception that caused this one.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        """
        Initialize a DMM client error.

        Args:
            message: Human readable description
            code: Error code
            details: Context such as the endpoint or offset
            cause: Exception this error was raised from
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}([{self.code.name}] {self.message!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form of the error, e.g. for structured logs."""
        result = {
            "type": type(self).__name__,
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ConfigError(DmmSdkError):
    """Invalid or missing client construction input."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_CONFIG,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class DmmApiError(DmmSdkError):
    """Errors reported while talking to the API."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.API_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class DmmApiResponseError(DmmApiError):
    """The server answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, response_body: Any = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        if status_code == 429:
            code = ErrorCode.RATE_LIMITED
        elif status_code >= 500:
            code = ErrorCode.SERVICE_UNAVAILABLE
        else:
            code = ErrorCode.HTTP_ERROR
        super().__init__(message, code, details, cause)
        self.status_code = status_code
        self.response_body = response_body

    @property
    def retryable(self) -> bool:
        """429 and any 5xx are transient."""
        return self.status_code == 429 or 500 <= self.status_code <= 599


class DmmApiParseError(DmmApiError):
    """A success response whose body is not valid JSON or lacks ``result``."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_JSON,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class RetriesExhaustedError(DmmApiError):
    """A retryable failure persisted after the retry budget was spent."""

    def __init__(self, endpoint: str, attempts: int, last_error: BaseException):
        message = f"Error during API request to {endpoint} after {attempts} attempts: {last_error}"
        super().__init__(
            message,
            ErrorCode.RETRIES_EXHAUSTED,
            {"endpoint": endpoint, "attempts": attempts},
            last_error,
        )
        self.endpoint = endpoint
        self.attempts = attempts


class DmmNetworkError(DmmSdkError):
    """Transport failure before any response was received."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.NETWORK_ERROR, details, cause)


class DmmTimeoutError(DmmSdkError):
    """The request deadline passed before a response arrived."""

    def __init__(self, message: str, timeout: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.TIMEOUT, details, cause)
        self.timeout = timeout


class PaginationError(DmmSdkError):
    """A page fetch failed while iterating over a result set."""

    def __init__(self, message: str, offset: int, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.PAGINATION_FAILED, {"offset": offset}, cause)
        self.offset = offset


class ErrorHandler:
    """
    Utility class for categorizing errors.
    """

    @staticmethod
    def is_retryable(error: BaseException) -> bool:
        """
        Check if an error is retryable.

        Transport failures and 429/5xx responses are retried; timeouts,
        parse failures and every other status are not.

        Args:
            error: Exception raised by a request

        Returns:
            True if repeating the request may succeed
        """
        if isinstance(error, DmmTimeoutError):
            return False
        if isinstance(error, DmmNetworkError):
            return True
        if isinstance(error, DmmApiResponseError):
            return error.retryable
        return False


__all__ = [
    "ErrorCode",
    "DmmSdkError",
    "ConfigError",
    "DmmApiError",
    "DmmApiResponseError",
    "DmmApiParseError",
    "RetriesExhaustedError",
    "DmmNetworkError",
    "DmmTimeoutError",
    "PaginationError",
    "ErrorHandler",
]
