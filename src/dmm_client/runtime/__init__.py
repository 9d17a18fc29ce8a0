"""Runtime helpers for the DMM Affiliate API client"""

from .errors import (
    ErrorCode,
    DmmSdkError,
    ConfigError,
    DmmApiError,
    DmmApiResponseError,
    DmmApiParseError,
    RetriesExhaustedError,
    DmmNetworkError,
    DmmTimeoutError,
    PaginationError,
    ErrorHandler,
)

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
