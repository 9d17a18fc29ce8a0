"""
DMM Affiliate API Python Client

This package provides a typed Python client for the DMM Affiliate API v3,
with bounded retries, request timeouts and lazy pagination.
"""

# Client
from .api_client import ClientConfig, DmmApiClient, DEFAULT_BASE_URL
from .helper_client import DmmApiHelperClient

# Pagination
from .pagination import PaginationCursor, paginate

# Error recovery
from .recovery import RetryPolicy, ExponentialBackoff

# Errors, request parameters and response models
from .runtime.errors import *
from .params import *
from .types import *

__version__ = "1.0.0"
__all__ = [
    # Clients
    "ClientConfig",
    "DmmApiClient",
    "DmmApiHelperClient",
    "DEFAULT_BASE_URL",

    # Pagination
    "PaginationCursor",
    "paginate",

    # Error recovery
    "RetryPolicy",
    "ExponentialBackoff",

    # Errors
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

    # Request parameters
    "ItemListParams",
    "ActressSearchParams",
    "GenreSearchParams",
    "MakerSearchParams",
    "SeriesSearchParams",
    "AuthorSearchParams",

    # Response models
    "Page",
    "Item",
    "ItemListResponse",
    "FloorListResponse",
    "ActressSearchResponse",
    "GenreSearchResponse",
    "MakerSearchResponse",
    "SeriesSearchResponse",
    "AuthorSearchResponse",
]
