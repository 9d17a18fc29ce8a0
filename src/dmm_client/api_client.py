"""
DMM Affiliate API v3 Client

This module provides the client for the DMM Affiliate API. Every endpoint
call goes through one request executor that injects the credentials,
enforces the request timeout, retries transient failures with exponential
backoff and unwraps the ``{"result": ...}`` response envelope.
"""

from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Type, TypeVar, Union
from urllib.parse import urlparse

import requests
from pydantic import ValidationError

from .pagination import CURSOR_KEYS, paginate
from .params import (
    RequestParams,
    ItemListParams,
    ActressSearchParams,
    GenreSearchParams,
    MakerSearchParams,
    SeriesSearchParams,
    AuthorSearchParams,
)
from .recovery.retry import ExponentialBackoff
from .runtime.errors import (
    ConfigError,
    DmmApiParseError,
    DmmApiResponseError,
    DmmNetworkError,
    DmmTimeoutError,
    ErrorCode,
    ErrorHandler,
    RetriesExhaustedError,
)
from .types import (
    ApiModel,
    Item,
    ItemListResponse,
    FloorListResponse,
    ActressSearchResponse,
    GenreSearchResponse,
    MakerSearchResponse,
    SeriesSearchResponse,
    AuthorSearchResponse,
)


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.dmm.com/affiliate/v3"
SITES = ("DMM.com", "FANZA")

# Query keys always taken from the configuration.
CREDENTIAL_KEYS = ("api_id", "affiliate_id")

ParamsT = Union[RequestParams, Mapping[str, Any], None]
ModelT = TypeVar("ModelT", bound=ApiModel)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for the DMM API client. Times are in milliseconds."""

    api_id: str = ""
    affiliate_id: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: int = 10000
    max_retries: int = 3
    retry_delay: int = 1000
    site: str = "DMM.com"
    debug: bool = False
    user_agent: str = "dmm-affiliate-python/1.0.0"

    def __post_init__(self):
        if not self.api_id or not self.affiliate_id:
            raise ConfigError("API ID and Affiliate ID are required.")
        if not isinstance(self.api_id, str) or not isinstance(self.affiliate_id, str):
            raise ConfigError("API ID and Affiliate ID must be strings.")

        object.__setattr__(self, "base_url", self._normalize_base_url(self.base_url))

        if not _is_number(self.timeout) or self.timeout <= 0:
            raise ConfigError(f"Invalid timeout: must be a positive number of milliseconds, got {self.timeout!r}.")
        if not isinstance(self.max_retries, int) or isinstance(self.max_retries, bool) or self.max_retries < 0:
            raise ConfigError(f"Invalid maxRetries: must be a non-negative integer, got {self.max_retries!r}.")
        if not _is_number(self.retry_delay) or self.retry_delay <= 0:
            raise ConfigError(f"Invalid retryDelay: must be a positive number of milliseconds, got {self.retry_delay!r}.")
        if self.site not in SITES:
            raise ConfigError(f"Invalid site: must be one of {', '.join(SITES)}, got {self.site!r}.")

    @staticmethod
    def _normalize_base_url(base_url: Any) -> str:
        if base_url is None:
            return DEFAULT_BASE_URL
        if not isinstance(base_url, str) or not base_url.strip():
            raise ConfigError("Invalid baseUrl: must be a valid URL string or None.",
                              ErrorCode.INVALID_URL)
        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https"):
            raise ConfigError("Invalid baseUrl: protocol must be http or https.", ErrorCode.INVALID_URL)
        if not parsed.netloc:
            raise ConfigError("Invalid baseUrl: must be a valid URL string or None.",
                              ErrorCode.INVALID_URL)
        if base_url.endswith("/"):
            base_url = base_url[:-1]
        return base_url

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "ClientConfig":
        """
        Build a configuration from ``DMM_*`` environment variables.

        Recognized: DMM_API_ID, DMM_AFFILIATE_ID, DMM_BASE_URL, DMM_TIMEOUT,
        DMM_MAX_RETRIES, DMM_RETRY_DELAY, DMM_SITE. Keyword arguments win
        over the environment.
        """
        environ = os.environ if environ is None else environ
        options: Dict[str, Any] = {
            "api_id": environ.get("DMM_API_ID", ""),
            "affiliate_id": environ.get("DMM_AFFILIATE_ID", ""),
        }
        if environ.get("DMM_BASE_URL"):
            options["base_url"] = environ["DMM_BASE_URL"]
        if environ.get("DMM_SITE"):
            options["site"] = environ["DMM_SITE"]
        for key, name in (("timeout", "DMM_TIMEOUT"),
                          ("max_retries", "DMM_MAX_RETRIES"),
                          ("retry_delay", "DMM_RETRY_DELAY")):
            raw = environ.get(name)
            if raw:
                try:
                    options[key] = int(raw)
                except ValueError as e:
                    raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}.", cause=e) from e
        options.update(overrides)
        return cls(**options)


class DmmApiClient:
    """
    DMM Affiliate API v3 Client

    Provides one typed method per endpoint plus :meth:`get_all_items`, which
    walks every page of an item search. Failures are raised as subclasses of
    :class:`~dmm_client.runtime.errors.DmmSdkError`:

    - 429 and 5xx responses and transport failures are retried with
      exponential backoff, then raised as ``RetriesExhaustedError``
    - other non-2xx responses raise ``DmmApiResponseError`` immediately
    - timeouts raise ``DmmTimeoutError`` and are never retried
    - a success response without ``result`` raises ``DmmApiParseError``

    Example:
        ```python
        with DmmApiClient(api_id="...", affiliate_id="...") as client:
            page = client.get_item_list({"service": "digital", "hits": 10})
            for item in client.get_all_items(keyword="cat"):
                print(item.title)
        ```
    """

    ITEM_LIST_ENDPOINT = "/ItemList"
    FLOOR_LIST_ENDPOINT = "/FloorList"
    ACTRESS_SEARCH_ENDPOINT = "/ActressSearch"
    GENRE_SEARCH_ENDPOINT = "/GenreSearch"
    MAKER_SEARCH_ENDPOINT = "/MakerSearch"
    SERIES_SEARCH_ENDPOINT = "/SeriesSearch"
    AUTHOR_SEARCH_ENDPOINT = "/AuthorSearch"

    # ItemList accepts at most 100 hits per request.
    DEFAULT_HITS_PER_PAGE_FOR_GET_ALL_ITEMS = 100
    DEFAULT_TIMEOUT = 10000
    DEFAULT_MAX_RETRIES = 3
    DEFAULT_RETRY_DELAY = 1000

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        session: Optional[requests.Session] = None,
        **options: Any,
    ):
        """
        Initialize the DMM API client.

        Args:
            config: A ClientConfig; when omitted one is built from ``options``
            session: Optional requests.Session for connection pooling
            **options: ClientConfig fields (api_id, affiliate_id, base_url,
                timeout, max_retries, retry_delay, site, ...)

        Raises:
            ConfigError: If credentials are missing or an option is invalid
        """
        if config is None:
            try:
                config = ClientConfig(**options)
            except TypeError as e:
                raise ConfigError(f"Invalid client options: {e}", cause=e) from e
        elif options:
            raise ConfigError("Pass either a ClientConfig or keyword options, not both.")

        self.config = config
        # Debug clients log through a child so the module logger level stays untouched.
        self.logger = logger
        if self.config.debug:
            self.logger = logger.getChild("debug")
            self.logger.setLevel(logging.DEBUG)

        self._retry_policy = ExponentialBackoff(
            max_retries=config.max_retries,
            base_delay=config.retry_delay / 1000,
            factor=2.0,
        )
        self._headers = {
            "Accept": "application/json",
            "User-Agent": config.user_agent,
        }
        self._session = session or requests.Session()
        self._owns_session = session is None

    @property
    def base_url(self) -> str:
        """Get the API base URL."""
        return self.config.base_url

    def close(self) -> None:
        """Close the HTTP session if owned by this client."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> DmmApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # =========================================================================
    # Request executor
    # =========================================================================

    def _build_query(self, params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
        """Credentials first, then caller params without None values or credential keys."""
        query = {
            "api_id": self.config.api_id,
            "affiliate_id": self.config.affiliate_id,
        }
        for key, value in (params or {}).items():
            if key in CREDENTIAL_KEYS or value is None:
                continue
            if isinstance(value, bool):
                query[key] = "true" if value else "false"
            else:
                query[key] = str(value)
        return query

    def _request(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Send a GET request with retry logic and return the ``result`` payload.

        ``config.timeout`` bounds the connect and each socket read, not the
        whole exchange; a server trickling its body can outlast it.

        Args:
            endpoint: API endpoint path (e.g. '/ItemList')
            params: Query parameters; None values are dropped

        Returns:
            The unwrapped ``result`` value

        Raises:
            DmmTimeoutError: If no response arrived within the timeout
            DmmApiResponseError: On a non-retryable HTTP status
            DmmApiParseError: On an invalid success body
            RetriesExhaustedError: When retryable failures outlast the budget
        """
        url = f"{self.config.base_url}{endpoint}"
        query = self._build_query(params)
        attempts = 0

        while True:
            try:
                return self._send(endpoint, url, query, attempts)
            except (DmmNetworkError, DmmApiResponseError) as e:
                if not ErrorHandler.is_retryable(e):
                    raise
                if not self._retry_policy.should_retry(attempts, e):
                    raise RetriesExhaustedError(endpoint, attempts, e) from e
                attempts += 1
                self.logger.warning(
                    f"Request to {endpoint} failed: {e}. "
                    f"Retrying (attempt {attempts} of {self.config.max_retries})"
                )
                self._retry_policy.wait(attempts)

    def _send(self, endpoint: str, url: str, query: Dict[str, str], attempts: int) -> Any:
        """Perform a single HTTP round trip and classify its outcome."""
        self.logger.debug(f"GET {url} (attempt {attempts + 1})")
        try:
            response = self._session.get(
                url,
                params=query,
                headers=self._headers,
                timeout=self.config.timeout / 1000,
            )
        except requests.exceptions.Timeout as e:
            raise DmmTimeoutError(
                f"API request to {endpoint} timed out after {self.config.timeout}ms",
                timeout=self.config.timeout,
                details={"endpoint": endpoint},
                cause=e,
            ) from e
        except requests.exceptions.RequestException as e:
            raise DmmNetworkError(str(e), {"endpoint": endpoint}, cause=e) from e

        if 200 <= response.status_code < 300:
            return self._unwrap(endpoint, response)
        raise self._response_error(endpoint, response, attempts)

    def _unwrap(self, endpoint: str, response: requests.Response) -> Any:
        try:
            data = response.json()
        except ValueError as e:
            raise DmmApiParseError(
                f"Invalid JSON in response from {endpoint}: {e}",
                details={"endpoint": endpoint},
                cause=e,
            ) from e

        if not isinstance(data, dict) or "result" not in data:
            raise DmmApiParseError(
                f'Invalid API response format from {endpoint}: "result" field is missing.',
                ErrorCode.MISSING_RESULT,
                {"endpoint": endpoint},
            )
        return data["result"]

    def _response_error(self, endpoint: str, response: requests.Response, attempts: int) -> DmmApiResponseError:
        """Build the error for a non-2xx response, preferring the server's message."""
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text

        message = None
        if isinstance(body, dict):
            result = body.get("result")
            if isinstance(result, dict) and result.get("message"):
                message = str(result["message"])
            else:
                message = json.dumps(body, ensure_ascii=False)
        elif isinstance(body, str):
            message = body
        elif body is not None:
            message = json.dumps(body, ensure_ascii=False)
        if not message:
            message = response.reason or f"HTTP {response.status_code}"

        return DmmApiResponseError(
            f"API request to {endpoint} failed with status {response.status_code} "
            f"after {attempts} attempts: {message}",
            status_code=response.status_code,
            response_body=body,
            details={"endpoint": endpoint},
        )

    def _call(self, endpoint: str, params: Optional[Dict[str, Any]], model: Type[ModelT]) -> ModelT:
        result = self._request(endpoint, params)
        try:
            return model.model_validate(result)
        except ValidationError as e:
            raise DmmApiParseError(
                f"Unexpected result shape from {endpoint}: {e}",
                details={"endpoint": endpoint},
                cause=e,
            ) from e

    @staticmethod
    def _coerce_params(model: Type[RequestParams], params: ParamsT, overrides: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate ``params`` (a params model or a mapping) plus keyword overrides."""
        if isinstance(params, RequestParams):
            data = params.to_dict()
        else:
            data = dict(params or {})
        data.update(overrides)
        return model.model_validate(data).to_dict()

    # =========================================================================
    # Endpoints
    # =========================================================================

    def get_item_list(self, params: ParamsT = None, **kwargs: Any) -> ItemListResponse:
        """
        Calls the item search API.

        Args:
            params: ItemListParams or a mapping of its fields
            **kwargs: Additional or overriding parameters

        Returns:
            One page of items
        """
        query = self._coerce_params(ItemListParams, params, kwargs)
        query.setdefault("site", self.config.site)
        return self._call(self.ITEM_LIST_ENDPOINT, query, ItemListResponse)

    def get_floor_list(self) -> FloorListResponse:
        """Calls the floor list API, which takes no parameters."""
        return self._call(self.FLOOR_LIST_ENDPOINT, None, FloorListResponse)

    def search_actress(self, params: ParamsT = None, **kwargs: Any) -> ActressSearchResponse:
        """Calls the actress search API."""
        query = self._coerce_params(ActressSearchParams, params, kwargs)
        return self._call(self.ACTRESS_SEARCH_ENDPOINT, query, ActressSearchResponse)

    def search_genre(self, params: ParamsT = None, **kwargs: Any) -> GenreSearchResponse:
        """Calls the genre search API. ``floor_id`` is required."""
        query = self._coerce_params(GenreSearchParams, params, kwargs)
        return self._call(self.GENRE_SEARCH_ENDPOINT, query, GenreSearchResponse)

    def search_maker(self, params: ParamsT = None, **kwargs: Any) -> MakerSearchResponse:
        """Calls the maker search API. ``floor_id`` is required."""
        query = self._coerce_params(MakerSearchParams, params, kwargs)
        return self._call(self.MAKER_SEARCH_ENDPOINT, query, MakerSearchResponse)

    def search_series(self, params: ParamsT = None, **kwargs: Any) -> SeriesSearchResponse:
        """Calls the series search API. ``floor_id`` is required."""
        query = self._coerce_params(SeriesSearchParams, params, kwargs)
        return self._call(self.SERIES_SEARCH_ENDPOINT, query, SeriesSearchResponse)

    def search_author(self, params: ParamsT = None, **kwargs: Any) -> AuthorSearchResponse:
        """Calls the author search API. ``floor_id`` is required."""
        query = self._coerce_params(AuthorSearchParams, params, kwargs)
        return self._call(self.AUTHOR_SEARCH_ENDPOINT, query, AuthorSearchResponse)

    def get_all_items(self, params: ParamsT = None, **kwargs: Any) -> Iterator[Item]:
        """
        Iterate over every item matching the search, fetching pages lazily.

        ``hits`` and ``offset`` are managed internally and ignored if given.

        Args:
            params: ItemListParams or a mapping of its fields
            **kwargs: Additional or overriding parameters

        Yields:
            Items in server order

        Raises:
            PaginationError: If a page fetch fails; the request error is the cause
        """
        if isinstance(params, RequestParams):
            data = params.to_dict()
        else:
            data = dict(params or {})
        data.update(kwargs)
        for key in CURSOR_KEYS:
            data.pop(key, None)
        base_params = self._coerce_params(ItemListParams, data, {})
        return paginate(
            self.get_item_list,
            base_params,
            hits_per_page=self.DEFAULT_HITS_PER_PAGE_FOR_GET_ALL_ITEMS,
            operation="get_all_items",
        )
