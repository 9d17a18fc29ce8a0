"""
Exhaustive iteration over offset/hits list endpoints.

The driver fetches one page at a time, yields its records and moves the
offset past them using the position reported by the server. Nothing is
fetched ahead of the consumer.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

from .runtime.errors import PaginationError
from .types import Page


logger = logging.getLogger(__name__)

# Keys owned by the driver; caller supplied values are discarded.
CURSOR_KEYS = ("offset", "hits")


@dataclass
class PaginationCursor:
    """Position of one iteration; never shared between iterations."""

    hits_per_page: int
    current_offset: int = 1
    total_count: Optional[int] = None

    def has_more(self) -> bool:
        return self.total_count is None or self.current_offset <= self.total_count

    def advance(self, first_position: int, count: int) -> None:
        self.current_offset = first_position + count

    def page_params(self, base_params: Mapping[str, Any]) -> Dict[str, Any]:
        params = {k: v for k, v in base_params.items() if k not in CURSOR_KEYS}
        params["offset"] = self.current_offset
        params["hits"] = self.hits_per_page
        return params


def paginate(
    fetch_page: Callable[[Dict[str, Any]], Page],
    base_params: Optional[Mapping[str, Any]] = None,
    hits_per_page: int = 100,
    operation: str = "paginate",
) -> Iterator[Any]:
    """
    Yield every record of a list endpoint, page by page.

    Iteration stops when the advertised total is reached, when the first
    page reports a total of zero, or when a page comes back empty.

    Args:
        fetch_page: Single-page list call taking the query parameters
        base_params: Filters sent with every page (``offset``/``hits`` ignored)
        hits_per_page: Page size; must not exceed the endpoint's maximum
        operation: Name used in error messages

    Yields:
        Records in server order

    Raises:
        PaginationError: If a page fetch fails; the original error is the cause
    """
    cursor = PaginationCursor(hits_per_page=hits_per_page)
    base_params = base_params or {}

    while cursor.has_more():
        try:
            page = fetch_page(cursor.page_params(base_params))
        except Exception as e:
            raise PaginationError(
                f"Error in {operation} at offset {cursor.current_offset}: {e}",
                offset=cursor.current_offset,
                cause=e,
            ) from e

        if cursor.total_count is None:
            cursor.total_count = page.total_count
            if cursor.total_count == 0:
                return

        records = page.records()
        if not records:
            logger.debug(
                f"{operation}: empty page at offset {cursor.current_offset} "
                f"before total {cursor.total_count}; stopping"
            )
            break

        for record in records:
            yield record
        cursor.advance(page.first_position, len(records))
