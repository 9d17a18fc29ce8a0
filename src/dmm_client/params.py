"""
Request parameter models for the DMM Affiliate API v3 endpoints.

Each model mirrors the query parameters one endpoint accepts. Unknown
keyword arguments are kept so service-specific parameters still reach the
server; ``to_dict()`` drops everything left unset.

Reference: https://affiliate.dmm.com/api/v3/
"""

from __future__ import annotations
from typing import Optional, Dict, Any, Literal, Union
from pydantic import BaseModel, Field


class RequestParams(BaseModel):
    """Base class for endpoint query parameters."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to query parameters, omitting unset values."""
        return self.model_dump(exclude_none=True, by_alias=True)


class PagedParams(RequestParams):
    """Parameters shared by every offset/hits list endpoint."""

    hits: Optional[int] = Field(default=None, ge=1, description="Number of records per page")
    offset: Optional[int] = Field(default=None, ge=1, description="1-based position of the first record")


# =============================================================================
# ItemList
# =============================================================================

class ItemListParams(PagedParams):
    """
    Parameters for the item search API (``/ItemList``).

    ``hits`` accepts 1-100 (server default 20).
    """
    site: Optional[Literal["DMM.com", "FANZA"]] = Field(default=None, description="Site code")
    service: Optional[str] = Field(default=None, description="Service code, e.g. 'digital'")
    floor: Optional[str] = Field(default=None, description="Floor code, e.g. 'videoa'")
    sort: Optional[str] = Field(
        default=None,
        description="rank, price, -price, date, review, match or a service specific order",
    )
    keyword: Optional[str] = None
    cid: Optional[str] = Field(default=None, description="Content ID")
    article: Optional[str] = Field(
        default=None,
        description="Narrowing target: actress, author, genre, series, maker",
    )
    article_id: Optional[Union[int, str]] = None
    gte_date: Optional[str] = Field(default=None, description="Release date lower bound (YYYY-MM-DDTHH:MM:SS)")
    lte_date: Optional[str] = Field(default=None, description="Release date upper bound (YYYY-MM-DDTHH:MM:SS)")
    mono_stock: Optional[Literal["stock", "reserve", "mono", "dmp"]] = None
    output: Optional[str] = None


# =============================================================================
# ActressSearch
# =============================================================================

class ActressSearchParams(PagedParams):
    """
    Parameters for the actress search API (``/ActressSearch``).

    The ``gte_*``/``lte_*`` pairs bound the measurement they name.
    """
    initial: Optional[str] = Field(default=None, description="Kana initial")
    actress_id: Optional[Union[int, str]] = None
    keyword: Optional[str] = None
    gte_bust: Optional[int] = None
    lte_bust: Optional[int] = None
    gte_waist: Optional[int] = None
    lte_waist: Optional[int] = None
    gte_hip: Optional[int] = None
    lte_hip: Optional[int] = None
    gte_height: Optional[int] = None
    lte_height: Optional[int] = None
    gte_birthday: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    lte_birthday: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    sort: Optional[Literal[
        "name", "-name",
        "bust", "-bust",
        "waist", "-waist",
        "hip", "-hip",
        "height", "-height",
        "birthday", "-birthday",
        "id", "-id",
    ]] = None
    output: Optional[str] = None


# =============================================================================
# Floor keyed searches
# =============================================================================

class FloorSearchParams(PagedParams):
    """Parameters shared by the searches keyed by a floor ID (``hits`` 1-500)."""
    floor_id: Union[int, str] = Field(description="Floor ID from the floor list API")
    initial: Optional[str] = Field(default=None, description="Kana initial")
    output: Optional[str] = None


class GenreSearchParams(FloorSearchParams):
    """Parameters for the genre search API (``/GenreSearch``)."""


class MakerSearchParams(FloorSearchParams):
    """Parameters for the maker search API (``/MakerSearch``)."""


class SeriesSearchParams(FloorSearchParams):
    """Parameters for the series search API (``/SeriesSearch``)."""


class AuthorSearchParams(FloorSearchParams):
    """Parameters for the author search API (``/AuthorSearch``)."""


__all__ = [
    "RequestParams",
    "PagedParams",
    "ItemListParams",
    "ActressSearchParams",
    "FloorSearchParams",
    "GenreSearchParams",
    "MakerSearchParams",
    "SeriesSearchParams",
    "AuthorSearchParams",
]
