"""
Response models for the DMM Affiliate API v3 endpoints.

The models are deliberately lenient: every field the server may leave out
is optional and unknown fields are preserved, so a payload is never
rejected because the service added or dropped a field.
"""

from __future__ import annotations
from typing import Optional, List, Union, Any, Dict, ClassVar
from pydantic import BaseModel, Field


class ApiModel(BaseModel):
    """Base class for response payloads."""

    model_config = {"populate_by_name": True, "extra": "allow"}


class Page(ApiModel):
    """
    One response of an offset/hits list endpoint.

    Subclasses name the field holding the records; :meth:`records` returns
    them in server order, or an empty list when the field is absent.
    """
    result_count: int = Field(default=0, description="Number of records in this page")
    total_count: int = Field(default=0, description="Number of records matching the query")
    first_position: int = Field(default=0, description="1-based position of the first record")

    records_field: ClassVar[str] = ""

    def records(self) -> List[Any]:
        return getattr(self, self.records_field, None) or []


# =============================================================================
# ItemList
# =============================================================================

class Review(ApiModel):
    count: Optional[int] = None
    average: Optional[str] = None


class ImageURL(ApiModel):
    list: Optional[str] = None
    small: Optional[str] = None
    large: Optional[str] = None


class SampleImages(ApiModel):
    image: List[str] = Field(default_factory=list)


class SampleImageURL(ApiModel):
    sample_s: Optional[SampleImages] = None
    sample_l: Optional[SampleImages] = None


class SampleMovieURL(ApiModel):
    size_476_306: Optional[str] = None
    size_560_360: Optional[str] = None
    size_644_414: Optional[str] = None
    size_720_480: Optional[str] = None
    pc_flag: Optional[int] = None
    sp_flag: Optional[int] = None


class Delivery(ApiModel):
    type: Optional[str] = None
    price: Optional[str] = None


class Deliveries(ApiModel):
    delivery: List[Delivery] = Field(default_factory=list)


class Prices(ApiModel):
    price: Optional[str] = None
    list_price: Optional[str] = None
    deliveries: Optional[Deliveries] = None


class InfoEntry(ApiModel):
    """An entry of ``iteminfo`` (genre, maker, actress, ...)."""
    id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    ruby: Optional[str] = None


class ItemInfo(ApiModel):
    genre: List[InfoEntry] = Field(default_factory=list)
    series: List[InfoEntry] = Field(default_factory=list)
    maker: List[InfoEntry] = Field(default_factory=list)
    actress: List[InfoEntry] = Field(default_factory=list)
    director: List[InfoEntry] = Field(default_factory=list)
    author: List[InfoEntry] = Field(default_factory=list)
    label: List[InfoEntry] = Field(default_factory=list)


class Item(ApiModel):
    """A product returned by the item search API."""
    service_code: Optional[str] = None
    service_name: Optional[str] = None
    floor_code: Optional[str] = None
    floor_name: Optional[str] = None
    category_name: Optional[str] = None
    content_id: Optional[str] = None
    product_id: Optional[str] = None
    title: Optional[str] = None
    volume: Optional[str] = None
    review: Optional[Review] = None
    url: Optional[str] = Field(default=None, alias="URL")
    affiliate_url: Optional[str] = Field(default=None, alias="affiliateURL")
    affiliate_url_sp: Optional[str] = Field(default=None, alias="affiliateURLsp")
    image_url: Optional[ImageURL] = Field(default=None, alias="imageURL")
    sample_image_url: Optional[SampleImageURL] = Field(default=None, alias="sampleImageURL")
    sample_movie_url: Optional[SampleMovieURL] = Field(default=None, alias="sampleMovieURL")
    prices: Optional[Prices] = None
    date: Optional[str] = None
    iteminfo: Optional[ItemInfo] = None
    stock: Optional[str] = None


class ItemListResponse(Page):
    request: Optional[Dict[str, Any]] = None
    items: Optional[List[Item]] = None

    records_field: ClassVar[str] = "items"


# =============================================================================
# FloorList
# =============================================================================

class Floor(ApiModel):
    id: Optional[Union[int, str]] = None
    code: Optional[str] = None
    name: Optional[str] = None


class Service(ApiModel):
    name: Optional[str] = None
    code: Optional[str] = None
    floor: List[Floor] = Field(default_factory=list)


class Site(ApiModel):
    name: Optional[str] = None
    code: Optional[str] = None
    service: List[Service] = Field(default_factory=list)


class FloorListResponse(ApiModel):
    site: List[Site] = Field(default_factory=list)


# =============================================================================
# ActressSearch
# =============================================================================

class ActressImageURL(ApiModel):
    small: Optional[str] = None
    large: Optional[str] = None


class ActressListURL(ApiModel):
    digital: Optional[str] = None
    monthly_premium: Optional[str] = None
    mono: Optional[str] = None


class Actress(ApiModel):
    id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    ruby: Optional[str] = None
    bust: Optional[Union[int, str]] = None
    cup: Optional[str] = None
    waist: Optional[Union[int, str]] = None
    hip: Optional[Union[int, str]] = None
    height: Optional[Union[int, str]] = None
    birthday: Optional[str] = None
    blood_type: Optional[str] = None
    hobby: Optional[str] = None
    prefectures: Optional[str] = None
    image_url: Optional[ActressImageURL] = Field(default=None, alias="imageURL")
    list_url: Optional[ActressListURL] = Field(default=None, alias="listURL")


class ActressSearchResponse(Page):
    actress: Optional[List[Actress]] = None

    records_field: ClassVar[str] = "actress"


# =============================================================================
# Floor keyed searches
# =============================================================================

class Genre(ApiModel):
    genre_id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    ruby: Optional[str] = None
    list_url: Optional[str] = None


class GenreSearchResponse(Page):
    site_name: Optional[str] = None
    site_code: Optional[str] = None
    service_name: Optional[str] = None
    service_code: Optional[str] = None
    floor_id: Optional[Union[int, str]] = None
    floor_name: Optional[str] = None
    floor_code: Optional[str] = None
    genre: Optional[List[Genre]] = None

    records_field: ClassVar[str] = "genre"


class Maker(ApiModel):
    maker_id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    ruby: Optional[str] = None
    list_url: Optional[str] = None


class MakerSearchResponse(Page):
    site_name: Optional[str] = None
    site_code: Optional[str] = None
    service_name: Optional[str] = None
    service_code: Optional[str] = None
    floor_id: Optional[Union[int, str]] = None
    floor_name: Optional[str] = None
    floor_code: Optional[str] = None
    maker: Optional[List[Maker]] = None

    records_field: ClassVar[str] = "maker"


class Series(ApiModel):
    series_id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    ruby: Optional[str] = None
    list_url: Optional[str] = None


class SeriesSearchResponse(Page):
    site_name: Optional[str] = None
    site_code: Optional[str] = None
    service_name: Optional[str] = None
    service_code: Optional[str] = None
    floor_id: Optional[Union[int, str]] = None
    floor_name: Optional[str] = None
    floor_code: Optional[str] = None
    series: Optional[List[Series]] = None

    records_field: ClassVar[str] = "series"


class Author(ApiModel):
    # Documented as a number, served as a string.
    author_id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    ruby: Optional[str] = None
    list_url: Optional[str] = None


class AuthorSearchResponse(Page):
    site_name: Optional[str] = None
    site_code: Optional[str] = None
    service_name: Optional[str] = None
    service_code: Optional[str] = None
    floor_id: Optional[Union[int, str]] = None
    floor_name: Optional[str] = None
    floor_code: Optional[str] = None
    author: Optional[List[Author]] = None

    records_field: ClassVar[str] = "author"


__all__ = [
    "ApiModel",
    "Page",
    "Item",
    "ItemInfo",
    "ItemListResponse",
    "Floor",
    "Service",
    "Site",
    "FloorListResponse",
    "Actress",
    "ActressSearchResponse",
    "Genre",
    "GenreSearchResponse",
    "Maker",
    "MakerSearchResponse",
    "Series",
    "SeriesSearchResponse",
    "Author",
    "AuthorSearchResponse",
]
