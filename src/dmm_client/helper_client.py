"""
Convenience wrapper around :class:`~dmm_client.api_client.DmmApiClient`.
"""

from __future__ import annotations
from typing import Any, Iterator, Optional

from .api_client import ClientConfig, DmmApiClient, ParamsT
from .types import Item, ItemListResponse


class DmmApiHelperClient:
    """
    Helper client adding record lookups on top of the endpoint client.

    Lookups that find nothing return ``None``; a failed request is raised,
    never reported as "not found".
    """

    def __init__(self, config: Optional[ClientConfig] = None, *, client: Optional[DmmApiClient] = None,
                 **options: Any):
        """
        Args:
            config: ClientConfig for a new underlying client
            client: Existing client to wrap instead of creating one
            **options: ClientConfig fields, as accepted by DmmApiClient
        """
        self._client = client if client is not None else DmmApiClient(config, **options)

    def api(self) -> DmmApiClient:
        """Get the underlying DmmApiClient."""
        return self._client

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> DmmApiHelperClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get_item_by_id(self, cid: str, **options: Any) -> Optional[Item]:
        """
        Fetch a single item by its content ID.

        Args:
            cid: Content ID of the item
            **options: Other item search parameters (e.g. site, service);
                ``cid``, ``hits`` and ``offset`` are set by this method

        Returns:
            The first matching item, or None when nothing matches
        """
        options.pop("hits", None)
        options.pop("offset", None)
        response = self._client.get_item_list(options, cid=cid, hits=1, offset=1)
        items = response.records()
        if items:
            return items[0]
        return None

    def get_item_list(self, params: ParamsT = None, **kwargs: Any) -> ItemListResponse:
        return self._client.get_item_list(params, **kwargs)

    def get_all_items(self, params: ParamsT = None, **kwargs: Any) -> Iterator[Item]:
        return self._client.get_all_items(params, **kwargs)
