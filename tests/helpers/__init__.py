from .mocks import (
    make_response,
    ok,
    make_session,
    repeat_session,
    make_items,
    item_page,
    sent_params,
    sent_url,
)

__all__ = [
    "make_response",
    "ok",
    "make_session",
    "repeat_session",
    "make_items",
    "item_page",
    "sent_params",
    "sent_url",
]
