"""Sequential driver for endpoints whose output carries a continuation token.

The first request is issued as given. While the returned page has a
`next_page_token`, the same request is re-issued with its page token field
set to that value. A page without a token ends the iteration; nothing else
does, so an endpoint that always returns a token never terminates. Callers
that need an upper bound should stop consuming the generator themselves.

Each round depends on the previous page, so the generator must be consumed
from a single thread and never fanned out.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any, Iterator

from apca.endpoint import Endpoint

if TYPE_CHECKING:
    from apca.client import Client

logger = logging.getLogger(__name__)


def next_token(output: Any) -> str | None:
    return getattr(output, "next_page_token", None)


def iter_pages(client: Client, endpoint: type[Endpoint], input: Any) -> Iterator[Any]:
    """Yield pages in the order the server returns them.

    `input` must be a dataclass instance; it is never modified, each follow-up
    request is a copy with only the page token replaced.
    """
    field_name = endpoint.page_token_field
    if field_name is None:
        raise TypeError(f"{endpoint.__qualname__} is not a paginated endpoint")

    request = input
    page_no = 0
    while True:
        page = client.issue(endpoint, request)
        page_no += 1
        yield page

        token = next_token(page)
        logger.debug(f"{endpoint.__qualname__} page {page_no} done, next token present: {token is not None}")
        if token is None:
            return
        request = dataclasses.replace(request, **{field_name: token})
