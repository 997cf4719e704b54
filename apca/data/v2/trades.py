"""GET /v2/stocks/{symbol}/trades: historical trades, one page per request."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from http import HTTPStatus
from typing import Any
from urllib.parse import quote

from apca.data import DATA_BASE_URL
from apca.data.v2 import Feed
from apca.endpoint import Endpoint
from apca.errors import EndpointError
from apca.util import (
    encode_query,
    expect_decimal,
    expect_str,
    expect_uint,
    format_timestamp,
    list_or_empty,
    parse_timestamp,
)


@dataclass(frozen=True)
class TradesReq:
    """Request for the trades of one symbol between `start` and `end`.

    Both bounds are inclusive and must be timezone aware. `limit` may range
    from 1 to 10000; the service defaults to 1000. `feed` defaults to IEX for
    free plans and SIP for unlimited subscriptions.
    """

    symbol: str
    start: datetime
    end: datetime
    limit: int | None = None
    page_token: str | None = None
    feed: Feed | None = None


@dataclass(frozen=True)
class Trade:
    timestamp: datetime
    exchange: str
    price: Decimal
    size: int
    trade_id: int

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Trade:
        return cls(
            timestamp=parse_timestamp(data["t"]),
            exchange=expect_str(data["x"]),
            price=expect_decimal(data["p"]),
            size=expect_uint(data["s"]),
            trade_id=expect_uint(data["i"]),
        )


@dataclass(frozen=True)
class Trades:
    """One page of trades."""

    symbol: str
    trades: list[Trade] = field(default_factory=list)
    next_page_token: str | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Trades:
        token = data.get("next_page_token")
        if token is not None and not isinstance(token, str):
            raise TypeError(f"expected string page token, got {token!r}")
        return cls(
            symbol=expect_str(data["symbol"]),
            trades=[Trade.from_json(item) for item in list_or_empty(data.get("trades"))],
            next_page_token=token,
        )


class GetError(EndpointError):
    """Errors reported by the trades endpoint."""


class InvalidInput(GetError):
    """A query parameter was invalid, e.g. an unknown symbol or page token."""


class Get(Endpoint):
    input_type = TradesReq
    errors = ((HTTPStatus.UNPROCESSABLE_ENTITY, InvalidInput),)
    page_token_field = "page_token"

    @classmethod
    def base_url(cls) -> str | None:
        return DATA_BASE_URL

    @classmethod
    def path(cls, input: TradesReq) -> str:
        return f"/v2/stocks/{quote(input.symbol, safe='')}/trades"

    @classmethod
    def query(cls, input: TradesReq) -> str | None:
        return encode_query(
            [
                ("start", format_timestamp(input.start)),
                ("end", format_timestamp(input.end)),
                ("limit", input.limit),
                ("page_token", input.page_token),
                ("feed", input.feed),
            ]
        )

    @classmethod
    def parse(cls, data: Any) -> Trades:
        return Trades.from_json(data)


__all__ = ["Get", "GetError", "InvalidInput", "Trade", "Trades", "TradesReq"]
