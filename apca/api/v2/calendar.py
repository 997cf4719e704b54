"""GET /v2/calendar: market open and close times per trading day."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Any

from apca.endpoint import Endpoint
from apca.util import encode_query, list_or_empty, parse_hhmm


@dataclass(frozen=True)
class OpenClose:
    """The market open and close times for one date."""

    date: date
    open: time
    close: time

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> OpenClose:
        return cls(
            date=date.fromisoformat(data["date"]),
            open=parse_hhmm(data["open"]),
            close=parse_hhmm(data["close"]),
        )


@dataclass(frozen=True)
class CalendarReq:
    """Date range to fetch the calendar for.

    `start` is inclusive. `end` is exclusive: the service documents it as
    inclusive but does not return the end date.
    """

    start: date
    end: date

    @classmethod
    def from_range(cls, start: date, end: date) -> CalendarReq:
        return cls(start=start, end=end)


class Get(Endpoint):
    input_type = CalendarReq

    @classmethod
    def path(cls, input: CalendarReq) -> str:
        return "/v2/calendar"

    @classmethod
    def query(cls, input: CalendarReq) -> str | None:
        return encode_query(
            [("start", input.start.isoformat()), ("end", input.end.isoformat())]
        )

    @classmethod
    def parse(cls, data: Any) -> list[OpenClose]:
        return [OpenClose.from_json(item) for item in list_or_empty(data)]


__all__ = ["CalendarReq", "Get", "OpenClose"]
