#!/usr/bin/env python
"""Fetch historical trades (/v2/stocks/{symbol}/trades), following page tokens.

Requires APCA_API_KEY_ID and APCA_API_SECRET_KEY in the environment or .env.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import asdict
from datetime import datetime

import pandas as pd

from apca.client import Client
from apca.data.v2 import Feed, trades
from apca.errors import RequestError

logger = logging.getLogger(__name__)


def _parse_time(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch historical trades for a symbol")
    parser.add_argument("symbol", help="Ticker symbol, e.g. AAPL")
    parser.add_argument("--start", default="2018-12-03T21:47:00Z", help="RFC 3339 start time")
    parser.add_argument("--end", default="2018-12-03T21:48:00Z", help="RFC 3339 end time")
    parser.add_argument("--limit", type=int, default=4, help="Trades per page")
    parser.add_argument("--feed", choices=[f.value for f in Feed], default=None)
    parser.add_argument("--pages", type=int, default=1, help="Maximum pages to fetch (0 = all)")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    client = Client.from_env()
    request = trades.TradesReq(
        symbol=args.symbol,
        start=_parse_time(args.start),
        end=_parse_time(args.end),
        limit=args.limit,
        feed=Feed(args.feed) if args.feed else None,
    )

    rows = []
    try:
        for page_no, page in enumerate(client.paginate(trades.Get, request), start=1):
            rows += [asdict(t) for t in page.trades]
            if args.pages and page_no >= args.pages:
                break
    except RequestError as e:
        logger.error(f"Request failed: {e}")
        return 1

    print(pd.DataFrame(rows).to_string(index=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
