#!/usr/bin/env python
from __future__ import annotations

import argparse
from dataclasses import asdict
from datetime import date

import pandas as pd

from apca.api.v2 import calendar
from apca.client import Client


def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch market calendar (/v2/calendar)")
    parser.add_argument("--start", required=True, help="Start date YYYY-MM-DD (inclusive)")
    parser.add_argument("--end", required=True, help="End date YYYY-MM-DD (exclusive)")
    args = parser.parse_args()

    client = Client.from_env()
    req = calendar.CalendarReq.from_range(
        date.fromisoformat(args.start), date.fromisoformat(args.end)
    )
    days = client.issue(calendar.Get, req)
    print(pd.DataFrame([asdict(d) for d in days]).to_string(index=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
