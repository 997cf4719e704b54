from __future__ import annotations

from enum import Enum


class Feed(str, Enum):
    """Source of market data."""

    # Investors Exchange only; the default for free plans.
    IEX = "iex"
    # All US exchanges; requires a paid subscription.
    SIP = "sip"


__all__ = ["Feed"]
