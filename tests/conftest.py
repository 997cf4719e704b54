from __future__ import annotations

import json
import os
from unittest.mock import Mock

import pytest

from apca.api_info import ApiInfo
from apca.client import Client


@pytest.fixture
def clean_env(monkeypatch):
    """Remove APCA_* variables so tests do not see the developer's keys."""
    original_env = os.environ.copy()
    for key in ["APCA_API_KEY_ID", "APCA_API_SECRET_KEY", "APCA_API_BASE_URL"]:
        monkeypatch.delenv(key, raising=False)

    yield

    # .env loading writes to os.environ directly
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def api_info():
    return ApiInfo(key_id="test_key", secret="test_secret", base_url="https://api.example.com")


@pytest.fixture
def client(api_info):
    return Client(api_info=api_info)


@pytest.fixture
def make_response():
    """Build a mock `requests.Response` with a status and JSON or raw body."""

    def _make(status: int, payload=None, raw: bytes | None = None) -> Mock:
        res = Mock()
        res.status_code = status
        res.content = raw if raw is not None else json.dumps(payload).encode()
        return res

    return _make


@pytest.fixture
def sample_trades_page():
    """Two trades plus a continuation token, matching the trades endpoint."""
    return {
        "trades": [
            {
                "t": "2018-12-03T21:47:01.123456789Z",
                "x": "V",
                "p": 176.69,
                "s": 100,
                "c": ["@"],
                "i": 52983525029461,
                "z": "C",
            },
            {
                "t": "2018-12-03T21:47:30Z",
                "x": "P",
                "p": 176.7,
                "s": 25,
                "c": ["@", "I"],
                "i": 52983525029462,
                "z": "C",
            },
        ],
        "symbol": "AAPL",
        "next_page_token": "abc",
    }


@pytest.fixture
def sample_calendar_data():
    return [
        {"date": "2020-04-06", "open": "09:30", "close": "16:00"},
        {"date": "2020-04-07", "open": "09:30", "close": "16:00"},
    ]
