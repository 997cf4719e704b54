"""Typed client for the Alpaca HTTP API.

This package provides:
- `ApiInfo`, the credentials and base URL shared by all requests
- `Endpoint`, a declarative contract per remote operation
- `Client.issue` to dispatch a request and classify its response
- `Client.paginate` to walk endpoints that return a continuation token

Concrete endpoints live in `apca.api.v2` (trading host) and `apca.data.v2`
(market data host).
"""

from apca.api_info import ApiInfo, ApiInfoError
from apca.client import Client
from apca.endpoint import Endpoint, Request
from apca.errors import (
    ApiError,
    ConversionError,
    DecodeError,
    EndpointError,
    RequestError,
    TransportError,
    UnexpectedStatus,
)

__all__ = [
    "ApiError",
    "ApiInfo",
    "ApiInfoError",
    "Client",
    "ConversionError",
    "DecodeError",
    "Endpoint",
    "EndpointError",
    "Request",
    "RequestError",
    "TransportError",
    "UnexpectedStatus",
]
