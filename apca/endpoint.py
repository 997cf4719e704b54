"""Endpoint contract, request building and response classification.

A concrete endpoint subclasses `Endpoint` and fills in:

- `input_type`: the request value class accepted by the endpoint
- `path(input)`: the path below the base URL
- `query(input)`: the encoded query string, or None
- `base_url()`: optional override of the client's base URL
- `parse(data)`: build the success value from the decoded JSON body
- `ok`: the status codes treated as success
- `errors`: ordered `(status, EndpointError subclass)` pairs

Everything else in this module is endpoint agnostic.

Examples:
    >>> class Get(Endpoint):
    ...     input_type = CalendarReq
    ...     @classmethod
    ...     def path(cls, input):
    ...         return "/v2/calendar"
    >>> client.issue(Get, CalendarReq(start, end))
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from http import HTTPStatus
from typing import Any, ClassVar, Generic, TypeVar

from apca.api_info import ApiInfo
from apca.errors import ConversionError, DecodeError, EndpointError, UnexpectedStatus

logger = logging.getLogger(__name__)

I = TypeVar("I")
O = TypeVar("O")

# Failures a decoder may raise for a body of the wrong shape.
_DECODE_FAILURES = (
    ValueError,
    TypeError,
    KeyError,
    IndexError,
    AttributeError,
    InvalidOperation,
    OverflowError,
    RecursionError,
)


@dataclass(frozen=True)
class Request:
    """A fully addressed, authenticated HTTP request."""

    method: str
    url: str
    query: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None

    @property
    def full_url(self) -> str:
        return f"{self.url}?{self.query}" if self.query else self.url


class Endpoint(Generic[I, O]):
    """Declarative description of one remote operation.

    Endpoints are used as classes and never instantiated; all hooks are
    classmethods.
    """

    method: ClassVar[str] = "GET"
    input_type: ClassVar[type | None] = None
    ok: ClassVar[tuple[int, ...]] = (HTTPStatus.OK,)
    errors: ClassVar[tuple[tuple[int, type[EndpointError]], ...]] = ()
    # Name of the continuation token field on the input; None if not paginated.
    page_token_field: ClassVar[str | None] = None

    @classmethod
    def base_url(cls) -> str | None:
        return None

    @classmethod
    def path(cls, input: I) -> str:
        raise NotImplementedError(f"{cls.__name__} does not define a path")

    @classmethod
    def query(cls, input: I) -> str | None:
        return None

    @classmethod
    def body(cls, input: I) -> bytes | None:
        return None

    @classmethod
    def parse(cls, data: Any) -> O:
        raise NotImplementedError(f"{cls.__name__} does not define a response parser")


def build_request(api_info: ApiInfo, endpoint: type[Endpoint], input: Any) -> Request:
    """Combine credentials, an endpoint and an input into a `Request`.

    Raises ConversionError if the input cannot be serialized. Nothing is sent
    over the network here.
    """
    if endpoint.input_type is not None and not isinstance(input, endpoint.input_type):
        raise ConversionError(
            f"{endpoint.__qualname__} expects {endpoint.input_type.__name__}, "
            f"got {type(input).__name__}"
        )
    try:
        query = endpoint.query(input)
        body = endpoint.body(input)
    except ConversionError:
        raise
    except (ValueError, TypeError) as e:
        raise ConversionError(f"Could not serialize {type(input).__name__}: {e}") from e

    base = (endpoint.base_url() or api_info.base_url).rstrip("/")
    return Request(
        method=endpoint.method,
        url=f"{base}{endpoint.path(input)}",
        query=query or None,
        headers=api_info.auth_headers(),
        body=body,
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def decode_json(body: bytes) -> Any:
    """Decode a JSON body; numbers with a fraction become `Decimal`.

    `NaN`, `Infinity` and `-Infinity` are rejected.
    """
    if not body.strip():
        return None
    return json.loads(body, parse_float=Decimal, parse_constant=_reject_constant)


def _decode(decoder: Any, body: bytes) -> Any:
    try:
        return decoder(decode_json(body))
    except _DECODE_FAILURES as e:
        raise DecodeError(f"{type(e).__name__}: {e}", body) from e


def classify(endpoint: type[Endpoint], status: int, body: bytes) -> Any:
    """Turn a status code and raw body into the endpoint's output.

    Returns the parsed output for a success status. Raises the declared
    `EndpointError` variant for a mapped error status (carrying the payload or
    the `DecodeError`), `DecodeError` for a malformed success body, and
    `UnexpectedStatus` otherwise.
    """
    if status in endpoint.ok:
        return _decode(endpoint.parse, body)

    for code, variant in endpoint.errors:
        if code == status:
            try:
                result = _decode(variant.payload_type.from_json, body)
            except DecodeError as e:
                result = e
            raise variant(status, body, result)

    logger.warning(f"{endpoint.__qualname__} received unmapped status {status}")
    raise UnexpectedStatus(status, body)
