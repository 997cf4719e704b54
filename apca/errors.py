"""Error taxonomy for issued requests.

Every failure of `Client.issue` surfaces as a subclass of `RequestError`:

- `ConversionError`: the request value could not be turned into a query
  string. Raised before anything is sent.
- `TransportError`: the HTTP transport failed (DNS, TLS, connection, timeout).
- `DecodeError`: a success response carried a body of the wrong shape.
- `EndpointError`: the status code is one the endpoint declares as a business
  error. Each endpoint subclasses it once per variant. The variant carries
  either the decoded payload or the `DecodeError` explaining why the payload
  could not be read, so the recognized status is never lost.
- `UnexpectedStatus`: the status code is not declared by the endpoint. The
  raw status and body are kept verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class RequestError(Exception):
    """Base class of everything `Client.issue` raises."""


class ConversionError(RequestError):
    pass


class TransportError(RequestError):
    def __init__(self, original: Exception):
        super().__init__(f"Transport failure: {original}")
        self.original = original


class DecodeError(RequestError):
    """A response body did not parse as the expected shape."""

    def __init__(self, message: str, body: bytes = b""):
        super().__init__(message)
        self.message = message
        self.body = body


@dataclass(frozen=True)
class ApiError:
    """Business error payload returned by the API, e.g. for status 422."""

    code: int
    message: str

    @classmethod
    def from_json(cls, data: Any) -> ApiError:
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        code = data["code"]
        message = data["message"]
        if isinstance(code, bool) or not isinstance(code, int):
            raise TypeError(f"expected integer code, got {code!r}")
        if not isinstance(message, str):
            raise TypeError(f"expected string message, got {message!r}")
        return cls(code=code, message=message)


class EndpointError(RequestError):
    """A declared business error.

    Subclasses name the variant; `payload_type` is the type the response body
    is decoded into. `result` holds either that payload or a `DecodeError`.
    """

    payload_type: Any = ApiError

    def __init__(self, status: int, body: bytes, result: Any):
        self.status = status
        self.body = body
        self.result = result
        if isinstance(result, DecodeError):
            detail = f"undecodable body ({result.message})"
        elif isinstance(result, ApiError):
            detail = f"{result.code}: {result.message}"
        else:
            detail = repr(result)
        super().__init__(f"{type(self).__name__} [{status}] {detail}")

    @property
    def payload(self) -> Any:
        return None if isinstance(self.result, DecodeError) else self.result

    @property
    def decode_error(self) -> DecodeError | None:
        return self.result if isinstance(self.result, DecodeError) else None


class UnexpectedStatus(RequestError):
    def __init__(self, status: int, body: bytes):
        self.status = status
        self.body = body
        super().__init__(f"Unexpected status {status}: {body[:200]!r}")


__all__ = [
    "ApiError",
    "ConversionError",
    "DecodeError",
    "EndpointError",
    "RequestError",
    "TransportError",
    "UnexpectedStatus",
]
