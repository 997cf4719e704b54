from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import pytest

from apca.api_info import ApiInfo
from apca.data.v2 import trades
from apca.endpoint import Endpoint, Request, build_request, classify, decode_json
from apca.errors import (
    ApiError,
    ConversionError,
    DecodeError,
    EndpointError,
    UnexpectedStatus,
)


@dataclass(frozen=True)
class EchoReq:
    name: str
    count: int = 1


@dataclass(frozen=True)
class NotFoundPayload:
    resource: str

    @classmethod
    def from_json(cls, data: Any) -> NotFoundPayload:
        return cls(resource=data["resource"])


class EchoError(EndpointError):
    pass


class Invalid(EchoError):
    pass


class NotFound(EchoError):
    payload_type = NotFoundPayload


class Echo(Endpoint):
    input_type = EchoReq
    ok = (200, 201)
    errors = ((422, Invalid), (404, NotFound))

    @classmethod
    def path(cls, input: EchoReq) -> str:
        return f"/v1/echo/{input.name}"

    @classmethod
    def query(cls, input: EchoReq) -> str | None:
        if input.count < 0:
            raise ValueError("count must not be negative")
        return f"count={input.count}" if input.count != 1 else None

    @classmethod
    def parse(cls, data: Any) -> dict:
        return {"echo": data["echo"]}


class EchoElsewhere(Echo):
    @classmethod
    def base_url(cls) -> str | None:
        return "https://data.example.com/"


class EchoPost(Echo):
    method = "POST"

    @classmethod
    def body(cls, input: EchoReq) -> bytes | None:
        return json.dumps({"name": input.name, "count": input.count}).encode()


class TestBuildRequest:
    def test_url_and_headers(self, api_info):
        req = build_request(api_info, Echo, EchoReq(name="hello", count=3))

        assert req == Request(
            method="GET",
            url="https://api.example.com/v1/echo/hello",
            query="count=3",
            headers={"APCA-API-KEY-ID": "test_key", "APCA-API-SECRET-KEY": "test_secret"},
            body=None,
        )
        assert req.full_url == "https://api.example.com/v1/echo/hello?count=3"

    def test_no_query(self, api_info):
        req = build_request(api_info, Echo, EchoReq(name="hello"))

        assert req.query is None
        assert req.full_url == "https://api.example.com/v1/echo/hello"

    def test_base_url_override(self, api_info):
        req = build_request(api_info, EchoElsewhere, EchoReq(name="x"))

        assert req.url == "https://data.example.com/v1/echo/x"

    def test_query_failure_is_conversion_error(self, api_info):
        with pytest.raises(ConversionError, match="count must not be negative") as exc_info:
            build_request(api_info, Echo, EchoReq(name="x", count=-1))

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_wrong_input_type_is_conversion_error(self, api_info):
        with pytest.raises(ConversionError, match="expects EchoReq"):
            build_request(api_info, Echo, {"name": "x"})

    def test_method_and_body_carried_through(self, api_info):
        req = build_request(api_info, EchoPost, EchoReq(name="hello", count=3))

        assert req.method == "POST"
        assert req.body == b'{"name": "hello", "count": 3}'
        assert req.full_url == "https://api.example.com/v1/echo/hello?count=3"

    def test_headers_follow_api_info(self):
        info = ApiInfo(key_id="other", secret="pw", base_url="http://localhost:8080")

        req = build_request(info, Echo, EchoReq(name="x"))

        assert req.url.startswith("http://localhost:8080/")
        assert req.headers["APCA-API-KEY-ID"] == "other"


class TestClassifySuccess:
    def test_success_status_parses_output(self):
        assert classify(Echo, 200, b'{"echo": "hi"}') == {"echo": "hi"}

    def test_every_success_status_accepted(self):
        assert classify(Echo, 201, b'{"echo": "created"}') == {"echo": "created"}

    def test_malformed_success_body_is_decode_error(self):
        with pytest.raises(DecodeError) as exc_info:
            classify(Echo, 200, b"<html>oops</html>")

        assert not isinstance(exc_info.value, EndpointError)
        assert exc_info.value.body == b"<html>oops</html>"

    def test_wrong_shape_success_body_is_decode_error(self):
        with pytest.raises(DecodeError, match="KeyError"):
            classify(Echo, 200, b'{"unexpected": 1}')


class TestClassifyMappedErrors:
    @pytest.mark.parametrize(
        "status, body, variant, payload",
        [
            (422, b'{"code": 42210000, "message": "invalid symbol"}', Invalid,
             ApiError(code=42210000, message="invalid symbol")),
            (404, b'{"resource": "echo"}', NotFound, NotFoundPayload(resource="echo")),
        ],
    )
    def test_valid_payload_yields_variant(self, status, body, variant, payload):
        with pytest.raises(EchoError) as exc_info:
            classify(Echo, status, body)

        err = exc_info.value
        assert type(err) is variant
        assert err.status == status
        assert err.payload == payload
        assert err.result == payload
        assert err.decode_error is None

    @pytest.mark.parametrize("status, variant", [(422, Invalid), (404, NotFound)])
    def test_malformed_payload_keeps_variant(self, status, variant):
        with pytest.raises(EchoError) as exc_info:
            classify(Echo, status, b"not json at all")

        err = exc_info.value
        assert type(err) is variant
        assert err.payload is None
        assert isinstance(err.decode_error, DecodeError)
        assert isinstance(err.result, DecodeError)
        assert err.body == b"not json at all"

    def test_payload_with_wrong_types_keeps_variant(self):
        with pytest.raises(Invalid) as exc_info:
            classify(Echo, 422, b'{"code": "abc", "message": "x"}')

        assert isinstance(exc_info.value.decode_error, DecodeError)


class TestClassifyUnexpectedStatus:
    def test_unmapped_status_preserves_raw_body(self):
        body = b'\xff\xfeInternal Server Error \x00'

        with pytest.raises(UnexpectedStatus) as exc_info:
            classify(Echo, 500, body)

        assert exc_info.value.status == 500
        assert exc_info.value.body == body

    def test_unmapped_status_is_not_an_endpoint_error(self):
        with pytest.raises(UnexpectedStatus) as exc_info:
            classify(Echo, 403, b"")

        assert not isinstance(exc_info.value, EndpointError)

    def test_endpoint_without_error_table(self):
        class Bare(Endpoint):
            @classmethod
            def parse(cls, data):
                return data

        with pytest.raises(UnexpectedStatus):
            classify(Bare, 422, b'{"code": 1, "message": "x"}')


class TestDecodeJson:
    def test_fractions_become_decimal(self):
        from decimal import Decimal

        assert decode_json(b'{"p": 176.69}') == {"p": Decimal("176.69")}

    def test_empty_body_is_none(self):
        assert decode_json(b"  ") is None


class TestClassifyNonStandardBodies:
    INFINITE_SIZE = (
        b'{"trades": [{"t": "2018-12-04T05:00:00Z", "x": "V", "p": 1.5, "s": Infinity,'
        b' "i": 1}], "symbol": "AAPL"}'
    )
    DEEPLY_NESTED = b"[" * 200000

    @pytest.mark.parametrize("constant", [b"NaN", b"Infinity", b"-Infinity"])
    def test_json_constants_rejected(self, constant):
        with pytest.raises(ValueError, match="non-standard JSON constant"):
            decode_json(b'{"p": ' + constant + b"}")

    def test_infinity_in_success_body(self):
        with pytest.raises(DecodeError):
            classify(trades.Get, 200, self.INFINITE_SIZE)

    def test_infinity_in_error_body_keeps_variant(self):
        with pytest.raises(Invalid) as exc_info:
            classify(Echo, 422, b'{"code": Infinity, "message": "x"}')

        assert isinstance(exc_info.value.decode_error, DecodeError)

    def test_deep_nesting_in_success_body(self):
        with pytest.raises(DecodeError):
            classify(trades.Get, 200, self.DEEPLY_NESTED)

    def test_deep_nesting_in_error_body_keeps_variant(self):
        with pytest.raises(trades.InvalidInput) as exc_info:
            classify(trades.Get, 422, self.DEEPLY_NESTED)

        assert exc_info.value.status == 422
        assert isinstance(exc_info.value.decode_error, DecodeError)
        assert exc_info.value.body == self.DEEPLY_NESTED
