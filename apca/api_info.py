"""Credentials and addressing information shared by every request."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from apca.utils.env import load_env_file_if_present

API_BASE_URL = "https://paper-api.alpaca.markets"

ENV_KEY_ID = "APCA_API_KEY_ID"
ENV_SECRET_KEY = "APCA_API_SECRET_KEY"
ENV_BASE_URL = "APCA_API_BASE_URL"

HDR_KEY_ID = "APCA-API-KEY-ID"
HDR_SECRET = "APCA-API-SECRET-KEY"


class ApiInfoError(RuntimeError):
    pass


def _check_base_url(url: str) -> str:
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ApiInfoError(f"Invalid base URL: {url!r}")
    return url.rstrip("/")


@dataclass(frozen=True)
class ApiInfo:
    """Immutable key id / secret key / base URL triple.

    One instance is created when a `Client` is built and is shared by all
    requests the client issues.
    """

    key_id: str
    secret: str = field(repr=False)
    base_url: str = API_BASE_URL

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", _check_base_url(self.base_url))

    @classmethod
    def from_parts(cls, base_url: str, key_id: str, secret: str) -> ApiInfo:
        return cls(key_id=key_id, secret=secret, base_url=base_url)

    @classmethod
    def from_env(cls, dotenv: bool = True) -> ApiInfo:
        """Create an `ApiInfo` from the APCA_* environment variables.

        APCA_API_KEY_ID and APCA_API_SECRET_KEY are required; APCA_API_BASE_URL
        is optional and defaults to the paper trading host. With `dotenv` set a
        `.env` file in the working directory is consulted first.

        Raises ApiInfoError if a required variable is missing.
        """
        if dotenv:
            load_env_file_if_present()
        key_id = os.getenv(ENV_KEY_ID)
        if not key_id:
            raise ApiInfoError(f"Missing API key id. Set {ENV_KEY_ID} in environment or .env")
        secret = os.getenv(ENV_SECRET_KEY)
        if not secret:
            raise ApiInfoError(f"Missing API secret key. Set {ENV_SECRET_KEY} in environment or .env")
        base_url = os.getenv(ENV_BASE_URL) or API_BASE_URL
        return cls(key_id=key_id, secret=secret, base_url=base_url)

    def auth_headers(self) -> dict[str, str]:
        return build_auth_headers(self.key_id, self.secret)


def build_auth_headers(key_id: str, secret: str) -> dict[str, str]:
    return {HDR_KEY_ID: key_id, HDR_SECRET: secret}
