from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .api_info import ApiInfo
from .endpoint import Endpoint, build_request, classify
from .errors import TransportError
from .pagination import iter_pages

logger = logging.getLogger(__name__)


def _session_with_retries(total: int = 3, backoff: float = 0.5) -> requests.Session:
    """Session that retries failed connections but never a received response.

    Status-based retries stay off so every status code reaches `classify`.
    """
    sess = requests.Session()
    retries = Retry(
        total=total,
        connect=total,
        read=0,
        status=0,
        backoff_factor=backoff,
        status_forcelist=(),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    sess.mount("http://", adapter)
    sess.mount("https://", adapter)
    return sess


@dataclass
class Client:
    """Dispatcher issuing requests for any `Endpoint`.

    The only state is the immutable `ApiInfo` and the transport session, so a
    client can be shared between threads. No caching, retries of received
    responses, or rate limiting happen here.
    """

    api_info: ApiInfo
    timeout: float = 30.0
    session: requests.Session = field(default_factory=_session_with_retries, repr=False)

    @classmethod
    def from_env(cls) -> Client:
        return cls(api_info=ApiInfo.from_env())

    def issue(self, endpoint: type[Endpoint], input: Any) -> Any:
        """Issue one request and return the endpoint's parsed output.

        Raises:
            ConversionError: the input could not be serialized; nothing was sent
            TransportError: the HTTP transport failed
            DecodeError: the success body was malformed
            EndpointError: a declared error status was returned
            UnexpectedStatus: an undeclared status was returned
        """
        request = build_request(self.api_info, endpoint, input)
        logger.debug(f"{request.method} {request.full_url}")
        try:
            res = self.session.request(
                request.method,
                request.full_url,
                headers=request.headers,
                data=request.body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(e) from e
        logger.debug(f"{request.method} {request.url} -> {res.status_code}")
        return classify(endpoint, res.status_code, res.content)

    def paginate(self, endpoint: type[Endpoint], input: Any) -> Iterator[Any]:
        """Yield every page of a paginated endpoint, see `iter_pages`."""
        return iter_pages(self, endpoint, input)
