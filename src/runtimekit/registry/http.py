import json
import logging
from typing import List, Optional
import httpx
from .client import RegistryClient
from ..domain.errors import FetchFailed, RuntimeUnavailable

logger = logging.getLogger(__name__)

# the runtime endpoints answer 404 to requests without this user agent
USER_AGENT = "runtimekit"

class HttpRegistry(RegistryClient):
    """talks to the runtime catalog and archive endpoints over http."""

    def __init__(self, client: Optional[httpx.Client] = None):
        self.client = client or httpx.Client()
        self.client.headers["User-Agent"] = USER_AGENT

    def get_versions(self, url: str) -> List[str]:
        """
        fetch the version catalog.

        args:
            url: versions listing url, already templated with the runtime

        returns:
            version strings as listed by the endpoint

        raises:
            RuntimeUnavailable: the endpoint answered with a non-success status
            FetchFailed: transport failure or a body that is not a json array of strings
        """
        logger.debug("fetching version catalog from %s", url)
        try:
            response = self.client.get(url)
        except httpx.RequestError as e:
            raise FetchFailed(url, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise RuntimeUnavailable(url, response.status_code)

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FetchFailed(url, f"invalid version catalog: {e}") from e

        if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
            raise FetchFailed(url, "version catalog is not a list of strings")
        return data

    def fetch(self, url: str) -> httpx.Response:
        """
        open a single streaming GET against url.

        the returned response is unconsumed; read it with `iter_bytes()` and
        close it when done.

        raises:
            RuntimeUnavailable: 404 or any other non-success status
            FetchFailed: connection, timeout, dns or decoding failure
        """
        logger.debug("fetching %s", url)
        request = self.client.build_request("GET", url)
        try:
            response = self.client.send(request, stream=True)
        except httpx.RequestError as e:
            raise FetchFailed(url, str(e) or type(e).__name__) from e

        if not response.is_success:
            response.close()
            raise RuntimeUnavailable(url, response.status_code)
        return response

    def close(self):
        self.client.close()
