"""Client side of the calendar fetch proxy contract."""

import logging

import httpx
from pydantic import ValidationError as PydanticValidationError

from busical.config import BusiCalConfig
from busical.constants import CALENDAR_MARKER
from busical.exceptions import FetchError
from busical.models.feed import FeedResponse
from busical.urls import normalize_ics_url, validate_ics_url

logger = logging.getLogger(__name__)


class ProxyFeedClient:
    """Async client fetching ICS text through the fetch proxy.

    The proxy returns a JSON envelope; every failure mode surfaces as a
    FetchError and nothing is retried.
    """

    def __init__(
        self,
        config: BusiCalConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the feed client.

        Args:
            config: BusiCal configuration (proxy URL, timeout, size cap)
            client: Optional shared httpx client (dependency injection)
        """
        self.config = config or BusiCalConfig()
        self._client = client

    async def fetch(self, url: str) -> str:
        """Fetch raw ICS text for a feed URL.

        Raises:
            ValidationError: If the URL is rejected before the request
            FetchError: If the proxy or upstream fetch fails
        """
        url = validate_ics_url(normalize_ics_url(url))

        if self._client is not None:
            response = await self._request(self._client, url)
        else:
            async with httpx.AsyncClient(timeout=self.config.fetch_timeout) as client:
                response = await self._request(client, url)

        return self._unwrap(response)

    async def _request(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        try:
            return await client.get(
                self.config.proxy_url,
                params={"url": url},
                headers={"Accept": "application/json"},
            )
        except httpx.TimeoutException as e:
            raise FetchError("Proxy request timed out", details=str(e)) from e
        except httpx.HTTPError as e:
            raise FetchError("Proxy request failed", details=str(e)) from e

    def _unwrap(self, response: httpx.Response) -> str:
        """Validate the proxy envelope and return the ICS text."""
        try:
            envelope = FeedResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise FetchError(
                f"Proxy returned an unreadable response (HTTP {response.status_code})",
                details=str(e),
            ) from e

        if not envelope.success:
            logger.warning(
                f"Feed fetch failed: proxy status {response.status_code}, "
                f"upstream status {envelope.upstream_status}"
            )
            raise FetchError(
                envelope.error or "Failed to fetch calendar",
                details=envelope.details,
                upstream_status=envelope.upstream_status,
            )

        data = envelope.data
        if not data:
            raise FetchError("Proxy response contained no calendar data")

        size = len(data.encode("utf-8"))
        if size > self.config.max_feed_bytes:
            raise FetchError(
                f"Calendar feed is too large ({size} bytes, "
                f"limit {self.config.max_feed_bytes})"
            )

        if CALENDAR_MARKER not in data:
            raise FetchError("Response does not appear to be a valid ICS file")

        logger.info(f"Fetched calendar feed ({size} bytes)")
        return data
