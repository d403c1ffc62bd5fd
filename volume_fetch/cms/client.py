"""HTTP client for the Strapi content API."""

from typing import Any

import requests
import structlog

from volume_fetch.utils.config import DEFAULT_REQUEST_TIMEOUT, DEFAULT_STRAPI_BASE_URL
from volume_fetch.utils.exceptions import TransportError

logger = structlog.get_logger(__name__)

# Populate everything the parser reads: page fields sorted by creation time,
# content blocks, chapter title/slug and quiz questions with their answers.
VOLUME_POPULATE_PARAMS = {
    "populate[Pages][fields][0]": "*",
    "populate[Pages][sort]": "createdAt",
    "populate[Pages][populate][Content]": "true",
    "populate[Pages][populate][Chapter][fields][0]": "Title",
    "populate[Pages][populate][Chapter][fields][1]": "Slug",
    "populate[Pages][populate][Quiz][populate][Questions][populate]": "*",
}

SERVER_ERROR_STATUS = 500


class StrapiClient:
    """Fetch raw volume documents from Strapi.

    No retries happen here: any failure is raised as ``TransportError`` and the
    caller decides whether to abort.

    Example:
        >>> client = StrapiClient()
        >>> document = client.fetch_volume("k3x9...")
        >>> document["data"]["Title"]
        'Introduction to Computing'
    """

    def __init__(
        self,
        base_url: str = DEFAULT_STRAPI_BASE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Strapi ``texts`` collection endpoint
            timeout: Request timeout in seconds
            session: Optional requests session (for connection reuse or testing)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger.bind(component="strapi_client")

    def volume_url(self, volume_id: str) -> str:
        """Return the endpoint for one volume."""
        return f"{self.base_url}/{volume_id}"

    def fetch_volume(self, volume_id: str) -> dict[str, Any]:
        """Fetch the populated volume document.

        Args:
            volume_id: Strapi ``documentId`` of the volume

        Returns:
            Decoded JSON response body

        Raises:
            TransportError: On network failure, non-2xx status or non-JSON body
        """
        url = self.volume_url(volume_id)
        self.logger.info("fetching_volume", volume_id=volume_id, url=url)

        try:
            response = self.session.get(url, params=VOLUME_POPULATE_PARAMS, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(
                f"HTTP request to Strapi failed: {e}", is_retryable=True
            ) from e

        if not response.ok:
            self.logger.error(
                "strapi_request_failed", volume_id=volume_id, status=response.status_code
            )
            raise TransportError(
                f"Strapi server returned an error: {response.status_code}",
                status_code=response.status_code,
                is_retryable=response.status_code >= SERVER_ERROR_STATUS,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError("Strapi response body is not JSON") from e

        if not isinstance(body, dict):
            raise TransportError("Strapi response body is not a JSON object")

        self.logger.info("volume_fetched", volume_id=volume_id)
        return body
