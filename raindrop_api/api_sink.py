"""
Raindrop.io destination.

Links are created one per request so that at most one request is in flight
and Raindrop.io, which lists the newest bookmark first, ends up showing the
links in export order.

API documentation: https://developer.raindrop.io/
"""

import argparse
import time
from typing import Any, Dict, Optional

import requests

from common.logging import get_or_setup_logger
from importer.sink import BaseLinkSink, SinkError

API_BASE_URL = "https://api.raindrop.io/rest/v1"
USER_ENDPOINT = f"{API_BASE_URL}/user"
RAINDROP_ENDPOINT = f"{API_BASE_URL}/raindrop"

DEFAULT_MIN_INTERVAL = 1.0
REQUEST_TIMEOUT = 30


def validate_api_token(token: str) -> str:
    """
    Validate the Raindrop.io API token format.

    Parameters
    ----------
    token : str
        The API token to validate.

    Returns
    -------
    str
        The validated API token.

    Raises
    ------
    argparse.ArgumentTypeError
        If the token format is invalid.
    """
    if not token or len(token) < 10:
        raise argparse.ArgumentTypeError("API token is too short or empty")
    return token


def build_raindrop(
    url: str,
    title: Optional[str],
    collection_id: int,
    tags=(),
    created=None,
    excerpt: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the request body for a single raindrop.

    Parameters
    ----------
    url : str
        Link URL.
    title : str, optional
        Link title. Omitted when ``None`` so Raindrop.io fills it in.
    collection_id : int
        Collection to add to (0 is Unsorted).
    tags : Iterable[str], optional
        Tags.
    created : datetime, optional
        Original save date.
    excerpt : str, optional
        Preview text.

    Returns
    -------
    Dict[str, Any]
        The raindrop in Raindrop.io API format.
    """
    raindrop: Dict[str, Any] = {
        "link": url,
        "collection": {"$id": collection_id},
    }
    if title is not None:
        raindrop["title"] = title
    if tags:
        raindrop["tags"] = list(tags)
    if created is not None:
        raindrop["created"] = created.isoformat()
    if excerpt:
        raindrop["excerpt"] = excerpt
    return raindrop


class RaindropSink(BaseLinkSink):
    """
    Adds links to a Raindrop.io collection.

    Parameters
    ----------
    token : str
        Raindrop.io API token.
    collection_id : int, optional
        Target collection (default: 0, Unsorted).
    min_interval : float, optional
        Minimum number of seconds between two requests (default: 1.0).
    session : requests.Session, optional
        HTTP session to use.
    logger : logging.Logger, optional
        Logger to use.
    """

    def __init__(
        self,
        token: str,
        collection_id: int = 0,
        min_interval: float = DEFAULT_MIN_INTERVAL,
        session: Optional[requests.Session] = None,
        logger=None,
    ):
        self.token = token
        self.collection_id = collection_id
        self.min_interval = min_interval
        self.logger = logger or get_or_setup_logger()
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        })
        self._last_request: Optional[float] = None
        self._retry_at: Optional[float] = None

    def check_connection(self) -> bool:
        """
        Test the connection to the Raindrop.io API.

        Returns
        -------
        bool
            True if the token is accepted, False otherwise.
        """
        try:
            response = self.session.get(USER_ENDPOINT, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            self.logger.error(f"Error connecting to Raindrop.io API: {e}")
            return False

        if response.status_code == 200:
            user_data = response.json()
            self.logger.info(
                f"Connected to Raindrop.io API as user: {user_data.get('user', {}).get('name', 'Unknown')}"
            )
            return True

        self.logger.error(f"Failed to connect to Raindrop.io API: {response.status_code} - {response.text}")
        return False

    def add(self, url: str, title: Optional[str] = None, preview_text: Optional[str] = None) -> None:
        self._post(build_raindrop(url, title, self.collection_id, excerpt=preview_text))

    def add_record(self, record) -> None:
        self._post(build_raindrop(
            record.url,
            record.title,
            self.collection_id,
            tags=record.tags,
            created=record.time_added,
        ))

    def _post(self, raindrop: Dict[str, Any]) -> None:
        # Bulk runs never call wait_until_ready themselves
        self.wait_until_ready()
        self._last_request = time.monotonic()
        try:
            response = self.session.post(RAINDROP_ENDPOINT, json=raindrop, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise SinkError(f"Request failed: {e}") from e

        self._update_rate_limit(response)
        if response.status_code != 200:
            raise SinkError(f"{response.status_code} - {response.text}")

        result = response.json()
        if not result.get("result", True):
            raise SinkError(result.get("errorMessage") or "Raindrop.io rejected the link")

    def _update_rate_limit(self, response) -> None:
        retry_after = response.headers.get("Retry-After")
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")

        self._retry_at = None
        try:
            if retry_after is not None:
                self._retry_at = time.monotonic() + float(retry_after)
            elif remaining is not None and int(remaining) <= 0 and reset is not None:
                self._retry_at = time.monotonic() + max(0.0, float(reset) - time.time())
        except ValueError:
            self.logger.warning(f"Ignoring malformed rate limit headers: {dict(response.headers)}")

    def wait_until_ready(self) -> None:
        """Sleep until the rate limit allows another request."""
        now = time.monotonic()
        ready_at = now
        if self._last_request is not None:
            ready_at = self._last_request + self.min_interval
        if self._retry_at is not None:
            ready_at = max(ready_at, self._retry_at)

        if ready_at > now:
            self.logger.debug(f"Waiting {ready_at - now:.1f}s before the next request")
            time.sleep(ready_at - now)

    def close(self) -> None:
        self.session.close()
