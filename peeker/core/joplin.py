"""Joplin data API client for peeker."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from peeker.config import PeekerConfig

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Base class for failures talking to the Joplin server."""

    pass


class UpstreamUnreachable(UpstreamError):
    """Raised when the Joplin server cannot be reached or times out."""

    def __init__(self, message: str, timed_out: bool = False):
        super().__init__(message)
        self.timed_out = timed_out


class UpstreamProtocolError(UpstreamError):
    """Raised when the Joplin server answers with something unexpected."""

    pass


class UpstreamAuthError(UpstreamProtocolError):
    """Raised when the Joplin server rejects the access token."""

    pass


class MalformedResponseError(UpstreamProtocolError):
    """Raised when a decoded response lacks an expected field."""

    pass


class NotFoundError(UpstreamError):
    """Raised when the Joplin server has no such note, notebook or resource."""

    pass


def _segment(value: str) -> str:
    """Quote an id for use as a single URL path segment."""
    return quote(value, safe="")


class JoplinClient:
    """Client for the Joplin data API.

    Holds no per-request state: every call opens its own httpx client,
    bounded by the configured timeout, so one instance can serve all
    request threads.
    """

    def __init__(
        self,
        config: PeekerConfig,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Gateway configuration (server address, token, timeout).
            transport: Optional httpx transport, mainly for tests. Defaults
                to an HTTPTransport retrying failed connections
                ``config.retries`` times.
        """
        self.config = config
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self.config.joplin_server

    def _make_client(self) -> httpx.Client:
        transport = self._transport or httpx.HTTPTransport(retries=self.config.retries)
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.config.timeout,
            transport=transport,
        )

    def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """Perform a GET request and check the status.

        Args:
            endpoint: API endpoint (without base URL), already quoted
            params: Query parameters; the token is added here

        Returns:
            The response, body fully read

        Raises:
            UpstreamUnreachable: On connection errors and timeouts
            UpstreamAuthError: If the token is rejected
            NotFoundError: If the upstream answers 404
            UpstreamProtocolError: For any other unexpected status
        """
        query = dict(params or {})
        query["token"] = self.config.joplin_token
        logger.debug("GET %s%s params=%s", self.base_url, endpoint, sorted(params or {}))

        try:
            with self._make_client() as client:
                response = client.get(endpoint, params=query)
        except httpx.TimeoutException as e:
            raise UpstreamUnreachable(
                f"Joplin server timed out after {self.config.timeout}s ({endpoint})",
                timed_out=True,
            ) from e
        except httpx.TransportError as e:
            raise UpstreamUnreachable(
                f"Cannot reach Joplin server at {self.base_url}: {e}"
            ) from e

        if response.status_code == 404:
            raise NotFoundError(f"Not found: {endpoint}")
        elif response.status_code in (401, 403):
            raise UpstreamAuthError("Joplin server rejected the access token")
        elif response.status_code >= 400:
            raise UpstreamProtocolError(
                f"Joplin server error {response.status_code} for {endpoint}"
            )
        return response

    def get_json(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET an endpoint and decode its JSON object.

        Raises:
            UpstreamProtocolError: If the body is not a JSON object
        """
        response = self._get(endpoint, params)
        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamProtocolError(f"Invalid JSON from {endpoint}: {e}") from e
        if not isinstance(data, dict):
            raise UpstreamProtocolError(
                f"Expected a JSON object from {endpoint}, got {type(data).__name__}"
            )
        return data

    def get_note(self, note_id: str, fields: str = "title,body") -> dict[str, Any]:
        """Get a note's fields."""
        return self.get_json(f"/notes/{_segment(note_id)}", {"fields": fields})

    def get_folders_page(self, page: int, fields: str = "id,title,parent_id") -> dict[str, Any]:
        """Get one page of the notebook listing. First page is number 1."""
        return self.get_json("/folders", {"page": page, "fields": fields})

    def get_folder_notes_page(
        self, folder_id: str, page: int, fields: str = "id,title"
    ) -> dict[str, Any]:
        """Get one page of the notes inside a notebook."""
        return self.get_json(
            f"/folders/{_segment(folder_id)}/notes", {"page": page, "fields": fields}
        )

    def get_resource_file(self, resource_id: str) -> httpx.Response:
        """Get the raw file of a resource (image, attachment)."""
        return self._get(f"/resources/{_segment(resource_id)}/file")

    def search(self, query: str, fields: str = "id,title") -> bytes:
        """Run a search and return the upstream body untouched."""
        response = self._get("/search", {"query": query, "fields": fields})
        return response.content
