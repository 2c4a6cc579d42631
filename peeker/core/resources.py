"""Resource (image) pass-through."""

from __future__ import annotations

from peeker.core.joplin import JoplinClient
from peeker.models import Resource


def get_image(client: JoplinClient, resource_id: str) -> Resource:
    """Fetch a resource file, keeping the upstream Content-Type and Length.

    Raises:
        UpstreamError: If the resource cannot be fetched.
    """
    response = client.get_resource_file(resource_id)
    content = response.content
    content_length = response.headers.get("Content-Length")
    # httpx has already decoded compressed bodies; the header no longer matches
    if content_length is None or "Content-Encoding" in response.headers:
        content_length = str(len(content))
    return Resource(
        content=content,
        content_type=response.headers.get("Content-Type", "application/octet-stream"),
        content_length=content_length,
    )
