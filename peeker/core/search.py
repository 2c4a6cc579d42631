"""Search pass-through."""

from __future__ import annotations

import json
from typing import Any

from peeker.core.joplin import JoplinClient, UpstreamProtocolError


def search_notes(client: JoplinClient, query: str) -> bytes:
    """Search notes and return the Joplin JSON body byte for byte.

    The body has the upstream shape ``{"items": [{"id", "title"}], "has_more"}``.
    """
    return client.search(query.strip())


def parse_search_results(raw: bytes) -> list[dict[str, Any]]:
    """Decode the items of a raw search response (for CLI display).

    Raises:
        UpstreamProtocolError: If the body is not a search result object
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise UpstreamProtocolError(f"Invalid JSON in search results: {e}") from e
    items = data.get("items") if isinstance(data, dict) else None
    if not isinstance(items, list):
        raise UpstreamProtocolError("Search results have no 'items' list")
    return [item for item in items if isinstance(item, dict)]
