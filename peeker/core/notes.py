"""Note retrieval for the gateway."""

from __future__ import annotations

import logging

from peeker.core.joplin import JoplinClient, MalformedResponseError
from peeker.core.markdown import rewrite_markdown
from peeker.models import NoteDocument

logger = logging.getLogger(__name__)


def get_note_document(client: JoplinClient, note_id: str) -> NoteDocument:
    """Fetch a note and rewrite its body for the gateway.

    Args:
        client: Joplin API client.
        note_id: Id of the note to fetch.

    Returns:
        NoteDocument whose body has its internal links rewritten. Use
        ``to_markdown()`` for the version with navigation links.

    Raises:
        UpstreamError: If the note cannot be fetched.
        MalformedResponseError: If the response has no string ``body``.
    """
    data = client.get_note(note_id, fields="title,body")

    body = data.get("body")
    if not isinstance(body, str):
        raise MalformedResponseError(f"Note {note_id} response has no text body")

    title = data.get("title")
    if not isinstance(title, str):
        title = ""

    logger.debug("Rewriting note %s (%d chars)", note_id, len(body))
    return NoteDocument(note_id=note_id, title=title, body=rewrite_markdown(body))


def get_note_markdown(client: JoplinClient, note_id: str) -> str:
    """Return the rewritten note body with navigation header and footer."""
    return get_note_document(client, note_id).to_markdown()
