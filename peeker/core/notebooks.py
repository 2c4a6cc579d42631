"""Notebook listing and notebook tree construction."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from peeker.config import DEFAULT_MAX_PAGES
from peeker.core.joplin import JoplinClient, UpstreamProtocolError
from peeker.models import ROOT_NOTEBOOK_ID, NotebookNode, NotebookRecord, NoteSummary

logger = logging.getLogger(__name__)


def build_notebook_tree(records: Iterable[NotebookRecord]) -> NotebookNode:
    """Build the notebook hierarchy from a flat list of records.

    The tree is built top-down from the synthetic root (id ``_root_``) using
    two lookups, id -> record and parent id -> children, never by following
    parent ids upwards. As a result:

    - records whose parent id matches no known notebook are left out, along
      with everything below them
    - records forming a parent cycle are never reached and are left out
    - for duplicate ids only the first record reached from the root is placed

    Children are sorted by title (case-sensitive, stable for equal titles).
    Note counts are copied per notebook, never summed over descendants.
    """
    records = list(records)

    # Map of notebook ids to their records, plus the synthetic root
    by_id: dict[str, NotebookRecord] = {record.id: record for record in records}
    by_id[ROOT_NOTEBOOK_ID] = NotebookRecord(
        id=ROOT_NOTEBOOK_ID, title=ROOT_NOTEBOOK_ID, parent_id=""
    )

    # Map of parent ids to their children, in input order
    children_of: dict[str, list[NotebookRecord]] = {}
    for record in records:
        key = record.parent_id or ROOT_NOTEBOOK_ID
        children_of.setdefault(key, []).append(record)

    def make_node(record: NotebookRecord) -> NotebookNode:
        return NotebookNode(
            id=record.id,
            title=record.title,
            parent_id=record.parent_id,
            note_count=record.note_count,
        )

    root = make_node(by_id[ROOT_NOTEBOOK_ID])
    placed = {ROOT_NOTEBOOK_ID}
    # Explicit stack instead of recursion: depth is only limited by memory
    pending = [root]
    while pending:
        parent = pending.pop()
        for record in sorted(children_of.get(parent.id, []), key=lambda r: r.title):
            if record.id in placed:
                logger.debug("Skipping duplicate notebook id %r", record.id)
                continue
            placed.add(record.id)
            child = make_node(record)
            parent.children.append(child)
            pending.append(child)

    dangling = sum(1 for r in records if (r.parent_id or ROOT_NOTEBOOK_ID) not in by_id)
    if dangling:
        logger.debug("%d notebook(s) with an unknown parent", dangling)
    return root


def _fetch_all_pages(
    fetch_page: Callable[[int], dict[str, Any]],
    what: str,
    max_pages: int,
) -> list[Any]:
    """Collect the ``items`` of a paginated listing.

    Pages are requested one after the other, starting at 1, until the
    upstream reports ``has_more: false``.

    Raises:
        UpstreamProtocolError: If a page is malformed or the upstream still
            reports more pages after ``max_pages`` pages
    """
    items: list[Any] = []
    for page in range(1, max_pages + 1):
        data = fetch_page(page)

        page_items = data.get("items")
        if not isinstance(page_items, list):
            raise UpstreamProtocolError(f"{what} page {page} has no 'items' list")
        has_more = data.get("has_more", False)
        if not isinstance(has_more, bool):
            raise UpstreamProtocolError(
                f"{what} page {page} has a non-boolean 'has_more': {has_more!r}"
            )

        items.extend(page_items)
        logger.debug("%s page %d: %d item(s)", what, page, len(page_items))
        if not has_more:
            return items

    raise UpstreamProtocolError(
        f"{what}: upstream still reports more pages after {max_pages} pages"
    )


def fetch_all_notebooks(
    client: JoplinClient, max_pages: int = DEFAULT_MAX_PAGES
) -> list[NotebookRecord]:
    """Retrieve every notebook from the Joplin server.

    Raises:
        UpstreamError: If any page request or decode fails
    """
    items = _fetch_all_pages(client.get_folders_page, "Notebooks", max_pages)
    return [NotebookRecord.from_api_response(item) for item in items]


def get_notebook_tree(
    client: JoplinClient, max_pages: int = DEFAULT_MAX_PAGES
) -> NotebookNode:
    """Fetch all notebooks and arrange them as a tree."""
    return build_notebook_tree(fetch_all_notebooks(client, max_pages))


def fetch_notebook_notes(
    client: JoplinClient, notebook_id: str, max_pages: int = DEFAULT_MAX_PAGES
) -> list[NoteSummary]:
    """List the notes directly inside a notebook, sorted by title."""
    items = _fetch_all_pages(
        lambda page: client.get_folder_notes_page(notebook_id, page),
        f"Notes of notebook {notebook_id}",
        max_pages,
    )
    notes = [NoteSummary.from_api_response(item) for item in items]
    return sorted(notes, key=lambda n: n.title)
