"""Data models for peeker."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

# Reserved id of the synthetic notebook that holds all top-level notebooks
ROOT_NOTEBOOK_ID = "_root_"


def _str_field(data: dict[str, Any], key: str) -> str:
    """Return a string field from an upstream item, or "" if absent/ill-typed."""
    value = data.get(key)
    return value if isinstance(value, str) else ""


@dataclass
class NotebookRecord:
    """A notebook (Joplin folder) as listed by the upstream API."""

    id: str
    title: str
    parent_id: str = ""  # "" = top-level notebook
    note_count: int = 0

    @classmethod
    def from_api_response(cls, data: Any) -> NotebookRecord:
        """Create a NotebookRecord from one item of a /folders page.

        Missing or ill-typed fields fall back to "" and 0.
        """
        if not isinstance(data, dict):
            data = {}
        note_count = data.get("note_count")
        if isinstance(note_count, bool) or not isinstance(note_count, int):
            note_count = 0
        return cls(
            id=_str_field(data, "id"),
            title=_str_field(data, "title"),
            parent_id=_str_field(data, "parent_id"),
            note_count=max(note_count, 0),
        )


@dataclass
class NotebookNode:
    """A notebook and its sub-notebooks."""

    id: str
    title: str
    parent_id: str
    note_count: int = 0
    children: list[NotebookNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the subtree for the /notebooks/ JSON response."""
        return {
            "id": self.id,
            "title": self.title,
            "parent_id": self.parent_id,
            "n_children": self.note_count,
            "children": [child.to_dict() for child in self.children],
        }

    def walk(self, depth: int = 0):
        """Yield (depth, node) pairs in display order, root first."""
        stack = [(depth, self)]
        while stack:
            level, node = stack.pop()
            yield level, node
            stack.extend((level + 1, child) for child in reversed(node.children))


@dataclass
class NoteSummary:
    """Id and title of a note, as listed inside a notebook."""

    id: str
    title: str

    @classmethod
    def from_api_response(cls, data: Any) -> NoteSummary:
        if not isinstance(data, dict):
            data = {}
        return cls(id=_str_field(data, "id"), title=_str_field(data, "title"))

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "title": self.title}


# Navigation links placed above and below every note
HOME_LINK = (
    "<a href='/'>"
    "<img src='/static/img/home.svg' width='20px' height='20px' alt='Joplin Peeker Home'/>"
    " Home</a>"
)
OPEN_IN_JOPLIN_LINK = (
    "<a href='joplin://x-callback-url/openNote?id={note_id}'>"
    "<img src='/static/img/joplin_logo.svg' width='20px' height='20px' alt='Joplin Logo'/>"
    " Open in Joplin</a>"
)
NAV_SEPARATOR = "   |   "


@dataclass
class NoteDocument:
    """A note whose body has been rewritten for the gateway."""

    note_id: str
    title: str
    body: str

    @property
    def nav_links(self) -> str:
        """Home link and "Open in Joplin" deep link for this note."""
        note_id = html.escape(quote(self.note_id, safe=""), quote=True)
        return HOME_LINK + NAV_SEPARATOR + OPEN_IN_JOPLIN_LINK.format(note_id=note_id)

    def to_markdown(self) -> str:
        """Return the body wrapped in the navigation header and footer."""
        nav = self.nav_links
        return f"{nav}\n\n{self.body}\n\n{nav}"


@dataclass
class Resource:
    """Raw bytes of an upstream resource (usually an image)."""

    content: bytes
    content_type: str
    content_length: str
