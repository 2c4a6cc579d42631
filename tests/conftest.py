"""Shared fixtures for peeker tests."""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from peeker.config import ENV_VARS, PeekerConfig
from peeker.core.joplin import JoplinClient

# =============================================================================
# Contract Test Skip Conditions
# =============================================================================
# Contract tests talk to a real Joplin server. Example:
#   JOPLIN_TOKEN=... JOPLIN_SERVER=http://localhost:41184 pytest -m contract

requires_joplin = pytest.mark.skipif(
    not os.getenv("JOPLIN_TOKEN"),
    reason="requires JOPLIN_TOKEN environment variable and a running Joplin",
)


# =============================================================================
# Fake Joplin server
# =============================================================================

TOKEN = "test-token"
FOLDERS_PAGE_SIZE = 2

FOLDERS = [
    {"id": "nb-work", "title": "Work", "parent_id": ""},
    {"id": "nb-archive", "title": "Archive", "parent_id": ""},
    {"id": "nb-projects", "title": "Projects", "parent_id": "nb-work"},
    {"id": "nb-orphan", "title": "Orphan", "parent_id": "nb-deleted"},
    {"id": "nb-meetings", "title": "Meetings", "parent_id": "nb-work"},
]

NOTES = {
    "note1": {
        "title": "First note",
        "body": "# First\n\n![cat](:/res1)\n\nSee [the second note](:/note2).",
    },
    "note2": {"title": "Second note", "body": "No links here."},
    "broken": {"title": "No body"},
}

FOLDER_NOTES = {
    "nb-work": [
        {"id": "note2", "title": "Second note"},
        {"id": "note1", "title": "First note"},
    ],
}

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"
RESOURCES = {"res1": (PNG_BYTES, "image/png")}

SEARCH_BODY = b'{"items":[{"id":"note1","title":"First note"}],"has_more":false}'


def _page(items: list, page: int, size: int) -> dict:
    start = (page - 1) * size
    return {"items": items[start : start + size], "has_more": start + size < len(items)}


def fake_joplin(request: httpx.Request) -> httpx.Response:
    """Answer requests the way the Joplin data API does."""
    params = request.url.params
    if params.get("token") != TOKEN:
        return httpx.Response(403, json={"error": "Invalid token"})

    path = request.url.path
    page = int(params.get("page", "1"))

    if path == "/folders":
        return httpx.Response(200, json=_page(FOLDERS, page, FOLDERS_PAGE_SIZE))

    if path.startswith("/folders/") and path.endswith("/notes"):
        folder_id = path[len("/folders/") : -len("/notes")]
        notes = FOLDER_NOTES.get(folder_id, [])
        return httpx.Response(200, json=_page(notes, page, FOLDERS_PAGE_SIZE))

    if path.startswith("/notes/"):
        note = NOTES.get(path[len("/notes/") :])
        if note is not None:
            return httpx.Response(200, json=note)

    if path.startswith("/resources/") and path.endswith("/file"):
        resource = RESOURCES.get(path[len("/resources/") : -len("/file")])
        if resource is not None:
            content, content_type = resource
            return httpx.Response(
                200,
                content=content,
                headers={"Content-Type": content_type, "Content-Length": str(len(content))},
            )

    if path == "/search":
        return httpx.Response(
            200, content=SEARCH_BODY, headers={"Content-Type": "application/json"}
        )

    return httpx.Response(404, content=json.dumps({"error": "Not Found"}).encode())


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def peeker_config() -> PeekerConfig:
    """Config pointing at the fake Joplin server."""
    return PeekerConfig(
        joplin_token=TOKEN,
        joplin_server="http://joplin.test",
        host="127.0.0.1",
        port=0,
        timeout=5.0,
        retries=0,
        max_pages=10,
    )


@pytest.fixture
def make_client(
    peeker_config: PeekerConfig,
) -> Callable[..., JoplinClient]:
    """Factory for clients backed by a mock transport handler."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response] = fake_joplin,
        config: PeekerConfig | None = None,
    ) -> JoplinClient:
        return JoplinClient(config or peeker_config, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def joplin_client(make_client: Callable[..., JoplinClient]) -> JoplinClient:
    """Client talking to the fake Joplin server."""
    return make_client()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Run in an empty directory with no peeker environment variables.

    Variables are set then deleted so that values a test loads from a .env
    file are removed again on teardown.
    """
    for var in [*ENV_VARS.values(), "PEEKER_CONFIG"]:
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)
    return tmp_path
