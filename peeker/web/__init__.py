"""Static frontend for the peeker gateway.

Provides lookup of the files served under ``/static/`` and of the pages
served at ``/`` and ``/note/<id>``.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path

_WEB_DIR = Path(__file__).parent
STATIC_DIR = _WEB_DIR / "static"

INDEX_PAGE = "index.html"
NOTE_PAGE = "note.html"
FAVICON = "img/favicon.svg"


def resolve_static_path(rel: str, static_dir: Path = STATIC_DIR) -> Path | None:
    """Resolve a path below the static directory.

    Args:
        rel: Path relative to the static directory, as found in the URL.
        static_dir: Directory to serve from.

    Returns:
        The file path, or None if it doesn't exist, isn't a file, or
        escapes ``static_dir`` (e.g. "../../etc/passwd").
    """
    root = static_dir.resolve()
    resolved = (root / rel.lstrip("/")).resolve()
    try:
        resolved.relative_to(root)
    except ValueError:
        return None
    if not resolved.is_file():
        return None
    return resolved


def guess_content_type(path: Path) -> str:
    """Guess the Content-Type header for a static file."""
    content_type, _ = mimetypes.guess_type(path.name)
    if content_type is None:
        return "application/octet-stream"
    if content_type.startswith("text/") or content_type in (
        "application/javascript",
        "image/svg+xml",
    ):
        return f"{content_type}; charset=utf-8"
    return content_type
