"""HTTP gateway serving Joplin notes to the browser."""

from __future__ import annotations

import http.server
import json
import logging
import socketserver
import threading
import webbrowser
from pathlib import Path
from urllib.parse import parse_qs, unquote, urlparse

from peeker.config import PeekerConfig
from peeker.core.joplin import (
    JoplinClient,
    NotFoundError,
    UpstreamError,
    UpstreamUnreachable,
)
from peeker.core.notebooks import fetch_notebook_notes, get_notebook_tree
from peeker.core.notes import get_note_markdown
from peeker.core.resources import get_image
from peeker.core.search import search_notes
from peeker.web import (
    FAVICON,
    INDEX_PAGE,
    NOTE_PAGE,
    STATIC_DIR,
    guess_content_type,
    resolve_static_path,
)

logger = logging.getLogger(__name__)

EMPTY_SEARCH_RESULT = b'{"items": [], "has_more": false}'


def upstream_error_status(error: UpstreamError) -> int:
    """Map an upstream failure to the status code returned to the browser."""
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, UpstreamUnreachable) and error.timed_out:
        return 504
    return 502


class PeekerHandler(http.server.BaseHTTPRequestHandler):
    """Request handler for the peeker gateway.

    Everything a request needs lives on the server (config, client) or is
    local to the handler, so requests can run in parallel threads.
    """

    server: PeekerServer

    def log_message(self, format: str, *args: object) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)

    @property
    def client(self) -> JoplinClient:
        return self.server.client

    def send_bytes(
        self,
        body: bytes,
        content_type: str,
        status: int = 200,
        content_length: str | None = None,
    ) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", content_length or str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def send_json(self, data: object, status: int = 200) -> None:
        self.send_bytes(json.dumps(data).encode(), "application/json", status)

    def send_error_json(self, message: str, status: int) -> None:
        self.send_json({"error": message}, status)

    def send_static(self, rel: str) -> None:
        path = resolve_static_path(rel, self.server.static_dir)
        if path is None:
            self.send_error_json("Not found", 404)
            return
        self.send_bytes(path.read_bytes(), guess_content_type(path))

    def do_GET(self) -> None:
        parsed = urlparse(self.path)
        path = parsed.path
        query = parse_qs(parsed.query)

        try:
            self.route(path, query)
        except UpstreamError as e:
            status = upstream_error_status(e)
            log = logger.info if status == 404 else logger.error
            log("%s failed: %s", path, e)
            self.send_error_json(str(e), status)

    def route(self, path: str, query: dict[str, list[str]]) -> None:
        """Dispatch a GET request to the matching gateway operation."""
        if path == "/" or path == "/index.html":
            self.send_static(INDEX_PAGE)
            return

        if path == "/favicon.ico":
            self.send_static(FAVICON)
            return

        if path.startswith("/static/"):
            self.send_static(unquote(path[len("/static/") :]))
            return

        if path.startswith("/note/"):
            self.send_static(NOTE_PAGE)
            return

        # Rewritten markdown of a note
        if path.startswith("/id/"):
            note_id = unquote(path[len("/id/") :])
            if not note_id:
                self.send_error_json("Missing note id", 404)
                return
            logger.debug("Handling note %s", note_id)
            markdown = get_note_markdown(self.client, note_id)
            self.send_bytes(markdown.encode("utf-8"), "text/markdown; charset=utf-8")
            return

        # Resource bytes, passed through
        if path.startswith("/image/"):
            image_id = unquote(path[len("/image/") :])
            if not image_id:
                self.send_error_json("Missing image id", 404)
                return
            logger.debug("Handling image %s", image_id)
            image = get_image(self.client, image_id)
            self.send_bytes(image.content, image.content_type, content_length=image.content_length)
            return

        # Search, Joplin's JSON passed through
        if path == "/search" or path.startswith("/search/"):
            search = query.get("query", [""])[0]
            logger.debug("Handling search %r", search)
            if not search.strip():
                self.send_bytes(EMPTY_SEARCH_RESULT, "application/json")
                return
            self.send_bytes(search_notes(self.client, search), "application/json")
            return

        # Tree of all notebooks
        if path == "/notebooks" or path == "/notebooks/":
            logger.debug("Handling notebooks")
            tree = get_notebook_tree(self.client, self.server.config.max_pages)
            self.send_json(tree.to_dict())
            return

        # Notes of one notebook
        if path.startswith("/notebook/"):
            notebook_id = unquote(path[len("/notebook/") :])
            if not notebook_id:
                self.send_error_json("Missing notebook id", 404)
                return
            logger.debug("Handling notebook %s", notebook_id)
            notes = fetch_notebook_notes(
                self.client, notebook_id, self.server.config.max_pages
            )
            self.send_json(
                {"items": [note.to_dict() for note in notes], "has_more": False}
            )
            return

        self.send_error_json("Not found", 404)


class PeekerServer(socketserver.ThreadingMixIn, http.server.HTTPServer):
    """Threaded HTTP server holding the gateway configuration.

    One thread per request; threads share only the immutable config and
    the stateless Joplin client.
    """

    allow_reuse_address = True
    daemon_threads = True

    def __init__(
        self,
        config: PeekerConfig,
        client: JoplinClient | None = None,
        static_dir: Path = STATIC_DIR,
        handler_class: type[PeekerHandler] = PeekerHandler,
    ):
        self.config = config
        self.client = client or JoplinClient(config)
        self.static_dir = static_dir
        super().__init__((config.host, config.port), handler_class)


def run_server(config: PeekerConfig, open_browser: bool = False) -> None:
    """Start the gateway and serve until interrupted."""
    httpd = PeekerServer(config)
    host, port = httpd.server_address[:2]
    url = f"http://{host}:{port}"

    logger.info("Peeker server listening on %s", url)
    logger.info("Forwarding requests to Joplin server on %s", config.joplin_server)

    if open_browser:

        def open_delayed() -> None:
            import time

            time.sleep(0.3)
            webbrowser.open(url)

        threading.Thread(target=open_delayed, daemon=True).start()

    try:
        # poll_interval=0.5 allows Ctrl+C to be detected on Windows
        httpd.serve_forever(poll_interval=0.5)
    except KeyboardInterrupt:
        pass
    finally:
        logger.info("Stopping...")
        httpd.server_close()
        logger.info("Stopped")
