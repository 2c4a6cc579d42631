"""Rewriting of Joplin internal references into gateway links."""

from __future__ import annotations

import html
import re

from peeker.utils.patterns import (
    HTML_IMG_SRC_PATTERN,
    IMAGE_REF_PATTERN,
    NOTE_LINK_PATTERN,
)

IMAGE_ROUTE = "/image/"
NOTE_ROUTE = "/id/"


def _image_tag(match: re.Match[str]) -> str:
    alt = html.escape(match.group("text"), quote=True)
    resource_id = html.escape(match.group("id"), quote=True)
    return f"<img src='{IMAGE_ROUTE}{resource_id}' alt='{alt}'/>"


def _note_link(match: re.Match[str]) -> str:
    title = match.group("title") or ""
    return f"[{match.group('text')}]({NOTE_ROUTE}{match.group('id')}{title})"


def _html_img_src(match: re.Match[str]) -> str:
    quote = match.group("quote")
    return f"{match.group('prefix')}src={quote}{IMAGE_ROUTE}{match.group('id')}{quote}"


def rewrite_markdown(markdown: str) -> str:
    """Point Joplin internal references at the gateway.

    Rules run in order, each on the output of the previous one:

    1. ``![alt](:/id)`` becomes ``<img src='/image/id' alt='alt'/>``
    2. ``[text](:/id)`` not preceded by ``!`` becomes ``[text](/id/id)``
    3. ``<img ... src=":/id" ...>`` gets ``src="/image/id"``, all other
       attributes untouched

    Nested references such as ``![![b](:/Y)](:/X)`` are rewritten innermost
    first, so the rules are repeated until none of them matches. Every
    substitution removes one ``:/``, which bounds the number of rounds.
    The result is a fixed point: running the function twice gives the same
    result as once.
    """
    if ":/" not in markdown:
        return markdown

    while True:
        markdown, images = IMAGE_REF_PATTERN.subn(_image_tag, markdown)
        markdown, links = NOTE_LINK_PATTERN.subn(_note_link, markdown)
        markdown, sources = HTML_IMG_SRC_PATTERN.subn(_html_img_src, markdown)
        if not (images or links or sources):
            return markdown
