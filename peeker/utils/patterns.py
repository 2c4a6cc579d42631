"""Centralized regex patterns for Joplin markdown.

Joplin bodies reference notes and resources with its own ``:/<id>`` scheme.
These patterns find those references so they can be pointed at the gateway.
"""

from __future__ import annotations

import re

# Link or alt text: plain characters or one level of balanced brackets,
# e.g. "see [1]". Never spans lines and never contains an internal
# reference "(:/", so nested references are matched innermost first.
_TEXT_CHAR = r"(?!\(:/)[^\[\]\n]"
_LINK_TEXT = rf"(?:{_TEXT_CHAR}|\[{_TEXT_CHAR}*\])*"

# Internal reference ":/<id>" with an optional markdown title: (:/abc "Title")
_INTERNAL_TARGET = r"\(:/(?P<id>[^)\s]+)(?P<title>\s+\"[^\"\n]*\")?\)"

# Embedded image: ![alt](:/resourceID)
IMAGE_REF_PATTERN = re.compile(rf"!\[(?P<text>{_LINK_TEXT})\]{_INTERNAL_TARGET}")

# Note link: [text](:/noteID) - negative lookbehind excludes images ![alt](:/id)
NOTE_LINK_PATTERN = re.compile(rf"(?<!!)\[(?P<text>{_LINK_TEXT})\]{_INTERNAL_TARGET}")

# Inline HTML image whose src is an internal reference: <img ... src=":/id" ...>
# Only the src value is captured; the quote must match on both sides.
HTML_IMG_SRC_PATTERN = re.compile(
    r"(?P<prefix><img\b[^>]*?\s)src=(?P<quote>[\"']):/(?P<id>[^\"'\s>]+)(?P=quote)",
    re.IGNORECASE,
)
