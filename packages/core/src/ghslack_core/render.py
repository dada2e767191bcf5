"""GitHub markdown → Slack mrkdwn."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from markdown_to_mrkdwn import SlackMarkdownConverter

if TYPE_CHECKING:
    from ghslack_core.users import UserDirectory

_IMG_TAG_RE = re.compile(r"<img\b[^<>]*>", re.IGNORECASE)
# GitHub hides HTML comments when rendering, including the metadata block.
_HTML_COMMENT_RE = re.compile(r"<!--(?:(?!<!--).)*?-->", re.S)


def to_mrkdwn(markdown: str, users: UserDirectory | None = None, image_placeholder: str = "[image]") -> str:
    """Render a GitHub markdown body as Slack mrkdwn.

    Raw ``<img>`` tags become *image_placeholder* because the images are
    uploaded into the thread separately. Returns "" for bodies with no
    visible content.
    """
    text = _HTML_COMMENT_RE.sub("", markdown or "")
    text = _IMG_TAG_RE.sub(image_placeholder, text).strip()
    if not text:
        return ""
    converted = SlackMarkdownConverter().convert(text).strip()
    if users is not None:
        converted = users.translate(converted)
    return converted
