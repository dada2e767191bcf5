"""Slack message composition.

A message is two block lists: a header naming who acted on which issue/PR,
and a body that goes inside a colored attachment so the side accent shows
the state of the thread at a glance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ghslack_core.events import Actor, Target

# Slack rejects section text longer than this.
SECTION_TEXT_LIMIT = 3000


class Accent(str, Enum):
    GREEN = "#1f883d"  # opened / new
    GRAY = "#59636e"  # closed / neutral update
    PURPLE = "#8250df"  # merged


@dataclass
class MessageBlocks:
    text: str  # notification fallback
    color: Accent
    header: list[dict] = field(default_factory=list)
    body: list[dict] = field(default_factory=list)


def escape_mrkdwn(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def split_text(text: str, limit: int = SECTION_TEXT_LIMIT) -> list[str]:
    """Split *text* into chunks of at most *limit* chars, preferring line breaks."""
    chunks = []
    while len(text) > limit:
        cut = text.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        chunks.append(text[:cut])
        text = text[cut:].lstrip("\n")
    if text:
        chunks.append(text)
    return chunks


def _header(actor: Actor, target: Target) -> list[dict]:
    who = f"*<{actor.html_url}|{escape_mrkdwn(actor.login)}>*" if actor.html_url else f"*{escape_mrkdwn(actor.login)}*"
    elements: list[dict] = []
    if actor.avatar_url:
        elements.append({"type": "image", "image_url": actor.avatar_url, "alt_text": actor.login})
    elements.append({"type": "mrkdwn", "text": who})

    title = f"{escape_mrkdwn(target.title)} #{target.number}"
    link = f"*<{target.html_url}|{title}>*" if target.html_url else f"*{title}*"
    return [
        {"type": "context", "elements": elements},
        {"type": "section", "text": {"type": "mrkdwn", "text": link}},
    ]


def compose(
    actor: Actor,
    target: Target,
    color: Accent,
    rendered_body: str,
    empty_placeholder: str = "_No description provided._",
) -> MessageBlocks:
    """Build the Slack representation of one notification.

    *rendered_body* is already mrkdwn (see ``render.to_mrkdwn``). A blank body
    is replaced by *empty_placeholder* rather than posting an empty section.
    """
    text = rendered_body.strip() or empty_placeholder
    return MessageBlocks(
        text=f"{escape_mrkdwn(actor.login)}: {escape_mrkdwn(target.title)} #{target.number}",
        color=color,
        header=_header(actor, target),
        body=[{"type": "section", "text": {"type": "mrkdwn", "text": chunk}} for chunk in split_text(text)],
    )
