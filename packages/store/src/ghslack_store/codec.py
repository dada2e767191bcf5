"""Metadata block codec.

The notification state lives inside the issue/PR body as an HTML comment:

    <!-- customizable-slack-notify
    {
      "version": "0.0.1",
      "issue_notification": {"ts": "...", "channel_id": "..."},
      "comment_notifications": {}
    }
    -->

GitHub hides HTML comments when rendering, so the block is invisible on the
issue page but still editable by anyone who edits the body. Only the first
block in a body is ever read or replaced.
"""

from __future__ import annotations

import json
import logging
import re

from ghslack_store.models import Metadata

logger = logging.getLogger(__name__)

MARKER = "customizable-slack-notify"

# Linear on unterminated blocks, and a block never spans into the next comment.
_BLOCK_RE = re.compile(r"<!--\s*" + re.escape(MARKER) + r"((?:(?!<!--).)*?)-->", re.S)


def parse_metadata(body: str | None) -> Metadata | None:
    """Return the Metadata embedded in *body*, or None if absent or undecodable.

    Never raises: bodies are user-editable, so a mangled block is an expected
    input and is reported as a warning only.
    """
    match = _BLOCK_RE.search(body or "")
    if match is None:
        return None
    try:
        return Metadata.from_dict(json.loads(match.group(1).strip()))
    except (ValueError, TypeError, RecursionError) as e:
        logger.warning("Failed to parse metadata JSON: %s", e)
        return None


def render_block(metadata: Metadata) -> str:
    return f"<!-- {MARKER}\n{json.dumps(metadata.to_dict(), indent=2)}\n-->"


def embed_metadata(body: str | None, metadata: Metadata) -> str:
    """Write *metadata* into *body*, replacing the first existing block or appending one."""
    body = body or ""
    block = render_block(metadata)
    if _BLOCK_RE.search(body):
        # Callable replacement so backslashes in the JSON are not treated as group references.
        return _BLOCK_RE.sub(lambda _m: block, body, count=1)
    return f"{body}\n\n{block}"
