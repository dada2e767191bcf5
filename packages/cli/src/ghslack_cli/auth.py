"""Token resolution.

GitHub token, first match wins:
  1. GITHUB_TOKEN environment variable (injected by Actions)
  2. GH_TOKEN (the variable the gh CLI itself reads)
  3. `gh auth token` (GitHub CLI session, for local `inspect` / `notify --shadow`)

Slack token: SLACK_TOKEN, then SLACK_BOT_TOKEN. There is no interactive
fallback; a bot token with chat:write and files:write is required.
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)


def _gh_cli_token() -> str | None:
    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    token = result.stdout.strip() if result.returncode == 0 else ""
    if token:
        logger.debug("Using the gh CLI session token.")
    return token or None


def resolve_github_token() -> str | None:
    """Return a GitHub token, or None when no source has one.

    ``notify`` rewrites the issue/PR body to record Slack message handles, so
    the token needs issues and pull-requests write access; the default Actions
    ``GITHUB_TOKEN`` has it once the workflow grants those permissions.
    ``inspect`` only reads. Never raises.
    """
    for var in ("GITHUB_TOKEN", "GH_TOKEN"):
        token = os.environ.get(var)
        if token:
            return token
    return _gh_cli_token()


def resolve_slack_token() -> str | None:
    return os.environ.get("SLACK_TOKEN") or os.environ.get("SLACK_BOT_TOKEN") or None
