"""GitHub login → Slack member mapping."""

from __future__ import annotations

import re

# GitHub logins: alphanumerics and single hyphens, max 39 chars. The lookbehind
# keeps e-mail addresses (user@example.com) from being treated as mentions.
_MENTION_RE = re.compile(r"(?<![\w@/])@([A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38})\b")


class UserDirectory:
    """Translates GitHub @mentions into Slack mentions.

    Constructed explicitly from config and passed to whatever renders text;
    there is no process-wide table.
    """

    def __init__(self, mapping: dict[str, str] | None = None):
        self._mapping = {k.lower(): v for k, v in (mapping or {}).items()}

    def __len__(self) -> int:
        return len(self._mapping)

    def slack_id(self, github_login: str) -> str | None:
        return self._mapping.get(github_login.lstrip("@").lower())

    def to_slack_mention(self, github_mention: str, use_github_if_not_found: bool = True) -> str:
        slack_id = self.slack_id(github_mention)
        if slack_id:
            return f"<@{slack_id}>"
        if use_github_if_not_found:
            return github_mention
        raise LookupError(f"No slack user found for github user: {github_mention.lstrip('@')}")

    def translate(self, text: str) -> str:
        """Rewrite every known @login in *text*; unknown mentions are left as-is."""
        if not self._mapping:
            return text
        return _MENTION_RE.sub(lambda m: self.to_slack_mention(m.group(0)), text)
