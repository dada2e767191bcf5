"""Inbound webhook events.

Each trigger the notifier reacts to has its own class, so code handling a
comment event can rely on ``comment_id`` being there instead of probing an
untyped payload. ``parse_event`` is the only place that touches raw GitHub
webhook JSON.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ghslack_core.errors import IncompleteEventError
from ghslack_store.models import IssueRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    login: str
    avatar_url: str = ""
    html_url: str = ""


@dataclass(frozen=True)
class Target:
    """The issue or pull request an event is about."""

    owner: str
    repo: str
    number: int
    kind: str  # "issue" | "pull_request"
    title: str = ""
    html_url: str = ""

    @property
    def ref(self) -> IssueRef:
        return IssueRef(owner=self.owner, repo=self.repo, number=self.number, kind=self.kind)

    @property
    def label(self) -> str:
        return "pull request" if self.kind == "pull_request" else "issue"


@dataclass(frozen=True)
class _Event:
    actor: Actor
    target: Target
    body: str


@dataclass(frozen=True)
class _CommentEvent(_Event):
    comment_id: int
    comment_url: str = ""


@dataclass(frozen=True)
class IssueOpened(_Event):
    """An issue or pull request was opened."""


@dataclass(frozen=True)
class IssueClosed(_Event):
    pass


@dataclass(frozen=True)
class PullRequestClosed(_Event):
    """Closed without merging."""


@dataclass(frozen=True)
class PullRequestMerged(_Event):
    pass


@dataclass(frozen=True)
class IssueCommentCreated(_CommentEvent):
    """A conversation comment on an issue or pull request."""


@dataclass(frozen=True)
class PullRequestReviewCommentCreated(_CommentEvent):
    """An inline review comment on a pull request diff."""


Event = Union[
    IssueOpened,
    IssueClosed,
    IssueCommentCreated,
    PullRequestReviewCommentCreated,
    PullRequestClosed,
    PullRequestMerged,
]

CLOSING_EVENTS = (IssueClosed, PullRequestClosed, PullRequestMerged)
COMMENT_EVENTS = (IssueCommentCreated, PullRequestReviewCommentCreated)


def _require(payload: dict, key: str, event_name: str) -> dict:
    value = payload.get(key)
    if not isinstance(value, dict):
        raise IncompleteEventError(f"The {event_name} event does not contain a {key}.")
    return value


def _require_int(obj: dict, key: str, event_name: str) -> int:
    value = obj.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise IncompleteEventError(f"The {event_name} event does not contain a {key}.")
    return value


def _actor(payload: dict, event_name: str) -> Actor:
    sender = _require(payload, "sender", event_name)
    return Actor(
        login=sender.get("login", ""),
        avatar_url=sender.get("avatar_url", ""),
        html_url=sender.get("html_url", ""),
    )


def _target(payload: dict, obj: dict, kind: str, event_name: str) -> Target:
    repository = _require(payload, "repository", event_name)
    owner, _, repo = repository.get("full_name", "").partition("/")
    return Target(
        owner=owner,
        repo=repo,
        number=_require_int(obj, "number", event_name),
        kind=kind,
        title=obj.get("title") or "",
        html_url=obj.get("html_url") or "",
    )


def parse_event(event_name: str, payload: dict) -> Event | None:
    """Classify a GitHub webhook delivery.

    Returns None for events and actions the notifier does not handle (the
    caller logs and exits). Raises IncompleteEventError when a handled event
    lacks an object the notification needs.
    """
    action = payload.get("action")

    if event_name == "issues" and action in ("opened", "closed"):
        issue = _require(payload, "issue", event_name)
        cls = IssueOpened if action == "opened" else IssueClosed
        return cls(
            actor=_actor(payload, event_name),
            target=_target(payload, issue, "issue", event_name),
            body=issue.get("body") or "",
        )

    if event_name == "pull_request" and action in ("opened", "closed"):
        pr = _require(payload, "pull_request", event_name)
        if action == "opened":
            cls = IssueOpened
        else:
            cls = PullRequestMerged if pr.get("merged") else PullRequestClosed
        return cls(
            actor=_actor(payload, event_name),
            target=_target(payload, pr, "pull_request", event_name),
            body=pr.get("body") or "",
        )

    if event_name == "issue_comment" and action == "created":
        issue = _require(payload, "issue", event_name)
        comment = _require(payload, "comment", event_name)
        kind = "pull_request" if issue.get("pull_request") else "issue"
        return IssueCommentCreated(
            actor=_actor(payload, event_name),
            target=_target(payload, issue, kind, event_name),
            body=comment.get("body") or "",
            comment_id=_require_int(comment, "id", event_name),
            comment_url=comment.get("html_url") or "",
        )

    if event_name == "pull_request_review_comment" and action == "created":
        pr = _require(payload, "pull_request", event_name)
        comment = _require(payload, "comment", event_name)
        return PullRequestReviewCommentCreated(
            actor=_actor(payload, event_name),
            target=_target(payload, pr, "pull_request", event_name),
            body=comment.get("body") or "",
            comment_id=_require_int(comment, "id", event_name),
            comment_url=comment.get("html_url") or "",
        )

    logger.info("Ignoring unsupported event %s/%s", event_name, action)
    return None


def load_event(event_name: str, event_path: str) -> Event | None:
    """Read the webhook payload GitHub Actions writes to GITHUB_EVENT_PATH."""
    payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    return parse_event(event_name, payload)
