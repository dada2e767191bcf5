"""Notification state data models.

Decoupled from ghslack_core so the store layer can be used (and tested)
without Slack or webhook knowledge. The core layer imports these types;
the store never imports core.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

METADATA_VERSION = "0.0.1"


@dataclass(frozen=True)
class NotificationHandle:
    """A previously posted Slack message: (ts, channel)."""

    ts: str
    channel_id: str

    def to_dict(self) -> dict:
        return {"ts": self.ts, "channel_id": self.channel_id}

    @classmethod
    def from_dict(cls, d: dict) -> NotificationHandle:
        if not isinstance(d, dict):
            raise ValueError(f"notification must be an object, got {type(d).__name__}")
        ts = d.get("ts")
        channel_id = d.get("channel_id")
        if not isinstance(ts, str) or not isinstance(channel_id, str):
            raise ValueError("notification requires string 'ts' and 'channel_id'")
        return cls(ts=ts, channel_id=channel_id)


@dataclass(frozen=True)
class Metadata:
    """The state record embedded in an issue/PR body.

    ``issue_notification`` is the root message of the Slack thread.
    ``comment_notifications`` maps the string form of a GitHub comment ID to
    the reply that mirrored it.
    """

    issue_notification: NotificationHandle
    comment_notifications: dict[str, NotificationHandle] = field(default_factory=dict)
    version: str = METADATA_VERSION

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "issue_notification": self.issue_notification.to_dict(),
            "comment_notifications": {k: v.to_dict() for k, v in self.comment_notifications.items()},
        }

    @classmethod
    def from_dict(cls, d: dict) -> Metadata:
        """Build a Metadata from decoded JSON, raising ValueError on a shape mismatch."""
        if not isinstance(d, dict):
            raise ValueError(f"metadata must be an object, got {type(d).__name__}")
        version = d.get("version")
        if not isinstance(version, str):
            raise ValueError("metadata requires a string 'version'")
        comments = d.get("comment_notifications") or {}
        if not isinstance(comments, dict):
            raise ValueError("'comment_notifications' must be an object")
        return cls(
            version=version,
            issue_notification=NotificationHandle.from_dict(d.get("issue_notification")),
            comment_notifications={str(k): NotificationHandle.from_dict(v) for k, v in comments.items()},
        )


def add_comment_notification(metadata: Metadata, comment_id: int | str, handle: NotificationHandle) -> Metadata:
    """Return a copy of *metadata* with the entry for *comment_id* set to *handle*.

    The input record is left untouched.
    """
    comments = dict(metadata.comment_notifications)
    comments[str(comment_id)] = handle
    return replace(metadata, comment_notifications=comments)


@dataclass(frozen=True)
class IssueRef:
    """Identity of an issue or pull request on GitHub."""

    owner: str
    repo: str
    number: int
    kind: str = "issue"  # "issue" | "pull_request"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def is_pull_request(self) -> bool:
        return self.kind == "pull_request"

    def __str__(self) -> str:
        return f"{self.full_name}#{self.number}"


@dataclass
class IssueDocument:
    """A live read of an issue/PR: raw markdown body plus its HTML rendering."""

    body: str
    body_html: str
    author: str
    author_avatar_url: str = ""
    title: str = ""
    html_url: str = ""


@dataclass
class CommentDocument:
    """A live read of an issue comment or pull request review comment."""

    id: int
    body: str
    body_html: str
    author: str
    html_url: str = ""
