"""Notification dispatch: webhook event → Slack thread → state in the issue body.

Per issue/PR the notifier is in one of two states, derived solely from the
metadata block in the body:

    UNNOTIFIED  no parseable block — nothing has been posted (or the record is lost)
    NOTIFIED    block with a root message handle — replies go into that thread

Every run reads the body once, at the start. If the issue is UNNOTIFIED the
root message is (re)created first, whatever the event, and the event is then
handled against the fresh state, so a comment on an old issue still produces
its own reply. NOTIFIED never goes back: closing and reopening keep the thread.

Each Slack post happens before the state write recording its handle, and the
write always embeds into the body read at the start of the run. A crash
between the two leaves a posted message with no recorded handle; the next
event then creates a new root.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import requests

from ghslack_core.composer import Accent, compose, escape_mrkdwn
from ghslack_core.config import DEFAULT_CONFIG
from ghslack_core.events import (
    CLOSING_EVENTS,
    COMMENT_EVENTS,
    Actor,
    IssueOpened,
    PullRequestMerged,
    PullRequestReviewCommentCreated,
)
from ghslack_core.images import extract_image_urls, fetch_images, host_prefix_filter
from ghslack_core.render import to_mrkdwn
from ghslack_core.uploader import upload_images
from ghslack_store.models import Metadata, add_comment_notification

if TYPE_CHECKING:
    from ghslack_core.events import Event
    from ghslack_core.gh.issues import GitHubIssueApi
    from ghslack_core.slack import SlackTransport
    from ghslack_core.users import UserDirectory
    from ghslack_store.base import BaseStateStore
    from ghslack_store.models import IssueDocument, NotificationHandle

logger = logging.getLogger(__name__)


class NotificationState(Enum):
    UNNOTIFIED = "unnotified"
    NOTIFIED = "notified"

    @classmethod
    def of(cls, metadata: Metadata | None) -> NotificationState:
        return cls.NOTIFIED if metadata is not None else cls.UNNOTIFIED


@dataclass
class DispatchResult:
    """What a run did: the final state record and every message it posted."""

    metadata: Metadata
    initial_state: NotificationState
    posted: list[NotificationHandle] = field(default_factory=list)
    uploaded_files: list[str] = field(default_factory=list)


class Dispatcher:
    def __init__(
        self,
        issues: GitHubIssueApi,
        store: BaseStateStore,
        transport: SlackTransport,
        channel: str,
        users: UserDirectory | None = None,
        config: dict | None = None,
        http: requests.Session | None = None,
    ):
        self._issues = issues
        self._store = store
        self._transport = transport
        self._channel = channel
        self._users = users
        self._config = {**DEFAULT_CONFIG, **(config or {})}
        self._http = http or requests.Session()
        self._accept_image = host_prefix_filter(self._config.get("image_host_prefix"))

    # ------------------------------------------------------------------ #
    # Entry point                                                          #
    # ------------------------------------------------------------------ #

    def dispatch(self, event: Event) -> DispatchResult:
        ref = event.target.ref
        document, metadata = self._store.snapshot(ref)
        state = NotificationState.of(metadata)
        result = DispatchResult(metadata=metadata, initial_state=state)
        logger.info("%s on %s (state: %s)", type(event).__name__, ref, state.value)

        if state is NotificationState.UNNOTIFIED:
            result.metadata = self.open_thread(event, document, result)
        elif isinstance(event, IssueOpened):
            logger.info("%s already has a Slack thread (%s); nothing to do", ref, metadata.issue_notification.ts)

        if isinstance(event, COMMENT_EVENTS):
            result.metadata = self.reply_to_comment(event, document, result.metadata, result)
        elif isinstance(event, CLOSING_EVENTS):
            self.post_status(event, result.metadata, result)

        return result

    # ------------------------------------------------------------------ #
    # Transitions                                                          #
    # ------------------------------------------------------------------ #

    def open_thread(self, event: Event, document: IssueDocument, result: DispatchResult) -> Metadata:
        """UNNOTIFIED → NOTIFIED: post the root message for the issue/PR and record it."""
        ref = event.target.ref
        if isinstance(event, IssueOpened):
            author = event.actor
        else:
            author = Actor(
                login=document.author,
                avatar_url=document.author_avatar_url,
                html_url=f"https://github.com/{document.author}" if document.author else "",
            )

        message = compose(author, event.target, Accent.GREEN, self._render(document.body), self._empty_placeholder)
        handle = self._transport.post(self._channel, message)
        result.posted.append(handle)
        result.uploaded_files += self._attach_images(document.body_html, handle)

        metadata = Metadata(issue_notification=handle)
        self._store.save(ref, document.body, metadata)
        logger.info("Opened Slack thread %s for %s", handle.ts, ref)
        return metadata

    def reply_to_comment(self, event, document: IssueDocument, metadata: Metadata, result: DispatchResult) -> Metadata:
        """Mirror a new comment as a reply in the issue's thread and record its handle."""
        ref = event.target.ref
        if isinstance(event, PullRequestReviewCommentCreated):
            comment = self._issues.get_review_comment(ref, event.comment_id)
        else:
            comment = self._issues.get_issue_comment(ref, event.comment_id)

        root = metadata.issue_notification
        message = compose(event.actor, event.target, Accent.GRAY, self._render(comment.body), self._empty_placeholder)
        handle = self._transport.post(self._channel, message, thread=root)
        result.posted.append(handle)
        result.uploaded_files += self._attach_images(comment.body_html, root)

        updated = add_comment_notification(metadata, event.comment_id, handle)
        self._store.save(ref, document.body, updated)
        return updated

    def post_status(self, event: Event, metadata: Metadata, result: DispatchResult) -> None:
        """Post a closed/merged notice into the thread. State is unchanged."""
        merged = isinstance(event, PullRequestMerged)
        verb = "merged" if merged else "closed"
        text = f"{event.target.label.capitalize()} {verb} by {escape_mrkdwn(event.actor.login)}"
        message = compose(event.actor, event.target, Accent.PURPLE if merged else Accent.GRAY, text)
        result.posted.append(self._transport.post(self._channel, message, thread=metadata.issue_notification))

    # ------------------------------------------------------------------ #
    # Helpers                                                              #
    # ------------------------------------------------------------------ #

    @property
    def _empty_placeholder(self) -> str:
        return self._config["empty_body_placeholder"]

    def _render(self, markdown: str) -> str:
        return to_mrkdwn(markdown, self._users, self._config["image_placeholder"])

    def _attach_images(self, body_html: str, thread: NotificationHandle) -> list[str]:
        urls = extract_image_urls(body_html, self._accept_image)
        if not urls:
            return []
        logger.info("Uploading %d image(s) to thread %s", len(urls), thread.ts)
        images = fetch_images(urls, self._http, timeout=self._config["http_timeout"])
        return upload_images(self._transport, images, thread, self._config["fallback_image_extension"])
