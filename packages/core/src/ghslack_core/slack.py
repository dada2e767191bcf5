"""Slack Web API transport.

Wraps the four calls the notifier makes: post a message and the three steps
of the external file upload flow (request an upload URL, send the bytes,
complete the upload into a thread). Timeouts and connection handling are left
to slack_sdk and requests.
"""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING

import requests
from rich.console import Console
from slack_sdk import WebClient

from ghslack_core.errors import SlackResponseError
from ghslack_store.models import NotificationHandle

if TYPE_CHECKING:
    from ghslack_core.composer import MessageBlocks

logger = logging.getLogger(__name__)


def _check(response, method: str):
    if not response.get("ok", False):
        raise SlackResponseError(method, response.get("error"))
    return response


class SlackTransport:
    def __init__(
        self,
        token: str,
        session: requests.Session | None = None,
        timeout: float = 30,
        client: WebClient | None = None,
    ):
        self._client = client if client is not None else WebClient(token=token)
        self._http = session or requests.Session()
        self._timeout = timeout

    def post(
        self, channel: str, message: MessageBlocks, thread: NotificationHandle | None = None
    ) -> NotificationHandle:
        response = _check(
            self._client.chat_postMessage(
                channel=thread.channel_id if thread else channel,
                text=message.text,
                blocks=message.header,
                attachments=[{"color": message.color.value, "blocks": message.body}],
                thread_ts=thread.ts if thread else None,
                unfurl_links=False,
            ),
            "chat.postMessage",
        )
        handle = NotificationHandle(ts=response["ts"], channel_id=response.get("channel") or channel)
        logger.info("Posted message %s to %s", handle.ts, handle.channel_id)
        return handle

    def request_upload(self, filename: str, length: int) -> tuple[str, str]:
        response = _check(
            self._client.files_getUploadURLExternal(filename=filename, length=length),
            "files.getUploadURLExternal",
        )
        return response["upload_url"], response["file_id"]

    def send(self, upload_url: str, data: bytes) -> None:
        response = self._http.post(upload_url, data=data, timeout=self._timeout)
        response.raise_for_status()

    def complete(self, file_ids: list[str], thread: NotificationHandle) -> None:
        _check(
            self._client.files_completeUploadExternal(
                files=[{"id": file_id} for file_id in file_ids],
                channel_id=thread.channel_id,
                thread_ts=thread.ts,
            ),
            "files.completeUploadExternal",
        )
        logger.info("Attached %d file(s) to thread %s", len(file_ids), thread.ts)


class ShadowTransport:
    """Dry-run transport: prints what would be posted and fabricates handles."""

    def __init__(self, console: Console | None = None):
        self._console = console or Console()
        self._counter = itertools.count(1)
        self.posted: list[tuple[NotificationHandle, MessageBlocks]] = []

    def post(
        self, channel: str, message: MessageBlocks, thread: NotificationHandle | None = None
    ) -> NotificationHandle:
        channel_id = thread.channel_id if thread else channel
        handle = NotificationHandle(ts=f"shadow.{next(self._counter)}", channel_id=channel_id)
        self.posted.append((handle, message))
        where = f"reply in {thread.ts}" if thread else "new thread"
        self._console.print(
            f"\n[bold]Shadow post[/bold] → {handle.channel_id} ({where})  [dim]{message.color.name}[/dim]"
        )
        for block in message.header + message.body:
            text = (block.get("text") or {}).get("text")
            if text:
                self._console.print(f"  {text}", markup=False)
        return handle

    def request_upload(self, filename: str, length: int) -> tuple[str, str]:
        file_id = f"SHADOW{next(self._counter)}"
        self._console.print(f"  [dim]would upload {filename} ({length} bytes) as {file_id}[/dim]")
        return "", file_id

    def send(self, upload_url: str, data: bytes) -> None:
        pass  # nothing to send in shadow mode

    def complete(self, file_ids: list[str], thread: NotificationHandle) -> None:
        self._console.print(f"  [dim]would attach {len(file_ids)} file(s) to {thread.ts}[/dim]")
