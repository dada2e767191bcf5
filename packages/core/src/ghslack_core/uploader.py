"""Image upload into a Slack thread."""

from __future__ import annotations

import logging
import posixpath
from typing import TYPE_CHECKING, Iterable
from urllib.parse import urlparse

if TYPE_CHECKING:
    from ghslack_core.slack import SlackTransport
    from ghslack_store.models import NotificationHandle

logger = logging.getLogger(__name__)


def image_filename(url: str, index: int, fallback_extension: str = "png") -> str:
    """Name an upload after its position, keeping the URL path's extension if it has one."""
    ext = posixpath.splitext(urlparse(url).path)[1].lstrip(".").lower()
    return f"image_{index}.{ext or fallback_extension}"


def upload_images(
    transport: SlackTransport,
    images: Iterable[tuple[str, bytes]],
    thread: NotificationHandle,
    fallback_extension: str = "png",
) -> list[str]:
    """Upload each image and attach the whole batch to *thread*.

    Images are handled one at a time in input order. If any fetch, upload URL
    request or byte upload fails the error propagates before the completion
    call, so nothing is attached. Files already sent in that batch stay
    uncompleted on Slack's side and expire there.
    """
    file_ids: list[str] = []
    for index, (url, data) in enumerate(images, 1):
        filename = image_filename(url, index, fallback_extension)
        upload_url, file_id = transport.request_upload(filename, len(data))
        transport.send(upload_url, data)
        logger.debug("Uploaded %s as %s", filename, file_id)
        file_ids.append(file_id)

    if file_ids:
        transport.complete(file_ids, thread)
    return file_ids
