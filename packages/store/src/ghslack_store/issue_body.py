"""IssueBodyStore — notification state kept inside the issue/PR body itself.

There is no database and no memory between workflow runs, so the only place
state can live is the document the events are about. Every load is a live
read (no caching). Saves embed into the body the caller read at the start of
the run rather than re-fetching; there is no compare-and-swap on the remote
update call, so a concurrent edit between load and save is overwritten
(last writer wins).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ghslack_store.base import BaseStateStore
from ghslack_store.codec import embed_metadata, parse_metadata

if TYPE_CHECKING:
    from ghslack_store.base import IssueApi
    from ghslack_store.models import IssueDocument, IssueRef, Metadata

logger = logging.getLogger(__name__)


class IssueBodyStore(BaseStateStore):
    """Reads and writes the metadata block through an injected IssueApi.

    With ``dry_run=True`` saves are logged and never sent, which lets
    ``notify --shadow`` exercise the full flow against a real issue.
    """

    def __init__(self, api: IssueApi, dry_run: bool = False):
        self._api = api
        self._dry_run = dry_run

    def snapshot(self, ref: IssueRef) -> tuple[IssueDocument, Metadata | None]:
        document = self._api.get_issue(ref)
        metadata = parse_metadata(document.body)
        if metadata is None:
            logger.debug("No notification metadata found in %s", ref)
        return document, metadata

    def save(self, ref: IssueRef, body: str, metadata: Metadata) -> None:
        new_body = embed_metadata(body, metadata)
        if self._dry_run:
            logger.info("Dry run: not updating body of %s (%d chars)", ref, len(new_body))
            return
        self._api.update_issue_body(ref, new_body)
        logger.info(
            "Saved notification metadata to %s (%d comment notification(s))",
            ref,
            len(metadata.comment_notifications),
        )
