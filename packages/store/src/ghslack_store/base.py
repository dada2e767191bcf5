"""Abstract state store interface.

The dispatcher depends on BaseStateStore, not on a concrete backend, so the
live issue-body store and the dry-run variant used by ``notify --shadow``
are interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ghslack_store.models import IssueDocument, IssueRef, Metadata


class IssueApi(Protocol):
    """The remote issue/PR read and update calls the store is built on."""

    def get_issue(self, ref: IssueRef) -> IssueDocument: ...

    def update_issue_body(self, ref: IssueRef, body: str) -> None: ...


class BaseStateStore(ABC):
    """Load/save semantics for notification state kept outside this process."""

    @abstractmethod
    def snapshot(self, ref: IssueRef) -> tuple[IssueDocument, Metadata | None]:
        """Read the live document once and return it along with its parsed Metadata.

        A missing or malformed block yields None for the Metadata. Transport
        and auth failures propagate.
        """

    def load(self, ref: IssueRef) -> Metadata | None:
        """Return the Metadata currently stored for *ref*, or None."""
        return self.snapshot(ref)[1]

    @abstractmethod
    def save(self, ref: IssueRef, body: str, metadata: Metadata) -> None:
        """Embed *metadata* into the caller-supplied *body* and write it back."""
