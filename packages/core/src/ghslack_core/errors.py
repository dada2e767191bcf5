from __future__ import annotations


class NotifyError(RuntimeError):
    """Base class for errors raised by the notifier itself."""


class SlackResponseError(NotifyError):
    """Slack answered a Web API call with ``ok: false``."""

    def __init__(self, method: str, error: str | None):
        self.method = method
        self.error = error or "unknown_error"
        super().__init__(f"Slack {method} failed: {self.error}")


class IncompleteEventError(NotifyError):
    """A supported webhook event is missing an object it needs (issue, comment, ...).

    Not a failure of the run: the CLI reports it as a notice and exits cleanly.
    """
