"""notify command — handle one GitHub webhook event."""

from __future__ import annotations

import logging
import os

import click
from rich.console import Console

from ghslack_core.config import load_users
from ghslack_core.dispatcher import Dispatcher
from ghslack_core.errors import IncompleteEventError
from ghslack_core.events import load_event
from ghslack_core.gh.issues import GitHubIssueApi
from ghslack_core.slack import ShadowTransport, SlackTransport
from ghslack_store.issue_body import IssueBodyStore

console = Console()
logger = logging.getLogger(__name__)


def _report_failure(error: Exception) -> None:
    """Annotate the workflow step with the error when running under GitHub Actions."""
    if os.environ.get("GITHUB_ACTIONS") == "true":
        message = str(error).replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        click.echo(f"::error::{message}")


@click.command("notify")
@click.option(
    "--event-name",
    envvar="GITHUB_EVENT_NAME",
    required=True,
    help="Webhook event name (issues, pull_request, issue_comment, pull_request_review_comment).",
)
@click.option(
    "--event-path",
    envvar="GITHUB_EVENT_PATH",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to the webhook payload JSON.",
)
@click.option("--channel", default=None, help="Slack channel ID. Overrides config file and SLACK_CHANNEL.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print Slack messages and skip writing state back to GitHub.",
)
@click.pass_context
def notify_cmd(ctx, event_name: str, event_path: str, channel: str | None, shadow: bool):
    """Post a GitHub event to Slack, threading it under the issue's root message.

    \b
    Required environment variables:
      GITHUB_TOKEN     token with issues/pull-requests write access (or use gh CLI)
      SLACK_TOKEN      Slack bot token with chat:write and files:write
      SLACK_CHANNEL    destination channel ID (or --channel / config `channel`)
    """
    config = dict(ctx.obj["config"])
    if channel:
        config["channel"] = channel

    token = config.get("github_token")
    if not token:
        raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")
    slack_token = config.get("slack_token")
    if not shadow and not slack_token:
        raise click.UsageError("SLACK_TOKEN environment variable is not set.")
    if not config.get("channel"):
        raise click.UsageError(
            "No Slack channel configured. Set SLACK_CHANNEL, --channel or `channel` in .ghslack.yml."
        )
    try:
        users = load_users(config)
    except ValueError as e:
        raise click.UsageError(str(e))

    try:
        event = load_event(event_name, event_path)
        if event is None:
            console.print(f"[yellow]Event '{event_name}' is not handled. Nothing to do.[/yellow]")
            return

        issues = GitHubIssueApi(token)
        transport = ShadowTransport(console) if shadow else SlackTransport(slack_token, timeout=config["http_timeout"])
        dispatcher = Dispatcher(
            issues=issues,
            store=IssueBodyStore(issues, dry_run=shadow),
            transport=transport,
            channel=config["channel"],
            users=users,
            config=config,
        )
        result = dispatcher.dispatch(event)
    except IncompleteEventError as e:
        console.print(f"[yellow]{e} Nothing to do.[/yellow]")
        return
    except Exception as e:
        logger.debug("notify failed", exc_info=True)
        _report_failure(e)
        raise click.ClickException(str(e)) from e

    files = f", {len(result.uploaded_files)} image(s)" if result.uploaded_files else ""
    prefix = "Shadow run complete" if shadow else "Notified"
    console.print(f"[green]{prefix}: {len(result.posted)} message(s){files}.[/green]")
