"""inspect command — show the Slack thread state stored in an issue/PR body."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from ghslack_core.dispatcher import NotificationState
from ghslack_core.gh.issues import GitHubIssueApi
from ghslack_store.issue_body import IssueBodyStore
from ghslack_store.models import IssueRef

console = Console()


@click.command("inspect")
@click.option("--repo", required=True, help="GitHub repository (owner/name).")
@click.option("--number", required=True, type=int, help="Issue or pull request number.")
@click.option("--pull", is_flag=True, help="The number refers to a pull request.")
@click.pass_context
def inspect_cmd(ctx, repo: str, number: int, pull: bool):
    """Show which Slack messages an issue or pull request is linked to."""
    config = ctx.obj["config"] if ctx.obj else {}
    token = config.get("github_token")
    if not token:
        raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")
    owner, _, name = repo.partition("/")
    if not owner or not name:
        raise click.UsageError(f"--repo must be in owner/name format, got {repo!r}.")

    ref = IssueRef(owner=owner, repo=name, number=number, kind="pull_request" if pull else "issue")
    metadata = IssueBodyStore(GitHubIssueApi(token)).load(ref)

    if NotificationState.of(metadata) is NotificationState.UNNOTIFIED:
        console.print(f"[yellow]{ref} has no Slack thread recorded.[/yellow]")
        return

    table = Table(title=f"Slack thread — {ref}", show_header=True, header_style="bold cyan")
    table.add_column("Source", style="bold")
    table.add_column("Channel", width=12)
    table.add_column("Message ts", width=20)

    root = metadata.issue_notification
    table.add_row("root", root.channel_id, root.ts)
    for comment_id, handle in sorted(metadata.comment_notifications.items(), key=lambda kv: (len(kv[0]), kv[0])):
        table.add_row(f"comment {comment_id}", handle.channel_id, handle.ts)

    console.print(table)
    console.print(f"[dim]metadata version {metadata.version}[/dim]")
