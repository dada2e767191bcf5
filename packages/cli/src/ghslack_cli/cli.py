"""CLI entry point for ghslack.

Commands:
  notify   — handle one GitHub webhook event (the GitHub Actions step)
  inspect  — show the Slack thread state stored in an issue/PR body
  init     — write .ghslack.yml and a workflow that runs `ghslack notify`
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from ghslack_cli.commands.init import init_cmd
from ghslack_cli.commands.inspect import inspect_cmd
from ghslack_cli.commands.notify import notify_cmd

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    # urllib3/slack_sdk debug output includes auth headers.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("slack_sdk").setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("ghslack"),
    prog_name="ghslack",
)
@click.option(
    "--config",
    "config_path",
    default=".ghslack.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="GHSLACK_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Mirror GitHub issue and pull request activity into Slack threads."""
    from ghslack_core.config import load_config
    from ghslack_cli.auth import resolve_github_token, resolve_slack_token

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    config = load_config(config_path)

    # Resolve tokens early so all subcommands share the same resolution.
    token = resolve_github_token()
    if token:
        config["github_token"] = token
    slack_token = resolve_slack_token()
    if slack_token:
        config["slack_token"] = slack_token

    ctx.obj["config"] = config


main.add_command(notify_cmd)
main.add_command(inspect_cmd)
main.add_command(init_cmd)
