"""init command — write .ghslack.yml and the GitHub Actions workflow."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

import click
import yaml
from rich.console import Console

console = Console()
logger = logging.getLogger(__name__)

WORKFLOW_PATH = Path(".github/workflows/slack-notify.yml")

_WORKFLOW_TEMPLATE = """\
name: Slack Notify

on:
  issues:
    types: [opened, closed]
  pull_request:
    types: [opened, closed]
  issue_comment:
    types: [created]
  pull_request_review_comment:
    types: [created]

jobs:
  notify:
    runs-on: ubuntu-latest
    permissions:
      contents: read
      issues: write
      pull-requests: write

    steps:
      - uses: actions/checkout@v4

      - name: Set up Python
        uses: actions/setup-python@v5
        with:
          python-version: "3.12"

      - name: Install ghslack
        run: pip install "ghslack=={version}"

      - name: Notify Slack
        env:
          GITHUB_TOKEN: ${{{{ secrets.GITHUB_TOKEN }}}}
          SLACK_TOKEN: ${{{{ secrets.{slack_secret} }}}}
        run: ghslack notify
"""


@click.command("init")
@click.option("--repo", default=None, help="GitHub repository (owner/name). Auto-detected from git remote.")
def init_cmd(repo: str | None):
    """Set up ghslack for a repository.

    Creates .ghslack.yml with the destination channel and GitHub → Slack user
    mapping, and optionally generates the GitHub Actions workflow.
    """
    console.print("\n[bold cyan]ghslack init[/bold cyan] — repository setup\n")

    if repo is None:
        repo = _detect_repo_from_git()
        if repo:
            console.print(f"[dim]Detected repository: {repo}[/dim]")
        else:
            repo = click.prompt("GitHub repository (owner/name)")

    channel = click.prompt("Slack channel ID (e.g. C0123456789)")
    config: dict = {"channel": channel}

    users = []
    console.print("\nMap GitHub users to Slack member IDs so @mentions notify people. Leave blank to finish.")
    while True:
        github_login = click.prompt("GitHub login", default="", show_default=False).strip().lstrip("@")
        if not github_login:
            break
        slack_id = click.prompt(f"Slack member ID for {github_login}").strip()
        users.append({"github": github_login, "slack": slack_id})
    if users:
        config["users"] = users

    _write_config(config)
    console.print("[green]Created .ghslack.yml[/green]")

    if click.confirm(f"\nGenerate {WORKFLOW_PATH} for GitHub Actions?", default=True):
        slack_secret = click.prompt("Repository secret holding the Slack bot token", default="SLACK_TOKEN")
        _write_workflow(slack_secret)
        console.print(f"[green]Created {WORKFLOW_PATH}[/green]")
        console.print(
            f"\n[yellow]Remember to add [bold]{slack_secret}[/bold] to the secrets of {repo} "
            "(Settings → Secrets → Actions) and invite the bot to the channel.[/yellow]"
        )

    console.print("\n[bold green]Setup complete![/bold green]")


def _detect_repo_from_git() -> str | None:
    """Try to detect the GitHub repo slug from the git remote URL."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode != 0:
            return None
        url = result.stdout.strip()
        # https://github.com/owner/repo.git  →  owner/repo
        # git@github.com:owner/repo.git      →  owner/repo
        if "github.com" not in url:
            return None
        slug = url.split("github.com")[-1].lstrip("/:").removesuffix(".git")
        return slug if "/" in slug else None
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None


def _write_config(config: dict) -> None:
    """Write or update .ghslack.yml, preserving any existing keys."""
    path = Path(".ghslack.yml")
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))


def _get_version() -> str:
    """Read the current ghslack version from the installed package metadata."""
    try:
        from importlib.metadata import version

        return version("ghslack")
    except Exception:
        return "0.1.0"


def _write_workflow(slack_secret: str) -> None:
    WORKFLOW_PATH.parent.mkdir(parents=True, exist_ok=True)
    WORKFLOW_PATH.write_text(_WORKFLOW_TEMPLATE.format(version=_get_version(), slack_secret=slack_secret))
