from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml

from ghslack_core.users import UserDirectory

PRIVATE_IMAGE_PREFIX = "https://private-user-images.githubusercontent.com/"

DEFAULT_CONFIG: dict = {
    "channel": None,  # Slack channel ID, e.g. C0123456789
    "users": [],  # [{github: <login>, slack: <member id>}]
    "image_host_prefix": PRIVATE_IMAGE_PREFIX,  # None/"" = upload every <img> src
    "image_placeholder": "[image]",
    "empty_body_placeholder": "_No description provided._",
    "fallback_image_extension": "png",
    "http_timeout": 30,
}


def load_config(config_path: str = ".ghslack.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .ghslack.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "users": list(DEFAULT_CONFIG["users"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["slack_token"] = os.environ.get("SLACK_TOKEN") or os.environ.get("SLACK_BOT_TOKEN")
    if not config.get("channel"):
        config["channel"] = os.environ.get("SLACK_CHANNEL")

    return config


def load_users(config: dict) -> UserDirectory:
    """Build the GitHub → Slack user directory from the ``users`` config list.

    Raises ValueError when any entry is not a mapping with string ``github``
    and ``slack`` keys.
    """
    users = config.get("users") or []
    if not isinstance(users, list) or not all(
        isinstance(u, dict) and isinstance(u.get("github"), str) and isinstance(u.get("slack"), str) for u in users
    ):
        raise ValueError("Invalid users config")
    return UserDirectory({u["github"]: u["slack"] for u in users})
