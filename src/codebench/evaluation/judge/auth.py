"""GitHub token discovery for the GitHub Models judge endpoint."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import Literal

GH_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class AuthStatus:
    """Where (if anywhere) a GitHub token was found."""

    available: bool
    method: Literal["env", "gh-cli"] | None
    message: str


def _gh_auth_token() -> str | None:
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=GH_TIMEOUT_SECONDS,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    token = result.stdout.strip()
    # gh tokens always carry a gh* prefix (gho_, ghp_, ...)
    if token.startswith("gh"):
        return token
    return None


def get_github_token() -> str | None:
    """Return ``GITHUB_TOKEN`` from the environment, else ``gh auth token``."""
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token
    return _gh_auth_token()


def check_github_auth() -> AuthStatus:
    """Report which token source is available, for the ``check`` command."""
    if os.environ.get("GITHUB_TOKEN"):
        return AuthStatus(
            available=True,
            method="env",
            message="Using GITHUB_TOKEN from environment variable",
        )
    if _gh_auth_token() is not None:
        return AuthStatus(
            available=True,
            method="gh-cli",
            message="Using token from GitHub CLI (gh auth token)",
        )
    return AuthStatus(
        available=False,
        method=None,
        message="GitHub token not found. See: https://github.com/settings/tokens",
    )
