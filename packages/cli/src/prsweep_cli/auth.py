"""Token lookup for the cleanup command.

Workflows expose the token under different names depending on who wrote
them: ``GITHUB_TOKEN`` for scripts and API clients, ``GH_TOKEN`` for steps
that drive the gh CLI. Both are honoured, in that order, before asking a
local gh session. ``GH_HOST`` selects the GitHub Enterprise host for the gh
lookup.
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


def _token_from_gh_session() -> str | None:
    cmd = ["gh", "auth", "token"]
    host = os.environ.get("GH_HOST")
    if host:
        cmd += ["--hostname", host]

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("No token from gh session: %s", e)
        return None

    token = result.stdout.strip() if result.returncode == 0 else ""
    return token or None


def resolve_github_token() -> str | None:
    """Return the first token found in the environment or the gh session, else None."""
    for var in TOKEN_ENV_VARS:
        token = os.environ.get(var, "").strip()
        if token:
            logger.debug("Using GitHub token from %s.", var)
            return token

    token = _token_from_gh_session()
    if token:
        logger.debug("Using GitHub token from gh session.")
    return token
