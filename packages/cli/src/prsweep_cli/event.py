"""Pull request context from a GitHub Actions run.

Workflows triggered by ``pull_request`` events expose the repository as
``GITHUB_REPOSITORY`` and the full webhook payload as a JSON file at
``GITHUB_EVENT_PATH``. Explicit CLI options always win over these.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class PullRequestContext:
    repo: str | None = None
    pr_number: int | None = None
    title: str | None = None


def load_event_context() -> PullRequestContext:
    """Read repo, PR number and title from the Actions environment, if present."""
    ctx = PullRequestContext(repo=os.environ.get("GITHUB_REPOSITORY") or None)

    event_path = os.environ.get("GITHUB_EVENT_PATH")
    if not event_path or not Path(event_path).exists():
        return ctx

    try:
        payload = json.loads(Path(event_path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read GitHub event payload at %s: %s", event_path, e)
        return ctx

    pull_request = payload.get("pull_request") if isinstance(payload, dict) else None
    if isinstance(pull_request, dict):
        number = pull_request.get("number")
        if isinstance(number, int):
            ctx.pr_number = number
        title = pull_request.get("title")
        if isinstance(title, str):
            ctx.title = title
    return ctx


def write_github_output(values: dict[str, str]) -> bool:
    """Append key=value lines to $GITHUB_OUTPUT. Returns False outside Actions."""
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        return False
    with open(output_path, "a", encoding="utf-8") as f:
        for key, value in values.items():
            # Single-line values only; escape the characters Actions treats specially.
            escaped = str(value).replace("%", "%25").replace("\n", "%0A").replace("\r", "%0D")
            f.write(f"{key}={escaped}\n")
    return True
