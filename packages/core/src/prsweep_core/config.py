import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = ".claude-review.yml"

# GitHub rejects GraphQL connection page sizes outside 1..100.
MAX_THREAD_PAGE_SIZE = 100

DEFAULT_CONFIG: dict = {
    "identity": "author",  # "author" = trust the author record, "marker" = trust a body marker
    "bot_login": "claude",  # bare login; the REST form "claude[bot]" is derived from it
    "bot_type": "Bot",
    "comment_marker": "<!-- claude-ai-review-main -->",
    "thread_marker": "<!-- claude-ai-review-inline -->",
    "max_workers": 8,  # upper bound on concurrent delete/resolve calls
    "thread_page_size": 100,
    "exclude": {},  # PR-exclusion rules, see prsweep_core.exclusions
}


def load_config(config_path: str = DEFAULT_CONFIG_PATH, cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .claude-review.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "exclude": dict(DEFAULT_CONFIG["exclude"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping at the top level.")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    _validate(config)

    config["github_token"] = os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN")

    return config


def _validate(config: dict) -> None:
    page_size = config.get("thread_page_size")
    if not isinstance(page_size, int) or isinstance(page_size, bool) or not 1 <= page_size <= MAX_THREAD_PAGE_SIZE:
        raise ValueError(f"thread_page_size must be an integer between 1 and {MAX_THREAD_PAGE_SIZE}, got {page_size!r}.")
    workers = config.get("max_workers")
    if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
        raise ValueError(f"max_workers must be a positive integer, got {workers!r}.")


def read_config_text(config_path: str = DEFAULT_CONFIG_PATH) -> Optional[str]:
    """Return the raw config file contents, or None if the file does not exist."""
    path = Path(config_path)
    if not path.exists():
        return None
    return path.read_text()
