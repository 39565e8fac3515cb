"""Decide whether a PR should skip AI review based on its title.

Repositories opt in to extra rules through the ``exclude`` section of
``.claude-review.yml``:

    exclude:
      disable_defaults: false
      title_patterns:
        - "eigen query map"

Patterns are case-insensitive regular expressions matched anywhere in the
title. Built-in defaults apply unless ``disable_defaults`` is true.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

DEFAULT_TITLE_PATTERNS = ["^Deploy$", "graphql schema"]


@dataclass
class ExclusionResult:
    excluded: bool
    reason: str | None = None


def parse_exclude_config(content: str | None) -> dict | None:
    """Return the ``exclude`` mapping from raw YAML, or None.

    None covers empty input, a missing section and unparseable YAML; an
    unreadable config should never block a review.
    """
    if not content:
        return None
    try:
        config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        logger.warning("Could not parse exclusion config: %s", e)
        return None
    if not isinstance(config, dict):
        return None
    exclude = config.get("exclude")
    return exclude if isinstance(exclude, dict) else None


def _find_match(title: str, patterns: list[str]) -> str | None:
    for pattern in patterns:
        try:
            if re.search(str(pattern), title, re.IGNORECASE):
                return pattern
        except re.error:
            logger.warning('Invalid regex pattern "%s"', pattern)
    return None


def check_title_exclusion(title: str, config_content: str | None) -> ExclusionResult:
    config = parse_exclude_config(config_content) or {}
    use_defaults = config.get("disable_defaults") is not True
    custom_patterns = config.get("title_patterns") or []
    if isinstance(custom_patterns, str):
        custom_patterns = [custom_patterns]

    if use_defaults:
        matched = _find_match(title, DEFAULT_TITLE_PATTERNS)
        if matched:
            return ExclusionResult(excluded=True, reason=f"Title matches default pattern: {matched}")

    matched = _find_match(title, custom_patterns)
    if matched:
        return ExclusionResult(excluded=True, reason=f"Title matches custom pattern: {matched}")

    return ExclusionResult(excluded=False)
