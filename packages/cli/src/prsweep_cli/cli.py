"""CLI entry point for prsweep.

Commands:
  cleanup         : remove the previous AI review from a pull request
  check-exclusion : decide whether a PR title opts the PR out of AI review
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from prsweep_cli.commands.cleanup import cleanup_cmd
from prsweep_cli.commands.exclusion import check_exclusion_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("prsweep"),
    prog_name="prsweep",
)
@click.option(
    "--config",
    "config_path",
    default=".claude-review.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRSWEEP_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """CI helpers for AI code review on GitHub pull requests."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(cleanup_cmd)
main.add_command(check_exclusion_cmd)
