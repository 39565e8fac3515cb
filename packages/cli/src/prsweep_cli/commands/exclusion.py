"""check-exclusion command: decide whether a PR opts out of AI review."""

from __future__ import annotations

import json

import click
from rich.console import Console

from prsweep_core.config import read_config_text
from prsweep_core.exclusions import check_title_exclusion

console = Console()


@click.command("check-exclusion")
@click.option("--title", default=None, help="PR title. Defaults to the title in the GitHub Actions event payload.")
@click.option("--json", "as_json", is_flag=True, help="Print the decision as a JSON record.")
@click.pass_context
def check_exclusion_cmd(ctx, title: str | None, as_json: bool):
    """Check the PR title against default and configured exclusion patterns.

    Always exits 0. Inside GitHub Actions the decision is also written to
    $GITHUB_OUTPUT as `excluded` and `reason`.
    """
    from prsweep_cli.event import load_event_context, write_github_output

    if title is None:
        title = load_event_context().title
    if title is None:
        raise click.UsageError("No PR title given. Pass --title or run from a pull_request workflow event.")

    config_path = ctx.obj.get("config_path", ".claude-review.yml") if ctx.obj else ".claude-review.yml"
    result = check_title_exclusion(title, read_config_text(config_path))

    write_github_output({"excluded": "true" if result.excluded else "false", "reason": result.reason or ""})

    if as_json:
        click.echo(json.dumps({"excluded": result.excluded, "reason": result.reason}))
    elif result.excluded:
        console.print(f"[yellow]Skipping AI review. {result.reason}[/yellow]")
    else:
        console.print("[green]PR is not excluded from AI review.[/green]")
