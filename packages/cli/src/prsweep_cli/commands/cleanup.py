"""cleanup command: remove the previous AI review from a pull request."""

from __future__ import annotations

import json

import click
from github import GithubException
from rich.console import Console

from prsweep_core.cleanup import cleanup_previous_reviews
from prsweep_core.gh.pull_request import GraphQLError, get_client
from prsweep_core.identity import IDENTITY_STRATEGIES, build_identity

console = Console()


@click.command("cleanup")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Defaults to GITHUB_REPOSITORY.")
@click.option(
    "--pr",
    "pr_number",
    type=int,
    default=None,
    help="Pull request number. Defaults to the PR in the GitHub Actions event payload.",
)
@click.option(
    "--identity",
    type=click.Choice(IDENTITY_STRATEGIES),
    default=None,
    help="How bot-authored comments are recognized. Overrides config file.",
)
@click.option("--bot-login", default=None, help="Bare bot login, e.g. 'claude'. Overrides config file.")
@click.option("--max-workers", type=click.IntRange(min=1), default=None, help="Concurrent mutation limit.")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as a JSON record.")
@click.option(
    "--allow-partial",
    is_flag=True,
    help="Exit 0 even if some comments or threads could not be cleaned up.",
)
@click.pass_context
def cleanup_cmd(
    ctx,
    repo: str | None,
    pr_number: int | None,
    identity: str | None,
    bot_login: str | None,
    max_workers: int | None,
    as_json: bool,
    allow_partial: bool,
):
    """Delete the bot's PR comments and resolve the inline threads it started.

    Threads are resolved rather than deleted so human replies are kept.

    \b
    Required environment variables:
      GITHUB_TOKEN or GH_TOKEN   GitHub token with pull request write access (or use gh CLI)
    """
    from prsweep_cli.auth import resolve_github_token
    from prsweep_cli.event import load_event_context
    from prsweep_core.config import load_config

    config_path = ctx.obj.get("config_path", ".claude-review.yml") if ctx.obj else ".claude-review.yml"
    try:
        config = load_config(
            config_path,
            cli_overrides={"identity": identity, "bot_login": bot_login, "max_workers": max_workers},
        )
    except ValueError as e:
        raise click.UsageError(f"Invalid configuration: {e}")

    token = resolve_github_token()
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or GH_TOKEN, or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )

    event = load_event_context()
    repo = repo or event.repo
    pr_number = pr_number if pr_number is not None else event.pr_number
    if not repo:
        raise click.UsageError("No repository given. Pass --repo owner/name or set GITHUB_REPOSITORY.")
    if pr_number is None:
        raise click.UsageError("No pull request given. Pass --pr or run from a pull_request workflow event.")

    try:
        bot_identity = build_identity(config)
    except (KeyError, ValueError) as e:
        raise click.UsageError(f"Invalid identity configuration: {e}")

    client = get_client(token, thread_page_size=config["thread_page_size"])
    ctx.call_on_close(client.close)

    try:
        summary = cleanup_previous_reviews(
            client,
            repo,
            pr_number,
            bot_identity,
            max_workers=config["max_workers"],
        )
    except (GithubException, GraphQLError, ValueError) as e:
        raise click.ClickException(f"Cleanup of {repo}#{pr_number} failed: {e}")

    if as_json:
        click.echo(json.dumps(summary.as_dict()))
    else:
        console.print(
            f"[green]Cleanup complete: {summary.comments_deleted} comments deleted, "
            f"{summary.threads_resolved} threads resolved[/green]"
        )
        for comment_id in summary.failed_comments:
            console.print(f"  [red]Could not delete comment {comment_id}[/red]")
        for thread_id in summary.failed_threads:
            console.print(f"  [red]Could not resolve thread {thread_id}[/red]")

    if not summary.ok and not allow_partial:
        failures = len(summary.failed_comments) + len(summary.failed_threads)
        raise click.ClickException(f"{failures} item(s) could not be cleaned up. Re-run to retry.")
