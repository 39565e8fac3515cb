"""Remove the previous AI review from a pull request before a new one is posted.

Two independent passes run against the same PR:
  - flat comments posted by the bot are deleted outright
  - unresolved inline threads started by the bot are resolved, never deleted,
    so any human replies under them survive (resolved threads collapse in the
    GitHub UI but keep the discussion)

Mutations inside a pass run concurrently. A failing mutation is recorded and
its siblings still run; a failing read aborts the whole run.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Callable, Sequence

from github import UnknownObjectException

from prsweep_core.models import BatchResult, CleanupSummary, MutationOutcome

if TYPE_CHECKING:
    from prsweep_core.gh.pull_request import PullRequestClient
    from prsweep_core.identity import BotIdentity

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


def _attempt(target_id: int | str, action: Callable[[], object]) -> MutationOutcome:
    try:
        action()
    except Exception as e:
        logger.debug("Mutation failed for %s", target_id, exc_info=True)
        return MutationOutcome(target_id=target_id, error=str(e) or type(e).__name__)
    return MutationOutcome(target_id=target_id)


def run_batch(
    targets: Sequence[int | str],
    action: Callable[[int | str], object],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> BatchResult:
    """Call ``action`` for every target concurrently and collect per-item outcomes.

    Outcomes are returned in input order. No failure cancels another call.
    """
    if not targets:
        return BatchResult()
    workers = max(1, min(max_workers, len(targets)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_attempt, t, lambda t=t: action(t)) for t in targets]
        outcomes = [f.result() for f in futures]
    return BatchResult(outcomes=outcomes)


def sweep_comments(
    client: PullRequestClient,
    repo: str,
    pr_number: int,
    identity: BotIdentity,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> BatchResult:
    """Delete every flat PR comment the bot posted.

    A comment that is already gone (404) counts as deleted, so overlapping or
    repeated runs do not report failures.
    """
    comments = client.list_issue_comments(repo, pr_number)
    targets = [c.id for c in comments if identity.matches_comment(c)]
    logger.info("Found %d bot comment(s) out of %d on %s#%d", len(targets), len(comments), repo, pr_number)

    def _delete(comment_id: int) -> None:
        try:
            client.delete_issue_comment(repo, comment_id)
        except UnknownObjectException:
            logger.info("Comment %s was already deleted", comment_id)

    return run_batch(targets, _delete, max_workers)


def resolve_threads(
    client: PullRequestClient,
    repo: str,
    pr_number: int,
    identity: BotIdentity,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> BatchResult:
    """Resolve every unresolved review thread the bot started."""
    threads = client.list_review_threads(repo, pr_number)
    targets = [t.id for t in threads if not t.is_resolved and identity.matches_thread(t)]
    logger.info("Found %d open bot thread(s) out of %d on %s#%d", len(targets), len(threads), repo, pr_number)

    def _resolve(thread_id: str) -> None:
        if not client.resolve_review_thread(thread_id):
            raise RuntimeError("thread still unresolved after mutation")

    return run_batch(targets, _resolve, max_workers)


def cleanup_previous_reviews(
    client: PullRequestClient,
    repo: str,
    pr_number: int,
    identity: BotIdentity,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> CleanupSummary:
    """Run both cleanup passes against one PR and summarize what changed.

    Raises whatever the client raises when listing comments or threads fails;
    individual delete/resolve failures are reported in the summary instead.
    """
    deleted = sweep_comments(client, repo, pr_number, identity, max_workers)
    resolved = resolve_threads(client, repo, pr_number, identity, max_workers)

    summary = CleanupSummary(
        comments_deleted=deleted.count,
        threads_resolved=resolved.count,
        failed_comments=[o.target_id for o in deleted.failed],
        failed_threads=[o.target_id for o in resolved.failed],
    )

    logger.info(
        "Cleanup complete: %d comments deleted, %d threads resolved",
        summary.comments_deleted,
        summary.threads_resolved,
    )
    for outcome in deleted.failed:
        logger.warning("Could not delete comment %s: %s", outcome.target_id, outcome.error)
    for outcome in resolved.failed:
        logger.warning("Could not resolve thread %s: %s", outcome.target_id, outcome.error)

    return summary
