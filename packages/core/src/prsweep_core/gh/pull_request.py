"""GitHub access for the cleanup pipeline.

Flat PR comments come from the REST API (issue comments), inline review
threads from the GraphQL API. Both are normalized into the dataclasses in
``prsweep_core.models`` so nothing downstream sees PyGithub objects or raw
GraphQL payloads.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from github import Auth, Github, GithubException

from prsweep_core.config import MAX_THREAD_PAGE_SIZE
from prsweep_core.models import Author, Comment, ReviewThread, ThreadComment

logger = logging.getLogger(__name__)

# GraphQL reports Bot authors via __typename, with the login lacking the "[bot]" suffix.
_THREADS_QUERY = """
query($owner: String!, $repo: String!, $pr: Int!, $pageSize: Int!, $cursor: String) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $pr) {
      reviewThreads(first: $pageSize, after: $cursor) {
        pageInfo { hasNextPage endCursor }
        nodes {
          id
          isResolved
          comments(first: 1) {
            nodes {
              author {
                __typename
                login
              }
              body
            }
          }
        }
      }
    }
  }
}
"""

_RESOLVE_THREAD_MUTATION = """
mutation($threadId: ID!) {
  resolveReviewThread(input: {threadId: $threadId}) {
    thread { isResolved }
  }
}
"""


class GraphQLError(RuntimeError):
    """Raised when a GraphQL response carries errors or is missing expected data."""


def split_repo(repo: str) -> tuple[str, str]:
    """Split "owner/name" into its parts."""
    owner, sep, name = repo.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ValueError(f"Repository must be in owner/name format, got {repo!r}.")
    return owner, name


def _rest_author(user) -> Author | None:
    if user is None:
        return None
    login = getattr(user, "login", None)
    kind = getattr(user, "type", None)
    if not isinstance(login, str) or not isinstance(kind, str):
        return None
    return Author(login=login, type=kind)


def _graphql_author(node: Any) -> Author | None:
    # Deleted ("ghost") accounts come back as author: null.
    if not isinstance(node, dict):
        return None
    login = node.get("login")
    kind = node.get("__typename")
    if not isinstance(login, str) or not isinstance(kind, str):
        return None
    return Author(login=login, type=kind)


def comment_from_rest(raw) -> Comment:
    """Build a Comment from a PyGithub IssueComment."""
    return Comment(id=raw.id, author=_rest_author(raw.user), body=raw.body or "")


def thread_from_node(node: dict) -> ReviewThread:
    """Build a ReviewThread from one ``reviewThreads.nodes`` entry."""
    comment_nodes = (node.get("comments") or {}).get("nodes") or []
    comments = [
        ThreadComment(author=_graphql_author(c.get("author")), body=c.get("body") or "")
        for c in comment_nodes
        if isinstance(c, dict)
    ]
    return ReviewThread(id=node["id"], is_resolved=bool(node.get("isResolved")), comments=comments)


def _graphql_error_message(exc: GithubException) -> str:
    # PyGithub raises on any "errors" member and keeps the response body in exc.data.
    errors = exc.data.get("errors") if isinstance(exc.data, dict) else None
    if errors and isinstance(errors[0], dict) and errors[0].get("message"):
        return errors[0]["message"]
    return exc.message or str(exc)


class PullRequestClient:
    """Thin wrapper over PyGithub exposing the four calls cleanup needs.

    PyGithub connections hold per-request state and are not thread-safe, so
    each worker thread lazily builds its own ``Github`` instance. Call
    ``close()`` once the run is over to release every one of them.
    """

    def __init__(self, token: str, thread_page_size: int = 100, base_url: str | None = None):
        if not token:
            raise ValueError("A GitHub token is required.")
        if not 1 <= thread_page_size <= MAX_THREAD_PAGE_SIZE:
            raise ValueError(f"thread_page_size must be between 1 and {MAX_THREAD_PAGE_SIZE}, got {thread_page_size}.")
        self._token = token
        self._base_url = base_url
        self._local = threading.local()
        self._instances: list[Github] = []
        self._instances_lock = threading.Lock()
        self.thread_page_size = thread_page_size

    @property
    def gh(self) -> Github:
        gh = getattr(self._local, "gh", None)
        if gh is None:
            kwargs: dict[str, Any] = {"auth": Auth.Token(self._token)}
            if self._base_url:
                kwargs["base_url"] = self._base_url
            gh = Github(**kwargs)
            self._local.gh = gh
            with self._instances_lock:
                self._instances.append(gh)
        return gh

    def close(self) -> None:
        """Close every Github instance created by any thread. Safe to call twice."""
        with self._instances_lock:
            instances, self._instances = self._instances, []
            self._local = threading.local()
        for gh in instances:
            gh.close()

    def __enter__(self) -> PullRequestClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # REST: flat comments                                                  #
    # ------------------------------------------------------------------ #

    def list_issue_comments(self, repo: str, pr_number: int) -> list[Comment]:
        """Return every issue comment on the PR, all pages drained, oldest first."""
        issue = self.gh.get_repo(repo, lazy=True).get_issue(pr_number)
        comments = [comment_from_rest(c) for c in issue.get_comments()]
        logger.debug("Fetched %d issue comment(s) from %s#%d", len(comments), repo, pr_number)
        return comments

    def delete_issue_comment(self, repo: str, comment_id: int) -> None:
        owner, name = split_repo(repo)
        self.gh.requester.requestJsonAndCheck("DELETE", f"/repos/{owner}/{name}/issues/comments/{comment_id}")
        logger.debug("Deleted issue comment %s on %s", comment_id, repo)

    # ------------------------------------------------------------------ #
    # GraphQL: review threads                                              #
    # ------------------------------------------------------------------ #

    def graphql(self, query: str, variables: dict[str, Any]) -> dict:
        """Run a GraphQL document and return its ``data`` member.

        Error responses, HTTP failures included, are raised as ``GraphQLError``.
        """
        try:
            _, result = self.gh.requester.graphql_query(query, variables)
        except GithubException as e:
            raise GraphQLError(f"GraphQL request failed: {_graphql_error_message(e)}") from e
        data = result.get("data")
        if data is None:
            raise GraphQLError("GraphQL response contained no data.")
        return data

    def list_review_threads(self, repo: str, pr_number: int) -> list[ReviewThread]:
        """Return every review thread on the PR, following pagination cursors."""
        owner, name = split_repo(repo)
        threads: list[ReviewThread] = []
        cursor = None
        page = 0

        while True:
            page += 1
            variables: dict[str, Any] = {
                "owner": owner,
                "repo": name,
                "pr": pr_number,
                "pageSize": self.thread_page_size,
            }
            if cursor:
                variables["cursor"] = cursor

            data = self.graphql(_THREADS_QUERY, variables)
            pr_data = (data.get("repository") or {}).get("pullRequest")
            if pr_data is None:
                raise GraphQLError(f"Pull request #{pr_number} not found in {repo}.")

            threads_data = pr_data.get("reviewThreads") or {}
            threads.extend(thread_from_node(n) for n in threads_data.get("nodes") or [])

            page_info = threads_data.get("pageInfo") or {}
            if page_info.get("hasNextPage") and page_info.get("endCursor"):
                cursor = page_info["endCursor"]
            else:
                break

        logger.debug("Fetched %d review thread(s) from %s#%d in %d page(s)", len(threads), repo, pr_number, page)
        return threads

    def resolve_review_thread(self, thread_id: str) -> bool:
        """Resolve a thread and return the resolved flag GitHub reports back."""
        data = self.graphql(_RESOLVE_THREAD_MUTATION, {"threadId": thread_id})
        thread = (data.get("resolveReviewThread") or {}).get("thread") or {}
        return bool(thread.get("isResolved"))


def get_client(token: str, thread_page_size: int = 100) -> PullRequestClient:
    return PullRequestClient(token, thread_page_size=thread_page_size)
