"""Data shapes shared by the GitHub client and the cleanup pipeline.

REST and GraphQL describe the same bot differently, so both are normalized
into ``Author`` here and compared by the identity matchers in
``prsweep_core.identity``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Author:
    """Normalized author record.

    ``type`` is the REST ``user.type`` for flat comments and the GraphQL
    ``__typename`` for thread comments (both use "Bot" / "User").
    """

    login: str
    type: str


@dataclass
class Comment:
    """A flat (issue-level) PR comment as returned by the REST API."""

    id: int
    author: Author | None
    body: str = ""


@dataclass
class ThreadComment:
    author: Author | None
    body: str = ""


@dataclass
class ReviewThread:
    """An inline review thread as returned by the GraphQL API."""

    id: str
    is_resolved: bool
    comments: list[ThreadComment] = field(default_factory=list)

    @property
    def first_comment(self) -> ThreadComment | None:
        # Only the opening comment decides who started the thread.
        return self.comments[0] if self.comments else None


@dataclass
class MutationOutcome:
    """Result of one delete or resolve call."""

    target_id: int | str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    """Per-item outcomes of a concurrently dispatched batch of mutations."""

    outcomes: list[MutationOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[int | str]:
        return [o.target_id for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[MutationOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def count(self) -> int:
        return len(self.succeeded)


@dataclass
class CleanupSummary:
    """What a cleanup run did to a pull request.

    Counts include successful mutations only. Failed ids are kept so the
    caller can decide whether a partial cleanup is acceptable.
    """

    comments_deleted: int = 0
    threads_resolved: int = 0
    failed_comments: list[int] = field(default_factory=list)
    failed_threads: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_comments and not self.failed_threads

    def as_dict(self) -> dict:
        return {
            "comments_deleted": self.comments_deleted,
            "threads_resolved": self.threads_resolved,
            "failed_comments": list(self.failed_comments),
            "failed_threads": list(self.failed_threads),
        }
