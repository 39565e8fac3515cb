"""Bot identity matchers.

A cleanup run must only touch artifacts the reviewer bot created, so every
decision goes through a ``BotIdentity``:

    matches_comment(comment)  ← flat REST comments
    matches_thread(thread)    ← GraphQL review threads (first comment only)

Two strategies exist:
  - AuthorFieldIdentity: trusts the author record GitHub returns
  - BodyMarkerIdentity:  trusts a hidden HTML marker the bot embeds in its body

Both fail closed: a missing author or body is never a match.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prsweep_core.models import Comment, ReviewThread

IDENTITY_STRATEGIES = ("author", "marker")


class BotIdentity(ABC):
    @abstractmethod
    def matches_comment(self, comment: Comment) -> bool:
        """Return True if the flat comment was posted by the bot."""

    @abstractmethod
    def matches_thread(self, thread: ReviewThread) -> bool:
        """Return True if the review thread was started by the bot.

        Later replies never change the answer; only the first comment counts.
        """


class AuthorFieldIdentity(BotIdentity):
    """Match on the author record.

    The REST API reports the bot as ``{"type": "Bot", "login": "claude[bot]"}``
    while GraphQL reports ``{"__typename": "Bot", "login": "claude"}``, so the
    bare login is configured once and the REST form is derived from it.
    """

    def __init__(self, login: str, author_type: str = "Bot"):
        if not login:
            raise ValueError("Bot login must be a non-empty string.")
        self.login = login
        self.author_type = author_type

    @property
    def rest_login(self) -> str:
        return f"{self.login}[bot]"

    def matches_comment(self, comment: Comment) -> bool:
        author = comment.author
        if author is None:
            return False
        return author.type == self.author_type and author.login == self.rest_login

    def matches_thread(self, thread: ReviewThread) -> bool:
        first = thread.first_comment
        if first is None or first.author is None:
            return False
        return first.author.type == self.author_type and first.author.login == self.login

    def __repr__(self) -> str:
        return f"AuthorFieldIdentity(login={self.login!r}, author_type={self.author_type!r})"


class BodyMarkerIdentity(BotIdentity):
    """Match on a literal marker embedded in the comment body."""

    def __init__(self, comment_marker: str, thread_marker: str):
        if not comment_marker or not thread_marker:
            raise ValueError("Body markers must be non-empty strings.")
        self.comment_marker = comment_marker
        self.thread_marker = thread_marker

    def matches_comment(self, comment: Comment) -> bool:
        return bool(comment.body) and self.comment_marker in comment.body

    def matches_thread(self, thread: ReviewThread) -> bool:
        first = thread.first_comment
        if first is None or not first.body:
            return False
        return self.thread_marker in first.body

    def __repr__(self) -> str:
        return f"BodyMarkerIdentity(comment_marker={self.comment_marker!r}, thread_marker={self.thread_marker!r})"


def build_identity(config: dict) -> BotIdentity:
    strategy = config.get("identity", "author")
    if strategy == "author":
        return AuthorFieldIdentity(login=config["bot_login"], author_type=config.get("bot_type", "Bot"))
    if strategy == "marker":
        return BodyMarkerIdentity(
            comment_marker=config["comment_marker"],
            thread_marker=config["thread_marker"],
        )
    raise ValueError(f"Unknown identity strategy: {strategy!r}. Choose 'author' or 'marker'.")
