"""Abstract base class and error taxonomy for forge providers."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod

from RepoDoc.models import Branch, RepoSummary, TreeListing


class ForgeError(Exception):
    """Base class for every forge API failure."""


class RateLimitError(ForgeError):
    """Raised on 403/429. Never retried automatically."""

    def __init__(self, reset_at: int | None = None):
        self.reset_at = reset_at
        message = (
            "GitHub API rate limit exceeded. Please configure a token in "
            "Settings or wait an hour."
        )
        if reset_at:
            wait = max(0, reset_at - int(time.time()))
            message += f" Resets in {wait} seconds."
        super().__init__(message)


class NotFoundError(ForgeError):
    """Raised on 404."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "Repository not found or is private (check your token if private)."
        )


class BadCredentialsError(ForgeError):
    """Raised on 401."""

    def __init__(self):
        super().__init__("Bad credentials. Please check your GitHub token in Settings.")


class APIError(ForgeError):
    """Any other non-2xx response."""

    def __init__(self, status: int, reason: str = ""):
        self.status = status
        self.reason = reason
        super().__init__(f"GitHub API error: {status} {reason}".rstrip())


class TransportError(ForgeError):
    """The request never produced a usable response (network failure, bad JSON)."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Could not reach GitHub: {detail}")


class ContentUnavailableError(ForgeError):
    """No content strategy could produce the file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Failed to fetch content for {path} (file too large or API limit reached)."
        )


class ForgeProvider(ABC):
    """Base class for Git hosting service clients."""

    @abstractmethod
    def fetch_repo_summary(self, owner: str, repo: str) -> RepoSummary:
        """Return the repository metadata snapshot."""

    @abstractmethod
    def fetch_branches(self, owner: str, repo: str) -> list[Branch]:
        """Return branches in the order the API lists them."""

    @abstractmethod
    def fetch_tree(self, owner: str, repo: str, sha: str) -> TreeListing:
        """Return the recursive tree listing rooted at *sha*."""

    @abstractmethod
    def fetch_file_content(
        self,
        owner: str,
        repo: str,
        path: str,
        ref: str,
        sha: str | None = None,
    ) -> str:
        """Return the decoded text of one file."""
