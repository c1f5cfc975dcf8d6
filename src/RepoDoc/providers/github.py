"""GitHub REST API provider."""

from __future__ import annotations

import logging
from typing import Any

import requests

from RepoDoc.content_fetch import (
    BlobStrategy,
    ContentsStrategy,
    FileRef,
    fetch_with_fallback,
)
from RepoDoc.models import Branch, EntryType, RepoSummary, TreeEntry, TreeListing
from RepoDoc.providers.base import (
    APIError,
    BadCredentialsError,
    ForgeProvider,
    NotFoundError,
    RateLimitError,
    TransportError,
)

logger = logging.getLogger(__name__)


class GitHubProvider(ForgeProvider):
    """Provider for GitHub repositories using the REST API."""

    API_BASE = "https://api.github.com"
    ACCEPT = "application/vnd.github.v3+json"
    TIMEOUT = 30

    def __init__(self, token: str | None = None):
        self.session = requests.Session()
        self.session.headers["Accept"] = self.ACCEPT
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        self._content_strategies = [
            ContentsStrategy(self._api_get),
            BlobStrategy(self._api_get),
        ]

    def _raise_for_status(self, response: requests.Response) -> None:
        status = response.status_code
        if 200 <= status < 300:
            return
        if status in (403, 429):
            reset = response.headers.get("X-RateLimit-Reset")
            raise RateLimitError(int(reset) if reset and reset.isdigit() else None)
        if status == 404:
            raise NotFoundError()
        if status == 401:
            raise BadCredentialsError()
        raise APIError(status, response.reason or "")

    def _api_get(self, path: str, params: dict | None = None) -> Any:
        url = f"{self.API_BASE}{path}"
        try:
            resp = self.session.get(url, params=params, timeout=self.TIMEOUT)
        except requests.RequestException as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            raise TransportError(str(exc) or type(exc).__name__) from exc
        self._raise_for_status(resp)
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"invalid JSON from {path}") from exc

    def fetch_repo_summary(self, owner: str, repo: str) -> RepoSummary:
        data = self._api_get(f"/repos/{owner}/{repo}")
        return RepoSummary(
            owner=data["owner"]["login"],
            name=data["name"],
            description=data.get("description"),
            stars=data.get("stargazers_count", 0),
            forks=data.get("forks_count", 0),
            default_branch=data["default_branch"],
        )

    def fetch_branches(self, owner: str, repo: str) -> list[Branch]:
        data = self._api_get(
            f"/repos/{owner}/{repo}/branches", params={"per_page": "100"}
        )
        return [
            Branch(name=item["name"], commit_sha=item["commit"]["sha"])
            for item in data
        ]

    def fetch_tree(self, owner: str, repo: str, sha: str) -> TreeListing:
        data = self._api_get(
            f"/repos/{owner}/{repo}/git/trees/{sha}",
            params={"recursive": "1"},
        )

        entries: list[TreeEntry] = []
        for item in data.get("tree", []):
            try:
                entry_type = EntryType(item["type"])
            except ValueError:
                logger.debug("Skipping %s with unknown type %r", item.get("path"), item["type"])
                continue
            entries.append(
                TreeEntry(
                    path=item["path"],
                    type=entry_type,
                    sha=item["sha"],
                    size=item.get("size"),
                )
            )

        truncated = bool(data.get("truncated"))
        if truncated:
            logger.warning(
                "Tree for %s/%s is truncated; continuing with %d entries",
                owner,
                repo,
                len(entries),
            )
        return TreeListing(entries=entries, truncated=truncated)

    def fetch_file_content(
        self,
        owner: str,
        repo: str,
        path: str,
        ref: str,
        sha: str | None = None,
    ) -> str:
        file_ref = FileRef(owner=owner, repo=repo, path=path, ref=ref, sha=sha)
        return fetch_with_fallback(self._content_strategies, file_ref)
