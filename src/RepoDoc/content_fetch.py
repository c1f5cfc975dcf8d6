"""Tiered file-content retrieval.

Each strategy either returns the decoded text or ``None`` when it does not
apply. :func:`fetch_with_fallback` runs them in order; a rate limit from any
strategy ends the chain at once, since another endpoint would only spend more
of the same quota.
"""

from __future__ import annotations

import base64
import binascii
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import quote

import requests

from RepoDoc.providers.base import ContentUnavailableError, ForgeError, RateLimitError

logger = logging.getLogger(__name__)

ApiGet = Callable[..., Any]


@dataclass(frozen=True)
class FileRef:
    owner: str
    repo: str
    path: str
    ref: str
    sha: str | None = None


def decode_content(encoded: str) -> str:
    """Decode base64 payload content to text.

    Falls back to a byte-for-byte (latin-1) string when the bytes are not
    valid UTF-8.
    """
    raw = base64.b64decode(encoded.replace("\n", ""))
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


class ContentStrategy(ABC):
    name = "strategy"

    def __init__(self, api_get: ApiGet):
        self._api_get = api_get

    @abstractmethod
    def attempt(self, ref: FileRef) -> str | None:
        """Return the file text, or None if this strategy cannot provide it."""


class ContentsStrategy(ContentStrategy):
    """Path-addressed fetch through the Contents API."""

    name = "contents"

    def attempt(self, ref: FileRef) -> str | None:
        data = self._api_get(
            f"/repos/{ref.owner}/{ref.repo}/contents/{quote(ref.path)}",
            params={"ref": ref.ref},
        )
        # A list means the path is a directory
        if not isinstance(data, dict) or not data.get("content"):
            return None
        return decode_content(data["content"])


class BlobStrategy(ContentStrategy):
    """Content-addressed fetch through the Git Blob API."""

    name = "blob"

    def attempt(self, ref: FileRef) -> str | None:
        if not ref.sha:
            return None
        data = self._api_get(f"/repos/{ref.owner}/{ref.repo}/git/blobs/{ref.sha}")
        if data.get("encoding") != "base64" or not data.get("content"):
            return None
        return decode_content(data["content"])


def fetch_with_fallback(strategies: list[ContentStrategy], ref: FileRef) -> str:
    for strategy in strategies:
        try:
            content = strategy.attempt(ref)
        except RateLimitError:
            raise
        except (ForgeError, requests.RequestException, binascii.Error) as exc:
            logger.warning(
                "%s strategy failed for %s: %s", strategy.name, ref.path, exc
            )
            continue
        if content is not None:
            return content
    raise ContentUnavailableError(ref.path)
