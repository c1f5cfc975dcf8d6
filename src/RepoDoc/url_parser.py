"""Repository reference parsing."""

from __future__ import annotations

import logging
import re
from urllib.parse import urlparse

from RepoDoc.models import RepoIdentifier

logger = logging.getLogger(__name__)

FORGE_HOST = "github.com"

_SHORTHAND = re.compile(r"^[a-zA-Z0-9-]+/[a-zA-Z0-9_.-]+$")


def parse_repo_url(value: str) -> RepoIdentifier | None:
    """Parse a repository reference and return its owner/repo pair.

    Supported formats:
      - owner/repo
      - github.com/owner/repo
      - https://github.com/owner/repo[.git][/]
      - https://github.com/owner/repo/tree/branch (extra segments ignored)

    Returns None for anything that does not name a GitHub repository.
    """
    try:
        return _parse(value)
    except (ValueError, AttributeError) as exc:
        logger.debug("Could not parse %r: %s", value, exc)
        return None


def _parse(value: str) -> RepoIdentifier | None:
    text = value.strip()
    text = text.removesuffix("/")
    text = text.removesuffix(".git")
    if not text:
        return None

    if _SHORTHAND.match(text):
        owner, repo = text.split("/")
        return RepoIdentifier(owner=owner, repo=repo)

    if not text.startswith("http"):
        if FORGE_HOST in text:
            text = f"https://{text}"
        else:
            # Loose owner/repo that failed the strict pattern
            parts = text.split("/")
            if len(parts) == 2 and all(parts):
                return RepoIdentifier(owner=parts[0], repo=parts[1])
            return None

    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https"):
        return None
    host = (parsed.hostname or "").lower()
    if host not in (FORGE_HOST, f"www.{FORGE_HOST}"):
        return None

    segments = [s for s in parsed.path.split("/") if s]
    if len(segments) < 2:
        return None
    return RepoIdentifier(owner=segments[0], repo=segments[1].removesuffix(".git"))
