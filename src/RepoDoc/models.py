"""Data classes for RepoDoc."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class EntryType(Enum):
    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"  # submodule pointer


class ExportFormat(Enum):
    MARKDOWN = "markdown"
    HTML = "html"

    @property
    def extension(self) -> str:
        return ".html" if self is ExportFormat.HTML else ".md"


@dataclass(frozen=True)
class RepoIdentifier:
    owner: str
    repo: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class RepoSummary:
    owner: str
    name: str
    description: str | None
    stars: int
    forks: int
    default_branch: str


@dataclass(frozen=True)
class Branch:
    name: str
    commit_sha: str


@dataclass(frozen=True)
class TreeEntry:
    path: str
    type: EntryType
    sha: str
    size: int | None = None


@dataclass
class TreeListing:
    entries: list[TreeEntry]
    truncated: bool = False


@dataclass
class TreeNode:
    name: str
    path: str
    type: EntryType
    sha: str | None = None
    children: list[TreeNode] | None = None  # None for anything but a directory

    @property
    def is_dir(self) -> bool:
        return self.children is not None


@dataclass
class ExportCandidate:
    path: str
    sha: str
    selected: bool = True


@dataclass
class ExportProgress:
    total_files: int = 0
    processed_files: int = 0
    current_file: str = ""
    skipped: list[str] = field(default_factory=list)
    archive: bytes | None = None
