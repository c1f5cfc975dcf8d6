"""Current repository/branch/tree/file selection.

A :class:`RepoSession` lives in ``st.session_state`` and is handed to each UI
handler. Every operation records a generation number when it starts and only
applies its results if no newer operation has started since, so a late
response for an abandoned selection never overwrites newer state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from RepoDoc.doc_generator import DocGenerator
from RepoDoc.models import (
    Branch,
    EntryType,
    RepoIdentifier,
    RepoSummary,
    TreeEntry,
    TreeNode,
)
from RepoDoc.providers.base import ForgeError, ForgeProvider, RateLimitError
from RepoDoc.tree_builder import build_tree_structure

logger = logging.getLogger(__name__)


def pick_default_branch(summary: RepoSummary, branches: list[Branch]) -> Branch | None:
    """The repository's default branch if listed, else the first branch."""
    for branch in branches:
        if branch.name == summary.default_branch:
            return branch
    return branches[0] if branches else None


def find_branch(branches: list[Branch], name: str) -> Branch | None:
    return next((b for b in branches if b.name == name), None)


@dataclass
class RepoSession:
    identifier: RepoIdentifier | None = None
    summary: RepoSummary | None = None
    branches: list[Branch] = field(default_factory=list)
    selected_branch: str = ""
    entries: list[TreeEntry] = field(default_factory=list)
    tree: list[TreeNode] = field(default_factory=list)
    truncated: bool = False
    analysis: str | None = None
    selected_file: TreeNode | None = None
    file_content: str | None = None
    file_doc: str | None = None
    generation: int = 0

    def _begin(self) -> int:
        self.generation += 1
        return self.generation

    def _is_current(self, generation: int) -> bool:
        if generation != self.generation:
            logger.debug("Discarding stale result (generation %d)", generation)
            return False
        return True

    def _clear_tree(self) -> None:
        self.entries = []
        self.tree = []
        self.truncated = False
        self.analysis = None
        self.selected_file = None
        self.file_content = None
        self.file_doc = None

    def _loaded_summary(self) -> RepoSummary:
        if self.summary is None:
            raise ForgeError("No repository loaded")
        return self.summary

    @property
    def owner(self) -> str:
        return self._loaded_summary().owner

    @property
    def repo(self) -> str:
        return self._loaded_summary().name

    def open_repository(self, provider: ForgeProvider, identifier: RepoIdentifier) -> None:
        """Load summary and branches, then the tree of the default branch."""
        generation = self._begin()
        self.identifier = identifier
        self.summary = None
        self.branches = []
        self.selected_branch = ""
        self._clear_tree()

        summary = provider.fetch_repo_summary(identifier.owner, identifier.repo)
        branches = provider.fetch_branches(identifier.owner, identifier.repo)
        if not self._is_current(generation):
            return
        self.summary = summary
        self.branches = branches

        branch = pick_default_branch(summary, branches)
        if branch is not None:
            self.load_tree(provider, branch.name)

    def load_tree(self, provider: ForgeProvider, branch_name: str) -> None:
        branch = find_branch(self.branches, branch_name)
        if branch is None:
            raise ForgeError(f"Branch not found: {branch_name}")

        generation = self._begin()
        self.selected_branch = branch.name
        self._clear_tree()

        listing = provider.fetch_tree(self.owner, self.repo, branch.commit_sha)
        if not self._is_current(generation):
            return
        self.entries = listing.entries
        self.tree = build_tree_structure(listing.entries)
        self.truncated = listing.truncated

    def clear_analysis(self) -> None:
        """Drop the cached summary so the next render asks for a fresh one."""
        self.analysis = None

    def analyze(self, generator: DocGenerator) -> None:
        generation = self.generation
        analysis = generator.analyze_architecture([e.path for e in self.entries])
        if self._is_current(generation):
            self.analysis = analysis

    def select_file(
        self,
        provider: ForgeProvider,
        generator: DocGenerator,
        node: TreeNode,
    ) -> None:
        """Fetch and document one file.

        Rate limits propagate so the UI can prompt for a token; any other
        forge error becomes the inline documentation message.
        """
        if node.type is not EntryType.BLOB:
            return
        # A failed attempt leaves no content behind and may be retried
        if (
            self.selected_file is not None
            and self.selected_file.path == node.path
            and self.file_content is not None
        ):
            return

        owner, repo = self.owner, self.repo
        generation = self._begin()
        self.selected_file = node
        self.file_content = None
        self.file_doc = None

        try:
            content = provider.fetch_file_content(
                owner, repo, node.path, self.selected_branch, node.sha
            )
        except RateLimitError:
            # Allow the same file to be retried once a token is configured
            if self._is_current(generation):
                self.selected_file = None
            raise
        except ForgeError as exc:
            if self._is_current(generation):
                self.file_doc = f"Error generating docs: {exc}"
            return

        doc = generator.generate_documentation(node.name, content)
        if self._is_current(generation):
            self.file_content = content
            self.file_doc = doc
