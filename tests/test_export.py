"""Tests for export module."""

import io
import re
import zipfile
from unittest import mock

import pytest

from RepoDoc.export import (
    MAX_EXPORT_CANDIDATES,
    archive_name,
    export_candidates,
    export_documentation,
    export_file_name,
    markdown_to_html,
    wrap_in_html,
)
from RepoDoc.models import (
    EntryType,
    ExportCandidate,
    ExportFormat,
    RepoSummary,
    TreeEntry,
)
from RepoDoc.providers.base import ContentUnavailableError, ForgeProvider, RateLimitError

SUMMARY = RepoSummary(
    owner="octo",
    name="hello",
    description=None,
    stars=0,
    forks=0,
    default_branch="main",
)


def _blob(path: str) -> TreeEntry:
    return TreeEntry(path=path, type=EntryType.BLOB, sha=f"sha-{path}")


def _zip_names(data: bytes) -> list[str]:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        return archive.namelist()


def _zip_read(data: bytes, name: str) -> str:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        return archive.read(name).decode("utf-8")


class TestExportCandidates:
    def test_filters_documentable_blobs(self):
        entries = [
            _blob("src/app.py"),
            _blob("logo.png"),
            TreeEntry(path="src", type=EntryType.TREE, sha="t"),
            _blob("README.md"),
        ]
        candidates = export_candidates(entries)
        assert [c.path for c in candidates] == ["src/app.py", "README.md"]
        assert all(c.selected for c in candidates)
        assert candidates[0].sha == "sha-src/app.py"

    def test_capped(self):
        entries = [_blob(f"f{i}.py") for i in range(MAX_EXPORT_CANDIDATES + 5)]
        assert len(export_candidates(entries)) == MAX_EXPORT_CANDIDATES

    def test_regex_patterns(self):
        entries = [_blob("src/app.py"), _blob("lib/util.py"), _blob("src/index.ts")]
        candidates = export_candidates(entries, [re.compile(r"^src/")])
        assert [c.path for c in candidates] == ["src/app.py", "src/index.ts"]


class TestMarkdownToHtml:
    def test_headings(self):
        assert markdown_to_html("# Title") == "<h1>Title</h1>"
        assert markdown_to_html("## Sub") == "<h2>Sub</h2>"
        assert markdown_to_html("### Third") == "<h3>Third</h3>"

    def test_bold_list_item(self):
        result = markdown_to_html("- **Returns**: a string")
        assert result == "<li><strong>Returns:</strong> a string</li>"

    def test_plain_list_item(self):
        assert markdown_to_html("- item") == "<li>item</li>"

    def test_code_block_and_newlines(self):
        result = markdown_to_html("Intro\n```\nx = 1\n```")
        assert result == "Intro<br /><pre><code><br />x = 1<br /></code></pre>"

    def test_wrap_in_html(self):
        page = wrap_in_html("src/<app>.py", "# Doc")
        assert page.startswith("<!DOCTYPE html>")
        assert "<title>src/&lt;app&gt;.py - Documentation</title>" in page
        assert "<h1>Doc</h1>" in page
        assert "<style>" in page


class TestNames:
    def test_export_file_name(self):
        assert export_file_name("src/utils/a.py", ExportFormat.MARKDOWN) == "src_utils_a.py.md"
        assert export_file_name("a.py", ExportFormat.HTML) == "a.py.html"

    def test_archive_name(self):
        assert archive_name(SUMMARY) == "hello-documentation.zip"


class TestExportDocumentation:
    def _run(self, provider, candidates, fmt=ExportFormat.MARKDOWN):
        generator = mock.Mock()
        generator.generate_documentation.side_effect = lambda name, content: f"# {name}\n{content}"
        results = list(
            export_documentation(provider, generator, SUMMARY, "main", candidates, fmt)
        )
        return results, generator

    def test_archive_layout(self):
        provider = mock.Mock(spec=ForgeProvider)
        provider.fetch_file_content.return_value = "code"
        candidates = [
            ExportCandidate("src/app.py", "s1"),
            ExportCandidate("README.md", "s2"),
            ExportCandidate("skip.py", "s3", selected=False),
        ]
        results, generator = self._run(provider, candidates)

        final = results[-1]
        assert final.total_files == 2
        assert final.processed_files == 2
        names = _zip_names(final.archive)
        assert "hello-docs/src_app.py.md" in names
        assert "hello-docs/README.md.md" in names
        assert not any("skip" in n for n in names)
        assert _zip_read(final.archive, "hello-docs/src_app.py.md") == "# app.py\ncode"
        provider.fetch_file_content.assert_any_call("octo", "hello", "src/app.py", "main", "s1")
        assert generator.generate_documentation.call_count == 2

    def test_html_format(self):
        provider = mock.Mock(spec=ForgeProvider)
        provider.fetch_file_content.return_value = "code"
        results, _ = self._run(provider, [ExportCandidate("a.py", "s1")], ExportFormat.HTML)
        page = _zip_read(results[-1].archive, "hello-docs/a.py.html")
        assert "<h1>a.py</h1>" in page

    def test_progress_after_each_file(self):
        provider = mock.Mock(spec=ForgeProvider)
        provider.fetch_file_content.return_value = "code"
        results, _ = self._run(provider, [ExportCandidate("a.py", "1"), ExportCandidate("b.py", "2")])
        # Progress object is reused; the final yield carries the archive
        assert len(results) == 3
        assert results[-1].archive is not None

    def test_unavailable_file_skipped(self):
        provider = mock.Mock(spec=ForgeProvider)
        provider.fetch_file_content.side_effect = [ContentUnavailableError("big.json"), "code"]
        results, generator = self._run(
            provider, [ExportCandidate("big.json", "1"), ExportCandidate("a.py", "2")]
        )
        final = results[-1]
        assert final.processed_files == 2
        assert len(final.skipped) == 1
        assert "big.json" in final.skipped[0]
        assert _zip_names(final.archive) == ["hello-docs/", "hello-docs/a.py.md"]
        generator.generate_documentation.assert_called_once_with("a.py", "code")

    def test_rate_limit_aborts(self):
        provider = mock.Mock(spec=ForgeProvider)
        provider.fetch_file_content.side_effect = RateLimitError()
        with pytest.raises(RateLimitError):
            self._run(provider, [ExportCandidate("a.py", "1"), ExportCandidate("b.py", "2")])
        assert provider.fetch_file_content.call_count == 1
