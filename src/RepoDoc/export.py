"""Documentation export: candidate selection, HTML wrapping, ZIP packaging."""

from __future__ import annotations

import html
import io
import logging
import re
import zipfile
from typing import Generator

from RepoDoc.doc_generator import DocGenerator
from RepoDoc.file_filter import is_documentable, matches_any_pattern
from RepoDoc.models import (
    EntryType,
    ExportCandidate,
    ExportFormat,
    ExportProgress,
    RepoSummary,
    TreeEntry,
)
from RepoDoc.providers.base import ForgeError, ForgeProvider, RateLimitError

logger = logging.getLogger(__name__)

MAX_EXPORT_CANDIDATES = 30

HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{title} - Documentation</title>
    <style>
      body {{ font-family: -apple-system, 'Segoe UI', Helvetica, Arial, sans-serif; background-color: #0f172a; color: #e2e8f0; padding: 40px; }}
      .doc {{ max-width: 56rem; margin: 0 auto; }}
      .doc h1 {{ color: #f8fafc; font-size: 2.25rem; border-bottom: 1px solid #1e293b; padding-bottom: 0.5rem; }}
      .doc h2 {{ color: #e0e7ff; font-size: 1.5rem; margin-top: 2rem; }}
      .doc h3 {{ color: #bfdbfe; font-size: 1.25rem; margin-top: 1.5rem; }}
      .doc li {{ margin-bottom: 0.5rem; color: #cbd5e1; }}
      .doc strong {{ color: #f1f5f9; }}
      .doc code {{ font-family: monospace; color: #94a3b8; font-size: 0.875rem; }}
      .doc pre {{ background-color: #020617; padding: 1rem; border-radius: 0.5rem; overflow-x: auto; border: 1px solid #1e293b; }}
    </style>
</head>
<body>
    <div class="doc">
        {body}
    </div>
</body>
</html>
"""

# Applied in order; not a general Markdown parser
_MARKDOWN_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"^# (.*)$", re.M), r"<h1>\1</h1>"),
    (re.compile(r"^## (.*)$", re.M), r"<h2>\1</h2>"),
    (re.compile(r"^### (.*)$", re.M), r"<h3>\1</h3>"),
    (re.compile(r"^- \*\*(.*)\*\*: (.*)$", re.M), r"<li><strong>\1:</strong> \2</li>"),
    (re.compile(r"^- (.*)$", re.M), r"<li>\1</li>"),
    (re.compile(r"```([\s\S]*?)```"), r"<pre><code>\1</code></pre>"),
    (re.compile(r"\n"), "<br />"),
]


def export_candidates(
    entries: list[TreeEntry],
    patterns: list[re.Pattern[str]] | None = None,
) -> list[ExportCandidate]:
    """Pick the files offered for export, all selected by default."""
    candidates: list[ExportCandidate] = []
    for entry in entries:
        if entry.type is not EntryType.BLOB or not is_documentable(entry.path):
            continue
        if patterns and not matches_any_pattern(entry.path, patterns):
            continue
        candidates.append(ExportCandidate(path=entry.path, sha=entry.sha))
        if len(candidates) == MAX_EXPORT_CANDIDATES:
            break
    return candidates


def markdown_to_html(markdown: str) -> str:
    for pattern, replacement in _MARKDOWN_RULES:
        markdown = pattern.sub(replacement, markdown)
    return markdown


def wrap_in_html(title: str, markdown: str) -> str:
    return HTML_TEMPLATE.format(title=html.escape(title), body=markdown_to_html(markdown))


def export_file_name(path: str, fmt: ExportFormat) -> str:
    return path.replace("/", "_") + fmt.extension


def archive_name(summary: RepoSummary) -> str:
    return f"{summary.name}-documentation.zip"


def export_documentation(
    provider: ForgeProvider,
    generator: DocGenerator,
    summary: RepoSummary,
    ref: str,
    candidates: list[ExportCandidate],
    fmt: ExportFormat = ExportFormat.MARKDOWN,
) -> Generator[ExportProgress, None, None]:
    """Document the selected files one at a time, yielding progress.

    Files whose content cannot be fetched are skipped and recorded. A rate
    limit aborts the export. The last progress yielded carries the archive.
    """
    selected = [c for c in candidates if c.selected]
    progress = ExportProgress(total_files=len(selected))
    root = f"{summary.name}-docs"

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(f"{root}/", "")
        for candidate in selected:
            progress.current_file = candidate.path
            try:
                content = provider.fetch_file_content(
                    summary.owner, summary.name, candidate.path, ref, candidate.sha
                )
            except RateLimitError:
                raise
            except ForgeError as exc:
                logger.warning("Skipping %s: %s", candidate.path, exc)
                progress.skipped.append(f"{candidate.path}: {exc}")
            else:
                file_name = candidate.path.rsplit("/", maxsplit=1)[-1]
                doc = generator.generate_documentation(file_name, content)
                if fmt is ExportFormat.HTML:
                    doc = wrap_in_html(candidate.path, doc)
                archive.writestr(f"{root}/{export_file_name(candidate.path, fmt)}", doc)

            progress.processed_files += 1
            yield progress

    progress.current_file = ""
    progress.archive = buffer.getvalue()
    yield progress
