"""Documentable-file detection, language hints, and regex path filtering."""

from __future__ import annotations

import re

# Source files worth sending to the documentation generator
DOCUMENTABLE_EXTENSIONS: tuple[str, ...] = (
    ".ts", ".tsx", ".js", ".jsx", ".py", ".java", ".go", ".rb", ".php",
    ".c", ".cpp", ".h", ".cs", ".rs", ".json", ".md", ".html", ".css",
)

# Extension → st.code / code-fence language
LANGUAGE_MAP: dict[str, str] = {
    ".py": "python",
    ".js": "javascript",
    ".jsx": "jsx",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".java": "java",
    ".go": "go",
    ".rb": "ruby",
    ".php": "php",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".rs": "rust",
    ".json": "json",
    ".md": "markdown",
    ".html": "html",
    ".css": "css",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".toml": "toml",
    ".sh": "bash",
    ".sql": "sql",
}

FILENAME_LANGUAGE_MAP: dict[str, str] = {
    "Dockerfile": "dockerfile",
    "Makefile": "makefile",
}


def is_documentable(path: str) -> bool:
    return path.endswith(DOCUMENTABLE_EXTENSIONS)


def get_language_hint(path: str) -> str:
    """Return the code-fence language hint for a file path."""
    filename = path.rsplit("/", maxsplit=1)[-1]
    if filename in FILENAME_LANGUAGE_MAP:
        return FILENAME_LANGUAGE_MAP[filename]

    dot_pos = filename.rfind(".")
    if dot_pos <= 0:
        return ""
    return LANGUAGE_MAP.get(filename[dot_pos:].lower(), "")


# ---------------------------------------------------------------------------
# Regex path filtering
# ---------------------------------------------------------------------------


def parse_pattern_input(raw: str) -> list[str]:
    """Split a comma-separated string into stripped, non-empty patterns."""
    if not raw:
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


def compile_patterns(
    patterns: list[str],
) -> tuple[list[re.Pattern[str]], list[str]]:
    """Compile patterns, returning ``(compiled, errors)``.

    Invalid patterns are left out of *compiled* and reported in *errors*.
    """
    compiled: list[re.Pattern[str]] = []
    errors: list[str] = []
    for p in patterns:
        try:
            compiled.append(re.compile(p))
        except re.error as exc:
            errors.append(f"`{p}`: {exc}")
    return compiled, errors


def matches_any_pattern(path: str, compiled: list[re.Pattern[str]]) -> bool:
    """True if *path* matches any pattern (``re.search``); empty means all."""
    if not compiled:
        return True
    return any(pat.search(path) for pat in compiled)
