"""Streamlit UI for RepoDoc."""

from __future__ import annotations

import os

import streamlit as st

from RepoDoc import token_store
from RepoDoc.doc_generator import DocGenerator
from RepoDoc.export import archive_name, export_candidates, export_documentation
from RepoDoc.file_filter import compile_patterns, get_language_hint, parse_pattern_input
from RepoDoc.models import EntryType, ExportFormat
from RepoDoc.providers.base import BadCredentialsError, ForgeError, RateLimitError
from RepoDoc.providers.github import GitHubProvider
from RepoDoc.session import RepoSession
from RepoDoc.tree_builder import iter_nodes, render_tree
from RepoDoc.url_parser import parse_repo_url


def _qp(key: str, default: str = "") -> str:
    """Read a query parameter, returning *default* if absent."""
    params = st.query_params
    return params.get(key, default)


def _session() -> RepoSession:
    if "repo_session" not in st.session_state:
        st.session_state["repo_session"] = RepoSession()
    return st.session_state["repo_session"]


def main() -> None:
    st.set_page_config(
        page_title="RepoDoc",
        page_icon="📘",
        layout="wide",
    )

    store = token_store.CredentialStore()

    # --- Header with settings popover ---
    header_left, header_right = st.columns([8, 1])
    with header_left:
        st.title("RepoDoc")
    with header_right:
        st.markdown("<div style='height: 1.5rem'></div>", unsafe_allow_html=True)
        with st.popover("⚙", use_container_width=True):
            github_token, gemini_key = _render_settings(store)

    st.caption(
        "Generate documentation and an architecture summary for a GitHub repository."
    )

    # Credentials are read once per run and injected into the clients
    provider = GitHubProvider(token=github_token or None)
    generator = DocGenerator(api_key=gemini_key or None)
    session = _session()

    with st.form("repo_form"):
        url = st.text_input(
            "Repository",
            value=_qp("url"),
            placeholder="owner/repo or https://github.com/owner/repo",
        )
        fetch_clicked = st.form_submit_button(
            "Fetch", type="primary", use_container_width=True
        )

    if fetch_clicked:
        identifier = parse_repo_url(url)
        if identifier is None:
            st.error(
                'Invalid GitHub URL. Please use "owner/repo" format '
                "(e.g. facebook/react)."
            )
        else:
            st.session_state.pop("export_result", None)
            with st.spinner(f"Loading {identifier}..."):
                _guarded(session.open_repository, provider, identifier)

    if session.summary is None:
        return

    _render_summary(session, provider)
    if not session.entries:
        return

    if session.analysis is None:
        with st.spinner("Analyzing repository structure..."):
            session.analyze(generator)

    overview_tab, docs_tab, export_tab = st.tabs(["Overview", "Docs", "Export"])
    with overview_tab:
        st.markdown(session.analysis or "")
        if st.button("Regenerate summary"):
            session.clear_analysis()
            st.rerun()
        with st.expander("File structure", expanded=False):
            st.code(render_tree(session.tree), language=None)
    with docs_tab:
        _render_docs(session, provider, generator)
    with export_tab:
        _render_export(session, provider, generator)


def _render_settings(store: token_store.CredentialStore) -> tuple[str, str]:
    st.subheader("Settings")

    saved_gh = store.get(token_store.GITHUB_TOKEN) or ""
    github_token = st.text_input(
        "GitHub Token (optional)",
        value=_qp("token") or saved_gh,
        type="password",
        help="Required for private repos. Increases rate limit from 60 to 5,000 requests/hour.",
    ).strip()

    saved_gemini = store.get(token_store.GEMINI_API_KEY) or ""
    gemini_key = st.text_input(
        "Gemini API Key",
        value=saved_gemini or os.environ.get("GEMINI_API_KEY", ""),
        type="password",
        help="Used to generate documentation and the architecture summary.",
    ).strip()

    if store.is_available():
        remember = st.checkbox(
            "Save keys to OS keychain",
            value=bool(saved_gh or saved_gemini),
            help="Keys are stored in macOS Keychain or Windows Credential Manager.",
        )
        if remember:
            if github_token:
                store.set(token_store.GITHUB_TOKEN, github_token)
            if gemini_key:
                store.set(token_store.GEMINI_API_KEY, gemini_key)

        if st.button("Clear saved keys", use_container_width=True):
            store.remove(token_store.GITHUB_TOKEN)
            store.remove(token_store.GEMINI_API_KEY)
            st.success("Saved keys removed.")

    return github_token, gemini_key


def _guarded(action, *args) -> bool:
    """Run a forge action, reporting errors in place. Returns True on success."""
    try:
        action(*args)
        return True
    except RateLimitError as exc:
        st.error(str(exc))
        st.info(
            "Tip: Add a GitHub token in Settings (⚙) to increase your rate limit "
            "from 60 to 5,000 requests per hour."
        )
    except BadCredentialsError as exc:
        st.error(str(exc))
        st.info("Tip: Correct or clear the GitHub token in Settings (⚙).")
    except ForgeError as exc:
        st.error(str(exc))
    except Exception as exc:
        st.error(f"Unexpected error: {exc}")
    return False


def _render_summary(session: RepoSession, provider: GitHubProvider) -> None:
    summary = session.summary
    if summary is None:
        return

    info_col, branch_col = st.columns([3, 1])
    with info_col:
        st.subheader(f"{summary.owner}/{summary.name}")
        if summary.description:
            st.write(summary.description)
        st.caption(f"★ {summary.stars:,}  ·  forks {summary.forks:,}")

    with branch_col:
        if not session.branches:
            st.warning("This repository has no branches.")
            return
        names = [b.name for b in session.branches]
        index = names.index(session.selected_branch) if session.selected_branch in names else 0
        chosen = st.selectbox("Branch", names, index=index)

    if chosen != session.selected_branch:
        with st.spinner(f"Loading tree for {chosen}..."):
            _guarded(session.load_tree, provider, chosen)

    if session.truncated:
        st.warning(
            "The repository is too large to list in one request; the file tree is incomplete."
        )


def _render_docs(
    session: RepoSession,
    provider: GitHubProvider,
    generator: DocGenerator,
) -> None:
    files = [n for n in iter_nodes(session.tree) if n.type is EntryType.BLOB]
    if not files:
        st.info("No files in this branch.")
        return

    by_path = {n.path: n for n in files}
    paths = sorted(by_path)
    current = session.selected_file.path if session.selected_file else None
    chosen = st.selectbox(
        "File",
        paths,
        index=paths.index(current) if current in by_path else 0,
    )

    if st.button("Generate documentation", type="primary"):
        with st.spinner(f"Documenting {chosen}..."):
            _guarded(session.select_file, provider, generator, by_path[chosen])

    if session.file_doc is not None and session.selected_file is not None:
        st.markdown(session.file_doc)
        if session.file_content is not None:
            with st.expander("Source", expanded=False):
                st.code(
                    session.file_content,
                    language=get_language_hint(session.selected_file.path) or None,
                )


def _render_export(
    session: RepoSession,
    provider: GitHubProvider,
    generator: DocGenerator,
) -> None:
    summary = session.summary
    if summary is None:
        return

    fmt = ExportFormat(
        st.radio(
            "Format",
            [f.value for f in ExportFormat],
            format_func=lambda v: "Markdown" if v == ExportFormat.MARKDOWN.value else "HTML",
            horizontal=True,
        )
    )

    filter_raw = st.text_input(
        "File filter (regex, comma-separated)",
        placeholder=r"\.py$, src/.*\.ts$",
        help="Only files whose path matches at least one pattern are offered.",
    )
    patterns, errors = compile_patterns(parse_pattern_input(filter_raw))
    for err in errors:
        st.error(f"Invalid regex: {err}")

    candidates = export_candidates(session.entries, patterns)
    if not candidates:
        st.info("No documentable files found.")
        return

    st.caption(f"{len(candidates)} files (at most 30 are offered).")
    for candidate in candidates:
        candidate.selected = st.checkbox(
            candidate.path, value=True, key=f"export::{candidate.path}"
        )

    if not st.button("Export documentation", type="primary", disabled=bool(errors)):
        if "export_result" in st.session_state:
            _show_export_result(st.session_state["export_result"])
        return

    if not any(c.selected for c in candidates):
        st.error("Please select at least one file to export.")
        return

    progress_bar = st.progress(0, text="Starting...")
    progress = None
    try:
        for progress in export_documentation(
            provider, generator, summary, session.selected_branch, candidates, fmt
        ):
            pct = progress.processed_files / max(progress.total_files, 1)
            label = progress.current_file or "Compressing ZIP..."
            progress_bar.progress(min(pct, 1.0), text=label)
    except RateLimitError as exc:
        st.error(f"Export stopped: {exc}")
        return

    progress_bar.progress(1.0, text="Done!")
    st.session_state["export_result"] = {
        "archive": progress.archive,
        "filename": archive_name(summary),
        "skipped": progress.skipped,
    }
    _show_export_result(st.session_state["export_result"])


def _show_export_result(result: dict) -> None:
    skipped = result["skipped"]
    if skipped:
        with st.expander(f"⚠ {len(skipped)} files skipped", expanded=False):
            for line in skipped:
                st.text(line)

    st.download_button(
        label="Download ZIP",
        data=result["archive"],
        file_name=result["filename"],
        mime="application/zip",
        use_container_width=True,
    )


if __name__ == "__main__":
    main()
