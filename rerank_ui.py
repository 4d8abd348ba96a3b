"""Browser page for uploading a document and ranking its sections.

Run with ``streamlit run rerank_ui.py``.
"""

from __future__ import annotations

import logging

import streamlit as st

from docrerank import (
    CredentialStore,
    ExtractionError,
    Notice,
    PreconditionError,
    RerankSession,
    load_settings,
)
from docrerank.presenter import EXPORT_FILENAME, EXPORT_MEDIA_TYPE, format_score, score_to_progress

settings = load_settings()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="Document ReRanking", page_icon="🔎", layout="centered")


def _get_session() -> RerankSession:
    if "rerank_session" not in st.session_state:
        store = CredentialStore(settings.credentials_path)
        st.session_state["rerank_session"] = RerankSession(store, settings=settings)
    return st.session_state["rerank_session"]


def _show(notice: Notice) -> None:
    if notice.is_error:
        st.error(notice.pretty())
    else:
        st.toast(notice.pretty())


session = _get_session()

st.title("Document ReRanking")
st.caption("Upload a document, make queries, and export results")

# --- Credential ---
with st.sidebar:
    st.header("API key")
    has_key = session.credentials.get() is not None
    st.caption("A key is saved." if has_key else "No key saved yet.")
    with st.form("credential_form", clear_on_submit=True):
        api_key = st.text_input("Cohere API key", type="password")
        if st.form_submit_button("Save key"):
            try:
                _show(session.credentials.set(api_key))
            except PreconditionError as exc:
                _show(Notice(title="Error", description=str(exc), level="error"))

# --- Upload ---
uploaded = st.file_uploader("Drop your text or PDF file here", type=["txt", "pdf"], accept_multiple_files=False)
if uploaded is not None:
    try:
        notice = session.load_upload(
            uploaded.file_id,
            uploaded.getvalue(),
            filename=uploaded.name,
            media_type=uploaded.type,
        )
    except ExtractionError as exc:
        notice = Notice(title="Error", description=str(exc), level="error")
    if notice is not None:
        _show(notice)

# --- Query ---
with st.form("query_form"):
    query_disabled = session.document.is_empty or session.is_busy
    query = st.text_input("Query", placeholder="Enter your query...", disabled=query_disabled)
    submitted = st.form_submit_button("Search", disabled=query_disabled)

if submitted:
    with st.spinner("Ranking sections..."):
        notice = session.run_query(query)
    if notice.is_error:
        _show(notice)

# --- Results ---
if session.results:
    header, export = st.columns([3, 1])
    header.subheader("Results")
    export.download_button(
        "Export CSV",
        data=session.export_csv(),
        file_name=EXPORT_FILENAME,
        mime=EXPORT_MEDIA_TYPE,
    )
    for result in session.results:
        with st.container(border=True):
            left, right = st.columns([2, 1])
            left.caption(format_score(result.score))
            right.progress(score_to_progress(result.score))
            st.write(result.text)
