"""Application context that owns the document, results and in-flight guard."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

from .config import RerankSettings
from .credentials import CredentialStore
from .errors import PreconditionError, QueryError, RerankError
from .ingest import PdfTextExtractor, extract_sections
from .models import Document, Notice, Query, RankedResult, SessionState
from .presenter import results_to_csv
from .reranker import CohereReranker, Reranker

logger = logging.getLogger(__name__)

RerankerFactory = Callable[[str], Reranker]


class RerankSession:
    """Drives the upload -> query -> results workflow for one user.

    Queries run on a single background worker. Only one may be outstanding,
    and its results are applied to the session before its future resolves.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        *,
        reranker_factory: RerankerFactory | None = None,
        settings: RerankSettings | None = None,
        pdf_extractor: PdfTextExtractor | None = None,
    ) -> None:
        self._credentials = credentials
        self._settings = settings or RerankSettings()
        self._reranker_factory = reranker_factory or self._default_reranker
        self._pdf_extractor = pdf_extractor
        self._document = Document()
        self._results: tuple[RankedResult, ...] = ()
        self._upload_id: str | None = None
        self._busy = False
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="rerank")

    @property
    def document(self) -> Document:
        return self._document

    @property
    def results(self) -> tuple[RankedResult, ...]:
        return self._results

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def state(self) -> SessionState:
        if self._busy:
            return SessionState.QUERY_IN_FLIGHT
        if self._results:
            return SessionState.RESULTS_READY
        if self._document.is_empty:
            return SessionState.NO_DOCUMENT
        return SessionState.DOCUMENT_LOADED

    def load_document(self, data: bytes, *, filename: str | None = None, media_type: str | None = None) -> Notice:
        """Replace the current document. On `ExtractionError` nothing changes."""
        document = extract_sections(
            data,
            filename=filename,
            media_type=media_type,
            pdf_extractor=self._pdf_extractor,
        )
        with self._lock:
            self._document = document
            self._results = ()
        return Notice(
            title="Document loaded successfully",
            description=f"{len(document)} sections ready for querying",
            level="success",
        )

    def load_upload(
        self,
        upload_id: str,
        data: bytes,
        *,
        filename: str | None = None,
        media_type: str | None = None,
    ) -> Notice | None:
        """Load an upload unless this exact upload was already handled.

        Page reruns hand back the same upload repeatedly. Failed uploads are
        remembered as well, so a bad file is only reported once.
        """
        if upload_id == self._upload_id:
            return None
        self._upload_id = upload_id
        return self.load_document(data, filename=filename, media_type=media_type)

    def submit_query(self, text: str) -> "Future[list[RankedResult]]":
        query = Query.parse(text)
        if self._document.is_empty:
            raise PreconditionError("Upload a document before running a query.")
        api_key = self._credentials.get()
        if not api_key:
            raise PreconditionError("Save your API key before running a query.")

        with self._lock:
            if self._busy:
                raise PreconditionError("A query is already running.")
            self._busy = True
            sections = self._document.sections

        try:
            return self._executor.submit(self._run, api_key, query, sections)
        except RuntimeError:
            with self._lock:
                self._busy = False
            raise

    def run_query(self, text: str) -> Notice:
        """Submit a query, wait for it and report the outcome as a notice."""
        try:
            results = self.submit_query(text).result()
        except RerankError as exc:
            return Notice(title="Error", description=str(exc), level="error")
        return Notice(
            title="Query complete",
            description=f"{len(results)} ranked sections",
            level="success",
        )

    def export_csv(self) -> str:
        return results_to_csv(self._results)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def _run(self, api_key: str, query: Query, sections: tuple[str, ...]) -> list[RankedResult]:
        results: list[RankedResult] | None = None
        try:
            reranker = self._reranker_factory(api_key)
            results = reranker.rerank(query.text, sections, top_n=self._settings.top_n)
        except QueryError:
            raise
        except Exception as exc:
            logger.exception("Unexpected failure while reranking")
            raise QueryError(f"Failed to process query: {exc}") from exc
        finally:
            with self._lock:
                if results is not None:
                    self._apply_results(sections, results)
                self._busy = False
        return results

    def _apply_results(self, sections: tuple[str, ...], results: list[RankedResult]) -> None:
        # Results only belong to the document they were computed against.
        if self._document.sections != sections:
            logger.info("Document changed while the query ran; discarding its results")
            return
        self._results = tuple(results)

    def _default_reranker(self, api_key: str) -> Reranker:
        return CohereReranker(api_key, settings=self._settings)


__all__ = ["RerankSession", "RerankerFactory"]
