"""Rank the sections of an uploaded document against a query."""

from .config import RerankSettings, load_settings
from .credentials import CredentialStore
from .errors import ExtractionError, PreconditionError, QueryError, RerankError
from .ingest import PdfTextExtractor, extract_sections, split_sections
from .models import Document, Notice, Query, RankedResult, SessionState
from .presenter import format_score, results_to_csv, score_to_progress
from .reranker import CohereReranker, Reranker
from .session import RerankSession

__all__ = [
    "CohereReranker",
    "CredentialStore",
    "Document",
    "ExtractionError",
    "Notice",
    "PdfTextExtractor",
    "PreconditionError",
    "Query",
    "QueryError",
    "RankedResult",
    "RerankError",
    "RerankSession",
    "RerankSettings",
    "Reranker",
    "SessionState",
    "extract_sections",
    "format_score",
    "load_settings",
    "results_to_csv",
    "score_to_progress",
    "split_sections",
]
__version__ = "0.1.0"
