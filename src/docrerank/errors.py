"""Exception types raised by the reranking workflow."""

from __future__ import annotations


class RerankError(RuntimeError):
    """Base class for failures that are reported to the user."""


class ExtractionError(RerankError):
    """Raised when an uploaded file cannot be turned into sections."""


class PreconditionError(RerankError):
    """Raised when a query is attempted without its inputs in place."""


class QueryError(RerankError):
    """Raised when the remote reranking call fails or returns garbage."""


__all__ = [
    "RerankError",
    "ExtractionError",
    "PreconditionError",
    "QueryError",
]
