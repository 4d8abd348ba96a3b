"""Shared data structures for the reranking workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .errors import PreconditionError


@dataclass(frozen=True)
class Document:
    """Ordered, immutable list of sections taken from one uploaded file."""

    sections: tuple[str, ...] = field(default_factory=tuple)
    filename: str | None = None

    def __len__(self) -> int:
        return len(self.sections)

    @property
    def is_empty(self) -> bool:
        return not self.sections


@dataclass(frozen=True)
class Query:
    text: str

    @classmethod
    def parse(cls, raw: str | None) -> "Query":
        text = (raw or "").strip()
        if not text:
            raise PreconditionError("Enter a query before searching.")
        return cls(text=text)


@dataclass(frozen=True)
class RankedResult:
    """A section paired with the relevance score the remote service assigned."""

    text: str
    score: float


class SessionState(Enum):
    NO_DOCUMENT = "no_document"
    DOCUMENT_LOADED = "document_loaded"
    QUERY_IN_FLIGHT = "query_in_flight"
    RESULTS_READY = "results_ready"


@dataclass(frozen=True)
class Notice:
    """Transient, user-facing notification."""

    title: str
    description: str = ""
    level: str = "info"

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    def pretty(self) -> str:
        """Return the notice as a single display line."""
        if not self.description:
            return self.title
        return f"{self.title}: {self.description.strip()}"


__all__ = ["Document", "Query", "RankedResult", "SessionState", "Notice"]
