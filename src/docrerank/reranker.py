"""Reranking clients."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Sequence

import requests
from pydantic import BaseModel, Field, ValidationError

from .config import RerankSettings
from .errors import QueryError
from .models import RankedResult

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to rerank"


class RerankRequestModel(BaseModel):
    model: str
    query: str
    documents: list[str]
    top_n: int


class RerankedDocumentModel(BaseModel):
    text: str


class RerankResultModel(BaseModel):
    index: int | None = None
    relevance_score: float = Field(ge=0.0, le=1.0)
    document: RerankedDocumentModel | None = None


class RerankResponseModel(BaseModel):
    results: list[RerankResultModel]


class Reranker(ABC):
    """Interface for scoring sections against a query."""

    @abstractmethod
    def rerank(self, query: str, sections: Sequence[str], top_n: int | None = None) -> list[RankedResult]:
        """Return the most relevant sections, best first."""


class CohereReranker(Reranker):
    """Calls the hosted Cohere rerank endpoint with a bearer credential."""

    def __init__(
        self,
        api_key: str,
        *,
        settings: RerankSettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required")
        self._api_key = api_key
        self._settings = settings or RerankSettings()
        self._session = session or requests.Session()

    def rerank(
        self,
        query: str,
        sections: Sequence[str],
        top_n: int | None = None,
    ) -> list[RankedResult]:  # noqa: D401
        limit = top_n or self._settings.top_n
        body = RerankRequestModel(
            model=self._settings.model,
            query=query,
            documents=list(sections),
            top_n=limit,
        )
        logger.info("Reranking %d sections with %s (top_n=%d)", len(body.documents), body.model, limit)

        try:
            response = self._session.post(
                self._settings.api_url,
                json=body.model_dump(),
                headers=self._headers(),
                timeout=self._settings.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Rerank request failed: %s", exc)
            raise QueryError(f"Could not reach the reranking service: {exc}") from exc

        payload = _json_or_none(response)
        if not response.ok:
            message = _error_message(payload)
            logger.warning("Rerank endpoint returned %s: %s", response.status_code, message)
            raise QueryError(message)

        results = _parse_results(payload, body.documents)[:limit]
        logger.debug("Received %d ranked results", len(results))
        return results

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }


def _json_or_none(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(payload: Any) -> str:
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return DEFAULT_ERROR_MESSAGE


def _parse_results(payload: Any, sections: Sequence[str]) -> list[RankedResult]:
    if payload is None:
        raise QueryError("Reranking service returned a response that is not JSON")
    try:
        response = RerankResponseModel.model_validate(payload)
    except ValidationError as exc:
        raise QueryError(f"Reranking response is invalid: {exc}") from exc

    ranked: list[RankedResult] = []
    for item in response.results:
        ranked.append(RankedResult(text=_result_text(item, sections), score=item.relevance_score))
    return ranked


def _result_text(item: RerankResultModel, sections: Sequence[str]) -> str:
    if item.document is not None:
        return item.document.text
    if item.index is not None and 0 <= item.index < len(sections):
        return sections[item.index]
    raise QueryError("Reranking response result has neither document text nor a valid index")


__all__ = ["Reranker", "CohereReranker"]
