"""Environment-driven settings for the reranking client and UI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_URL = "https://api.cohere.ai/v1/rerank"
DEFAULT_MODEL = "rerank-v3.5"
DEFAULT_TOP_N = 3
DEFAULT_CREDENTIALS_PATH = Path("~/.docrerank/credentials.json")


@dataclass(frozen=True)
class RerankSettings:
    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    top_n: int = DEFAULT_TOP_N
    timeout: float | None = None
    credentials_path: Path = DEFAULT_CREDENTIALS_PATH
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.top_n < 1:
            raise ValueError(f"top_n must be positive, got {self.top_n}")


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _read_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def load_settings() -> RerankSettings:
    """Build settings from the environment (and a .env file, when present)."""

    credentials_path = os.getenv("RERANK_CREDENTIALS_PATH")
    return RerankSettings(
        api_url=os.getenv("RERANK_API_URL") or DEFAULT_API_URL,
        model=os.getenv("RERANK_MODEL") or DEFAULT_MODEL,
        top_n=_read_int("RERANK_TOP_N", DEFAULT_TOP_N),
        timeout=_read_float("RERANK_TIMEOUT"),
        credentials_path=Path(credentials_path) if credentials_path else DEFAULT_CREDENTIALS_PATH,
        log_level=(os.getenv("RERANK_LOG_LEVEL") or "INFO").upper(),
    )


__all__ = ["RerankSettings", "load_settings"]
