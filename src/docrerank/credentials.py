"""Durable, client-local storage for the reranking API key."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from .errors import PreconditionError
from .models import Notice

logger = logging.getLogger(__name__)

CREDENTIAL_KEY = "cohere_api_key"


class CredentialStore:
    """Keeps a single credential string in a small JSON file.

    The value is never checked locally; a bad key only shows up as a
    `QueryError` on the first query.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> str | None:
        data = self._read()
        value = data.get(CREDENTIAL_KEY)
        if isinstance(value, str) and value:
            return value
        return None

    def set(self, value: str) -> Notice:
        credential = (value or "").strip()
        if not credential:
            raise PreconditionError("API key must not be empty.")

        data = self._read()
        data[CREDENTIAL_KEY] = credential
        self._write(data)
        logger.info("Stored API key in %s", self._path)
        return Notice(title="API key saved", description="Your API key has been saved.", level="success")

    def clear(self) -> None:
        data = self._read()
        if data.pop(CREDENTIAL_KEY, None) is not None:
            self._write(data)
            logger.info("Removed API key from %s", self._path)

    def _read(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            content = self._path.read_bytes().decode("utf-8")
            if not content.strip():
                return {}
            data = json.loads(content)
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable credential file %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # mkstemp creates the file with mode 0600.
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".credentials-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["CREDENTIAL_KEY", "CredentialStore"]
