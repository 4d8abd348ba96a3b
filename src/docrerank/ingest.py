"""Turn uploaded files into line-based document sections."""

from __future__ import annotations

import io
import logging
from pathlib import PurePath
from typing import Callable, Sequence

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from .errors import ExtractionError
from .models import Document

logger = logging.getLogger(__name__)

TEXT_MEDIA_TYPE = "text/plain"
PDF_MEDIA_TYPE = "application/pdf"
PAGE_SEPARATOR = "\n"

_SUFFIX_MEDIA_TYPES = {
    ".txt": TEXT_MEDIA_TYPE,
    ".pdf": PDF_MEDIA_TYPE,
}

PageLoader = Callable[[bytes], Sequence[str]]


def split_sections(text: str) -> tuple[str, ...]:
    """Split text on line boundaries, dropping lines that are blank once trimmed."""
    return tuple(line for line in text.splitlines() if line.strip())


def resolve_media_type(filename: str | None, media_type: str | None = None) -> str:
    if media_type:
        # Browsers may append parameters, e.g. "text/plain; charset=utf-8".
        return media_type.split(";", 1)[0].strip().lower()
    suffix = PurePath(filename or "").suffix.lower()
    resolved = _SUFFIX_MEDIA_TYPES.get(suffix)
    if resolved is None:
        raise ExtractionError(f"Unsupported file type '{suffix or filename}'. Upload a .txt or .pdf file.")
    return resolved


class PdfTextExtractor:
    """Extracts text page by page; the loader can be swapped out in tests."""

    def __init__(self, loader: PageLoader | None = None) -> None:
        self._loader = loader or self._default_loader

    def extract(self, data: bytes) -> str:
        pages = self._loader(data)
        logger.debug("Extracted %d PDF pages", len(pages))
        return PAGE_SEPARATOR.join(pages)

    @staticmethod
    def _default_loader(data: bytes) -> list[str]:
        try:
            reader = PdfReader(io.BytesIO(data))
            return [page.extract_text() or "" for page in reader.pages]
        except PyPdfError as exc:
            raise ExtractionError(f"Could not read PDF: {exc}") from exc
        except Exception as exc:
            # Malformed files surface as arbitrary errors from deep inside pypdf.
            logger.warning("PDF parsing failed: %r", exc)
            raise ExtractionError(f"Could not read PDF: {exc}") from exc


def decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ExtractionError("Text file is not valid UTF-8.") from exc


def extract_sections(
    data: bytes,
    *,
    filename: str | None = None,
    media_type: str | None = None,
    pdf_extractor: PdfTextExtractor | None = None,
) -> Document:
    """Extract a `Document` from raw upload bytes.

    Plain text is decoded and split directly. PDFs are read page by page,
    joined in page order, then split with the same rule. Anything else raises
    `ExtractionError`.
    """

    resolved = resolve_media_type(filename, media_type)
    if resolved == TEXT_MEDIA_TYPE:
        text = decode_text(data)
    elif resolved == PDF_MEDIA_TYPE:
        text = (pdf_extractor or PdfTextExtractor()).extract(data)
    else:
        raise ExtractionError(f"Unsupported media type '{resolved}'. Upload a .txt or .pdf file.")

    document = Document(sections=split_sections(text), filename=filename)
    logger.info("Ingested %s as %s: %d sections", filename or "<upload>", resolved, len(document))
    return document


__all__ = [
    "PDF_MEDIA_TYPE",
    "TEXT_MEDIA_TYPE",
    "PdfTextExtractor",
    "extract_sections",
    "resolve_media_type",
    "split_sections",
]
