import io
import random

import pytest
from pypdf import PdfWriter
from pypdf.errors import DependencyError

from docrerank import Document, ExtractionError, PdfTextExtractor, extract_sections, split_sections
from docrerank.ingest import resolve_media_type


def test_split_sections_drops_blank_lines():
    text = "Refunds are processed in 5 days.\n\n   \nShipping is free.\r\nReturns need a receipt.\n"

    sections = split_sections(text)

    assert sections == (
        "Refunds are processed in 5 days.",
        "Shipping is free.",
        "Returns need a receipt.",
    )


def test_plain_text_section_count_matches_non_blank_lines():
    data = b"alpha\nbeta\n\ngamma\ndelta"

    document = extract_sections(data, filename="notes.txt", media_type="text/plain")

    assert isinstance(document, Document)
    assert len(document) == 4
    assert document.filename == "notes.txt"


def test_plain_text_keeps_line_content_untrimmed():
    document = extract_sections(b"  indented line\n", filename="notes.txt")

    assert document.sections == ("  indented line",)


def test_plain_text_strips_byte_order_mark():
    document = extract_sections("\ufefffirst\nsecond".encode("utf-8"), filename="bom.txt")

    assert document.sections == ("first", "second")


def test_invalid_utf8_raises_extraction_error():
    with pytest.raises(ExtractionError):
        extract_sections(b"\xff\xfe\xfa", filename="broken.txt", media_type="text/plain")


def test_media_type_is_inferred_from_suffix():
    assert resolve_media_type("report.PDF") == "application/pdf"
    assert resolve_media_type("notes.txt") == "text/plain"
    assert resolve_media_type("notes.txt", "text/plain; charset=utf-8") == "text/plain"


def test_unsupported_file_raises_extraction_error():
    with pytest.raises(ExtractionError):
        extract_sections(b"{}", filename="data.json")

    with pytest.raises(ExtractionError):
        extract_sections(b"<p>hi</p>", filename="page.txt", media_type="text/html")


def test_pdf_pages_are_joined_in_page_order():
    pages = ["Page one intro\nPage one detail", "", "Page three"]
    extractor = PdfTextExtractor(loader=lambda data: pages)

    document = extract_sections(b"%PDF-", filename="doc.pdf", pdf_extractor=extractor)

    assert extractor.extract(b"%PDF-") == "Page one intro\nPage one detail\n\nPage three"
    assert document.sections == ("Page one intro", "Page one detail", "Page three")


def test_pdf_loader_receives_raw_bytes():
    seen: list[bytes] = []

    def loader(data):
        seen.append(data)
        return ["text"]

    extract_sections(b"raw-pdf-bytes", filename="doc.pdf", pdf_extractor=PdfTextExtractor(loader=loader))

    assert seen == [b"raw-pdf-bytes"]


def test_corrupt_pdf_raises_extraction_error():
    with pytest.raises(ExtractionError):
        extract_sections(b"this is not a pdf", filename="broken.pdf")


def test_blank_pdf_yields_empty_document():
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    buffer = io.BytesIO()
    writer.write(buffer)

    document = extract_sections(buffer.getvalue(), filename="blank.pdf")

    assert document.is_empty


def _two_page_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def _mutations(data: bytes, count: int, seed: int = 1234):
    rng = random.Random(seed)
    for _ in range(count):
        if rng.random() < 0.3:
            yield data[: rng.randrange(1, len(data))]
            continue
        mutated = bytearray(data)
        for _ in range(rng.randint(1, 8)):
            mutated[rng.randrange(len(mutated))] = rng.randrange(256)
        yield bytes(mutated)


def test_mutated_pdfs_either_load_or_raise_extraction_error():
    unexpected = []
    for data in _mutations(_two_page_pdf(), count=150):
        try:
            extract_sections(data, filename="mutated.pdf")
        except ExtractionError:
            continue
        except Exception as exc:  # noqa: BLE001 - collected for the assertion below
            unexpected.append(f"{type(exc).__name__}: {exc}")

    assert unexpected == []


@pytest.mark.parametrize(
    "error",
    [
        TypeError("argument of type 'NumberObject' is not iterable"),
        AttributeError("'NullObject' object has no attribute 'get_object'"),
        IndexError("list index out of range"),
        DependencyError("cryptography is required"),
    ],
)
def test_pdf_reader_failures_become_extraction_errors(monkeypatch, error):
    class ExplodingReader:
        def __init__(self, stream):
            raise error

    monkeypatch.setattr("docrerank.ingest.PdfReader", ExplodingReader)

    with pytest.raises(ExtractionError) as excinfo:
        extract_sections(b"%PDF-1.7", filename="broken.pdf")

    assert excinfo.value.__cause__ is error
