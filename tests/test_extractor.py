import base64

import fitz
import pytest

from tutor_api.errors import ExtractionError
from tutor_api.services.knowledge.extractor import extract_pdf_text, is_binary_kind


def _pdf_base64(*pages: str) -> str:
    document = fitz.open()
    for text in pages:
        page = document.new_page()
        page.insert_text((72, 72), text)
    pdf_bytes = document.tobytes()
    document.close()
    return base64.b64encode(pdf_bytes).decode("ascii")


def test_extract_pdf_text_reads_every_page() -> None:
    text = extract_pdf_text(_pdf_base64("Mitochondria make energy", "Ribosomes make proteins"))

    assert "Mitochondria make energy" in text
    assert "Ribosomes make proteins" in text
    assert text.index("Mitochondria") < text.index("Ribosomes")


@pytest.mark.parametrize("encoded", ["", base64.b64encode(b"plain text").decode("ascii")])
def test_extract_pdf_text_rejects_non_pdf_input(encoded: str) -> None:
    with pytest.raises(ExtractionError):
        extract_pdf_text(encoded)


@pytest.mark.parametrize(("kind", "expected"), [("pdf", True), (" PDF ", True), ("text", False), (None, False)])
def test_is_binary_kind(kind: str | None, expected: bool) -> None:
    assert is_binary_kind(kind) is expected
