from __future__ import annotations

import base64
import binascii
import logging

import fitz

from tutor_api.errors import ExtractionError

logger = logging.getLogger(__name__)

PDF_KINDS = {"pdf"}


def is_binary_kind(kind: str | None) -> bool:
    return (kind or "").strip().lower() in PDF_KINDS


def extract_pdf_text(encoded: str) -> str:
    """Decode a base64 PDF and return the text of all pages joined by newlines."""
    try:
        pdf_bytes = base64.b64decode(encoded, validate=False)
    except (binascii.Error, ValueError) as exc:
        raise ExtractionError(f"Invalid base64 document: {exc}") from exc

    if not pdf_bytes:
        raise ExtractionError("Encoded document is empty")

    try:
        with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
            pages = [page.get_text() for page in document]
    except Exception as exc:
        raise ExtractionError(f"PDF extraction failed: {exc}") from exc

    logger.debug("Extracted %d pages from PDF", len(pages))
    return "\n".join(pages)
