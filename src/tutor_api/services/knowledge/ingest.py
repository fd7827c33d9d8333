from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Callable

from tutor_api.errors import EmptyContentError, ExtractionError, SummarizationError, ValidationError
from tutor_api.services.knowledge.extractor import extract_pdf_text, is_binary_kind
from tutor_api.services.knowledge.segmenter import DEFAULT_TERMINATOR, segment
from tutor_api.services.knowledge.store import KnowledgeStore
from tutor_api.services.knowledge.summarizer import Summarizer
from tutor_api.services.knowledge.types import FragmentDraft, IngestionResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 300
FALLBACK_DIGEST_CHARS = 200
DEFAULT_KIND = "text"


def fallback_digest(text: str) -> str:
    return text[:FALLBACK_DIGEST_CHARS]


def _digest_for(summarizer: Summarizer, text: str, *, position: int) -> str:
    try:
        digest = summarizer.summarize(text)
    except SummarizationError as exc:
        logger.warning("Summarization failed for segment %d, using excerpt: %s", position, exc)
        return fallback_digest(text)

    if not digest.strip():
        logger.warning("Summarization returned empty digest for segment %d", position)
        return fallback_digest(text)
    return digest


def summarize_segments(
    summarizer: Summarizer,
    segments: list[str],
    *,
    workers: int = 1,
) -> list[str]:
    """Return one digest per segment, indexed like ``segments``."""
    if workers <= 1 or len(segments) <= 1:
        return [
            _digest_for(summarizer, text, position=position)
            for position, text in enumerate(segments)
        ]

    # joined by segment index, not completion order
    digests = [""] * len(segments)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(_digest_for, summarizer, text, position=position): position
            for position, text in enumerate(segments)
        }
        for future, position in futures.items():
            digests[position] = future.result()

    return digests


def _resolve_text(
    *,
    kind: str,
    content: str | None,
    content_encoded: str | None,
    extractor: Callable[[str], str],
) -> str:
    text = content or ""
    if is_binary_kind(kind) and content_encoded:
        try:
            text = extractor(content_encoded)
        except ExtractionError:
            logger.warning("Document extraction failed, using supplied content", exc_info=True)
    return text


def ingest_material(
    store: KnowledgeStore,
    summarizer: Summarizer,
    *,
    name: str,
    kind: str | None = None,
    content: str | None = None,
    content_encoded: str | None = None,
    max_length: int = DEFAULT_MAX_LENGTH,
    terminator: str = DEFAULT_TERMINATOR,
    summary_workers: int = 1,
    extractor: Callable[[str], str] = extract_pdf_text,
) -> IngestionResult:
    normalized_name = (name or "").strip()
    if not normalized_name:
        raise ValidationError("name is required")
    if max_length <= 0:
        raise ValidationError("max_length must be > 0")

    resolved_kind = (kind or DEFAULT_KIND).strip().lower() or DEFAULT_KIND

    # registered before parsing so every upload attempt is recorded
    material = store.add_material(name=normalized_name, kind=resolved_kind)

    text = _resolve_text(
        kind=resolved_kind,
        content=content,
        content_encoded=content_encoded,
        extractor=extractor,
    )
    if not text.strip():
        raise EmptyContentError("no parseable text content was provided")

    segments = segment(text, max_length, terminator=terminator)
    digests = summarize_segments(summarizer, segments, workers=summary_workers)

    drafts = [
        FragmentDraft(
            material_id=material.id,
            source_name=material.name,
            position=position,
            raw_text=raw_text,
            digest=digest,
        )
        for position, (raw_text, digest) in enumerate(zip(segments, digests))
    ]
    fragments = store.add_fragments(drafts)

    logger.info(
        "Ingested material %s (%s): %d fragments",
        material.id,
        material.name,
        len(fragments),
    )
    return IngestionResult(material_id=material.id, fragment_count=len(fragments))
