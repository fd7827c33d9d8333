from __future__ import annotations

import logging

from tutor_api.errors import ValidationError
from tutor_api.services.knowledge.composer import AnswerComposer
from tutor_api.services.knowledge.retriever import DEFAULT_FALLBACK_COUNT, DEFAULT_LIMIT, retrieve
from tutor_api.services.knowledge.store import KnowledgeStore
from tutor_api.services.knowledge.types import QuestionAnswer

logger = logging.getLogger(__name__)

EMPTY_STORE_MESSAGE = (
    "The knowledge base is empty. Please upload course material and wait for it to be "
    "processed before asking questions, so answers can be based on that material."
)


def answer_question(
    store: KnowledgeStore,
    composer: AnswerComposer,
    question: str,
    *,
    limit: int = DEFAULT_LIMIT,
    fallback_count: int = DEFAULT_FALLBACK_COUNT,
) -> QuestionAnswer:
    normalized_question = (question or "").strip()
    if not normalized_question:
        raise ValidationError("question is required")

    fragments = store.list_fragments()
    if not fragments:
        return QuestionAnswer(answer=EMPTY_STORE_MESSAGE, used_chunks=None)

    selected = retrieve(
        normalized_question,
        fragments,
        limit,
        fallback_count=fallback_count,
    )
    composed = composer.compose(normalized_question, selected)

    logger.info(
        "Answered question with %d of %d fragments (model=%s)",
        composed.used_chunks,
        len(fragments),
        composed.model,
    )
    return QuestionAnswer(answer=composed.answer, used_chunks=composed.used_chunks)
