from __future__ import annotations

from typing import Sequence

from tutor_api.errors import AnswerGenerationError
from tutor_api.llm import LLMClient, LLMClientError
from tutor_api.services.knowledge.types import ComposedAnswer, Fragment

ANSWER_TEMPERATURE = 0.1

NO_CONTEXT_NOTICE = "No relevant course material fragments were found."

ANSWER_INSTRUCTION = (
    "You are a teaching assistant who must stay strictly within the supplied course material. "
    "Answer the student's question only from the numbered fragments provided:\n"
    "1. If the fragments contain the answer, explain it clearly without introducing "
    "knowledge that is not in the fragments.\n"
    "2. If the fragments are not enough to answer, say explicitly that the current course "
    "material does not determine an answer. Never make one up.\n"
    "3. You may cite fragment numbers to help the student find the source text."
)


def render_block(rank: int, fragment: Fragment) -> str:
    return (
        f"[Fragment {rank} | source: {fragment.source_name}]\n"
        f"Text: {fragment.raw_text}\n"
        f"Summary: {fragment.digest}"
    )


def render_context(selected: Sequence[Fragment]) -> str:
    blocks = [render_block(rank, fragment) for rank, fragment in enumerate(selected, start=1)]
    return "\n\n".join(blocks) or NO_CONTEXT_NOTICE


class AnswerComposer:
    def __init__(self, llm_client: LLMClient) -> None:
        self._llm_client = llm_client

    def compose(self, question: str, selected: Sequence[Fragment]) -> ComposedAnswer:
        context = render_context(selected)
        try:
            result = self._llm_client.complete(
                messages=[
                    {"role": "system", "content": ANSWER_INSTRUCTION},
                    {
                        "role": "user",
                        "content": (
                            f"Student question: {question}\n\n"
                            "Course material fragments related to the question:\n\n"
                            f"{context}\n\n"
                            "Answer strictly from these fragments."
                        ),
                    },
                ],
                temperature=ANSWER_TEMPERATURE,
            )
        except LLMClientError as exc:
            raise AnswerGenerationError(str(exc)) from exc

        answer = result.content.strip()
        if not answer:
            raise AnswerGenerationError("completion returned an empty answer")

        return ComposedAnswer(answer=answer, used_chunks=len(selected), model=result.model)
