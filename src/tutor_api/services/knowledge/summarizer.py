from __future__ import annotations

from typing import Protocol

from tutor_api.errors import SummarizationError
from tutor_api.llm import LLMClient, LLMClientError

MAX_INPUT_CHARS = 2000
SUMMARY_TEMPERATURE = 0.1

SUMMARY_INSTRUCTION = (
    "You are a careful course-material editor. Compress the user's text into exactly "
    "one or two sentences of factual content, written in the same language as the text. "
    "Do not elaborate, do not explain, and do not add facts that are not in the text."
)


class Summarizer(Protocol):
    def summarize(self, text: str) -> str: ...


class CompletionSummarizer:
    def __init__(self, llm_client: LLMClient) -> None:
        self._llm_client = llm_client

    def summarize(self, text: str) -> str:
        try:
            result = self._llm_client.complete(
                messages=[
                    {"role": "system", "content": SUMMARY_INSTRUCTION},
                    {"role": "user", "content": text[:MAX_INPUT_CHARS]},
                ],
                temperature=SUMMARY_TEMPERATURE,
            )
        except LLMClientError as exc:
            raise SummarizationError(str(exc)) from exc

        return result.content.strip()
