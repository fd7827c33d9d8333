from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends

from tutor_api.config import get_settings
from tutor_api.db import get_engine
from tutor_api.llm import ChatCompletionClient, LLMClient
from tutor_api.services.knowledge.composer import AnswerComposer
from tutor_api.services.knowledge.sql_store import SqlKnowledgeStore
from tutor_api.services.knowledge.store import JsonFileKnowledgeStore, KnowledgeStore
from tutor_api.services.knowledge.summarizer import CompletionSummarizer, Summarizer


@lru_cache
def get_knowledge_store() -> KnowledgeStore:
    settings = get_settings()
    if settings.store_backend == "sqlite":
        sql_store = SqlKnowledgeStore(get_engine())
        sql_store.prepare()
        return sql_store

    json_store = JsonFileKnowledgeStore(Path(settings.data_dir))
    json_store.prepare()
    return json_store


def get_llm_client() -> LLMClient:
    settings = get_settings()
    return ChatCompletionClient(
        base_url=settings.llm_api_base,
        api_key=settings.llm_api_key,
        default_model=settings.llm_model,
        fallback_model=settings.llm_fallback_model,
        timeout_seconds=settings.llm_timeout_seconds,
    )


def get_summarizer(llm_client: Annotated[LLMClient, Depends(get_llm_client)]) -> Summarizer:
    return CompletionSummarizer(llm_client)


def get_answer_composer(
    llm_client: Annotated[LLMClient, Depends(get_llm_client)],
) -> AnswerComposer:
    return AnswerComposer(llm_client)
