from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tutor_api.config import get_settings
from tutor_api.db import get_engine
from tutor_api.dependencies import get_knowledge_store, get_llm_client
from tutor_api.llm import ChatResult, LLMClientError
from tutor_api.main import app
from tutor_api.services.knowledge.summarizer import SUMMARY_INSTRUCTION


class FakeLLMClient:
    """Summarizes to a fixed prefix and answers with a canned reply."""

    def __init__(
        self,
        *,
        answer: str = "mocked answer",
        fail_summaries: bool = False,
        fail_answers: bool = False,
    ) -> None:
        self.answer = answer
        self.fail_summaries = fail_summaries
        self.fail_answers = fail_answers
        self.calls: list[list[dict[str, str]]] = []

    def complete(self, *, messages: list[dict[str, str]], temperature: float) -> ChatResult:
        self.calls.append(messages)
        is_summary = messages[0]["content"] == SUMMARY_INSTRUCTION
        if is_summary:
            if self.fail_summaries:
                raise LLMClientError("simulated summary failure")
            return ChatResult(
                content=f"digest: {messages[1]['content'][:20]}",
                model="fake-model",
                used_fallback=False,
            )

        if self.fail_answers:
            raise LLMClientError("simulated answer failure")
        return ChatResult(content=f"  {self.answer}  ", model="fake-model", used_fallback=False)

    @property
    def summary_calls(self) -> list[list[dict[str, str]]]:
        return [call for call in self.calls if call[0]["content"] == SUMMARY_INSTRUCTION]

    @property
    def answer_calls(self) -> list[list[dict[str, str]]]:
        return [call for call in self.calls if call[0]["content"] != SUMMARY_INSTRUCTION]


@pytest.fixture(autouse=True)
def reset_api_caches() -> Iterator[None]:
    get_settings.cache_clear()
    get_engine.cache_clear()
    get_knowledge_store.cache_clear()
    yield
    get_settings.cache_clear()
    get_engine.cache_clear()
    get_knowledge_store.cache_clear()


@pytest.fixture
def data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    directory = tmp_path / "data"
    monkeypatch.setenv("DATA_DIR", str(directory))
    monkeypatch.setenv("STORE_BACKEND", "json")
    monkeypatch.setenv("LLM_API_KEY", "test-key")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    return directory


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def client(data_dir: Path, fake_llm: FakeLLMClient) -> Iterator[TestClient]:
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
