from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


class LLMClientError(RuntimeError):
    pass


@dataclass(frozen=True)
class ChatResult:
    content: str
    model: str
    used_fallback: bool


class LLMClient(Protocol):
    def complete(self, *, messages: list[dict[str, str]], temperature: float) -> ChatResult: ...


class ChatCompletionClient:
    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        default_model: str,
        fallback_model: str = "",
        timeout_seconds: float = 60.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._default_model = default_model
        self._fallback_model = fallback_model
        self._timeout_seconds = timeout_seconds

    def complete(self, *, messages: list[dict[str, str]], temperature: float) -> ChatResult:
        if not self._api_key:
            raise LLMClientError("LLM_API_KEY is not configured")

        for model, used_fallback in self._model_candidates():
            try:
                content = self._chat_completion(
                    model=model, messages=messages, temperature=temperature
                )
            except (httpx.HTTPError, ValueError) as exc:
                if used_fallback or not self._has_fallback():
                    raise LLMClientError(str(exc)) from exc
                logger.warning("Model %s failed (%s), retrying with fallback", model, exc)
                continue

            return ChatResult(content=content, model=model, used_fallback=used_fallback)

        raise LLMClientError("No model candidates configured")

    def _has_fallback(self) -> bool:
        return bool(self._fallback_model) and self._fallback_model != self._default_model

    def _model_candidates(self) -> list[tuple[str, bool]]:
        candidates: list[tuple[str, bool]] = [(self._default_model, False)]
        if self._has_fallback():
            candidates.append((self._fallback_model, True))
        return candidates

    def _chat_completion(
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
    ) -> str:
        response = httpx.post(
            f"{self._base_url}/chat/completions",
            headers={"Authorization": f"Bearer {self._api_key}"},
            json={
                "model": model,
                "messages": messages,
                "temperature": temperature,
            },
            timeout=self._timeout_seconds,
        )
        response.raise_for_status()

        payload = response.json()
        choices = payload.get("choices") if isinstance(payload, dict) else None
        if not isinstance(choices, list) or not choices:
            raise ValueError("Invalid chat completion payload: missing choices")

        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise ValueError("Invalid chat completion payload: missing assistant content")

        return content.strip()
