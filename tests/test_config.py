import pytest

from tutor_api.config import get_settings


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "DATA_DIR",
        "STORE_BACKEND",
        "DATABASE_URL",
        "SEGMENT_MAX_LENGTH",
        "RETRIEVAL_TOP_K",
        "RETRIEVAL_FALLBACK_COUNT",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.store_backend == "json"
    assert settings.segment_max_length == 300
    assert settings.segment_terminator == "。"
    assert settings.retrieval_top_k == 5
    assert settings.retrieval_fallback_count == 3
    assert settings.cors_origins == ["*"]
    assert settings.database_url.endswith("knowledge.db")


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORE_BACKEND", "SQLite")
    monkeypatch.setenv("RETRIEVAL_FALLBACK_COUNT", "0")
    monkeypatch.setenv("SEGMENT_MAX_LENGTH", "5")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("LLM_TIMEOUT_SECONDS", "12.5")

    settings = get_settings()

    assert settings.store_backend == "sqlite"
    assert settings.retrieval_fallback_count == 0
    assert settings.segment_max_length == 20
    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.llm_timeout_seconds == 12.5


def test_settings_reject_unknown_store_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORE_BACKEND", "redis")

    with pytest.raises(ValueError, match="STORE_BACKEND"):
        get_settings()
