from dataclasses import dataclass
from functools import lru_cache
import logging
import os

STORE_BACKENDS = {"json", "sqlite"}


def _to_bool(value: str | None, *, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(value: str | None, *, default: int, minimum: int) -> int:
    if value is None:
        return default
    parsed = int(value)
    return max(minimum, parsed)


def _to_list(value: str | None, *, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    data_dir: str
    store_backend: str
    database_url: str
    db_echo: bool
    llm_api_base: str
    llm_api_key: str
    llm_model: str
    llm_fallback_model: str
    llm_timeout_seconds: float
    segment_max_length: int
    segment_terminator: str
    summary_workers: int
    retrieval_top_k: int
    retrieval_fallback_count: int
    cors_origins: list[str]
    log_level: str
    api_host: str
    api_port: int


@lru_cache
def get_settings() -> Settings:
    data_dir = os.getenv("DATA_DIR", "data")
    store_backend = os.getenv("STORE_BACKEND", "json").strip().lower()
    if store_backend not in STORE_BACKENDS:
        raise ValueError(f"STORE_BACKEND must be one of {sorted(STORE_BACKENDS)}")

    return Settings(
        data_dir=data_dir,
        store_backend=store_backend,
        database_url=os.getenv(
            "DATABASE_URL",
            f"sqlite+pysqlite:///{os.path.join(data_dir, 'knowledge.db')}",
        ),
        db_echo=_to_bool(os.getenv("DB_ECHO"), default=False),
        llm_api_base=os.getenv("LLM_API_BASE", "https://api.deepseek.com/v1"),
        llm_api_key=os.getenv("LLM_API_KEY", ""),
        llm_model=os.getenv("LLM_MODEL", "deepseek-chat"),
        llm_fallback_model=os.getenv("LLM_FALLBACK_MODEL", ""),
        llm_timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", "60")),
        segment_max_length=_to_int(os.getenv("SEGMENT_MAX_LENGTH"), default=300, minimum=20),
        segment_terminator=os.getenv("SEGMENT_TERMINATOR", "。"),
        summary_workers=_to_int(os.getenv("SUMMARY_WORKERS"), default=1, minimum=1),
        retrieval_top_k=_to_int(os.getenv("RETRIEVAL_TOP_K"), default=5, minimum=1),
        retrieval_fallback_count=_to_int(
            os.getenv("RETRIEVAL_FALLBACK_COUNT"), default=3, minimum=0
        ),
        cors_origins=_to_list(os.getenv("CORS_ORIGINS"), default=["*"]),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        api_host=os.getenv("API_HOST", "0.0.0.0"),
        api_port=_to_int(os.getenv("API_PORT"), default=3001, minimum=1),
    )


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    )
    root.addHandler(handler)
    root.setLevel(level)
