from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging
from typing import Annotated, Any

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from tutor_api.config import configure_logging, get_settings
from tutor_api.dependencies import (
    get_answer_composer,
    get_knowledge_store,
    get_summarizer,
)
from tutor_api.errors import (
    AnswerGenerationError,
    EmptyContentError,
    PersistenceError,
    ValidationError,
)
from tutor_api.services.knowledge import (
    AnswerComposer,
    KnowledgeStore,
    answer_question,
    ingest_material,
)
from tutor_api.services.knowledge.summarizer import Summarizer
from tutor_api.services.knowledge.types import fragment_to_record, material_to_record

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level)
    get_knowledge_store()
    logger.info(
        "Knowledge store ready (backend=%s, data_dir=%s)",
        settings.store_backend,
        settings.data_dir,
    )
    yield


app = FastAPI(title="Course Tutor API", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


class MaterialUploadRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    kind: str | None = None
    content: str | None = None
    content_encoded: str | None = Field(default=None, alias="contentEncoded")


class AskRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    question: str


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/materials")
def upload_material(
    request: MaterialUploadRequest,
    store: Annotated[KnowledgeStore, Depends(get_knowledge_store)],
    summarizer: Annotated[Summarizer, Depends(get_summarizer)],
) -> dict[str, Any]:
    settings = get_settings()

    try:
        result = ingest_material(
            store,
            summarizer,
            name=request.name,
            kind=request.kind,
            content=request.content,
            content_encoded=request.content_encoded,
            max_length=settings.segment_max_length,
            terminator=settings.segment_terminator,
            summary_workers=settings.summary_workers,
        )
    except (ValidationError, EmptyContentError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Upload of %r failed", request.name)
        raise HTTPException(status_code=500, detail="upload failed") from exc

    return {"ok": True, "materialId": result.material_id, "addedChunks": result.fragment_count}


@app.post("/api/ask")
def ask(
    request: AskRequest,
    store: Annotated[KnowledgeStore, Depends(get_knowledge_store)],
    composer: Annotated[AnswerComposer, Depends(get_answer_composer)],
) -> dict[str, Any]:
    settings = get_settings()

    try:
        result = answer_question(
            store,
            composer,
            request.question,
            limit=settings.retrieval_top_k,
            fallback_count=settings.retrieval_fallback_count,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except AnswerGenerationError as exc:
        logger.error("Answer generation failed: %s", exc)
        raise HTTPException(status_code=502, detail="answer generation failed") from exc
    except Exception as exc:
        logger.exception("Question answering failed")
        raise HTTPException(status_code=500, detail="ask failed") from exc

    if result.used_chunks is None:
        return {"answer": result.answer}
    return {"answer": result.answer, "usedChunks": result.used_chunks}


@app.get("/api/state")
def state(
    store: Annotated[KnowledgeStore, Depends(get_knowledge_store)],
) -> dict[str, list[dict[str, object]]]:
    try:
        snapshot = store.list_all()
    except PersistenceError as exc:
        logger.exception("Reading store state failed")
        raise HTTPException(status_code=500, detail="state unavailable") from exc

    return {
        "materials": [material_to_record(material) for material in snapshot.materials],
        "knowledgeBase": [fragment_to_record(fragment) for fragment in snapshot.fragments],
    }


def run() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run("tutor_api.main:app", host=settings.api_host, port=settings.api_port, reload=False)


if __name__ == "__main__":
    run()
