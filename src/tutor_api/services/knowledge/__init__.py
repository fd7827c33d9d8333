from tutor_api.services.knowledge.composer import AnswerComposer
from tutor_api.services.knowledge.ingest import ingest_material
from tutor_api.services.knowledge.qa import EMPTY_STORE_MESSAGE, answer_question
from tutor_api.services.knowledge.retriever import retrieve
from tutor_api.services.knowledge.segmenter import segment
from tutor_api.services.knowledge.store import JsonFileKnowledgeStore, KnowledgeStore
from tutor_api.services.knowledge.summarizer import CompletionSummarizer
from tutor_api.services.knowledge.types import Fragment, IngestionResult, Material, QuestionAnswer

__all__ = [
    "EMPTY_STORE_MESSAGE",
    "AnswerComposer",
    "CompletionSummarizer",
    "Fragment",
    "IngestionResult",
    "JsonFileKnowledgeStore",
    "KnowledgeStore",
    "Material",
    "QuestionAnswer",
    "answer_question",
    "ingest_material",
    "retrieve",
    "segment",
]
