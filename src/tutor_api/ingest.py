from __future__ import annotations

import argparse
from pathlib import Path
import sys

from tutor_api.config import configure_logging, get_settings
from tutor_api.dependencies import get_knowledge_store, get_llm_client
from tutor_api.errors import TutorError
from tutor_api.services.knowledge.ingest import ingest_material
from tutor_api.services.knowledge.loader import collect_files, load_document
from tutor_api.services.knowledge.summarizer import CompletionSummarizer, Summarizer


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="tutor-ingest",
        description="Ingest local course material into the knowledge store",
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Files or directories containing .txt/.md/.pdf documents",
    )
    parser.add_argument(
        "--kind",
        choices=["auto", "text", "pdf"],
        default="auto",
        help="Document kind; auto picks pdf for .pdf files and text otherwise",
    )
    parser.add_argument(
        "--max-length",
        type=_positive_int,
        default=settings.segment_max_length,
        help="Segment bound in characters",
    )
    return parser


def ingest_paths(
    paths: list[Path],
    *,
    summarizer: Summarizer,
    kind: str = "auto",
    max_length: int | None = None,
) -> int:
    """Ingest every file under ``paths`` and return the number of failures."""
    settings = get_settings()
    store = get_knowledge_store()
    failures = 0

    for path in collect_files(paths):
        try:
            document = load_document(path, kind=kind)
            result = ingest_material(
                store,
                summarizer,
                name=document.name,
                kind=document.kind,
                content=document.content,
                content_encoded=document.content_encoded,
                max_length=settings.segment_max_length if max_length is None else max_length,
                terminator=settings.segment_terminator,
                summary_workers=settings.summary_workers,
            )
        except (OSError, UnicodeDecodeError, TutorError) as exc:
            failures += 1
            print(f"[tutor-ingest] failed {path}: {exc}", file=sys.stderr, flush=True)
            continue

        print(
            "[tutor-ingest] completed "
            f"file={path} "
            f"material_id={result.material_id} "
            f"fragments={result.fragment_count}",
            flush=True,
        )

    return failures


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()
    configure_logging(get_settings().log_level)

    try:
        failures = ingest_paths(
            [Path(value) for value in args.paths],
            summarizer=CompletionSummarizer(get_llm_client()),
            kind=args.kind,
            max_length=args.max_length,
        )
    except Exception as exc:
        print(f"[tutor-ingest] failed: {exc}", file=sys.stderr, flush=True)
        raise SystemExit(1) from exc

    if failures:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
