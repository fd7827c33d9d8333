from __future__ import annotations

import base64
from dataclasses import dataclass
from pathlib import Path

TEXT_EXTENSIONS = {".txt", ".md"}
PDF_EXTENSIONS = {".pdf"}
SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS | PDF_EXTENSIONS


@dataclass(frozen=True)
class LocalDocument:
    path: Path
    name: str
    kind: str
    content: str | None
    content_encoded: str | None


def collect_files(paths: list[Path]) -> list[Path]:
    files: list[Path] = []
    for path in paths:
        if not path.exists():
            raise FileNotFoundError(f"Source path not found: {path}")
        if path.is_dir():
            files.extend(
                sorted(
                    item
                    for item in path.rglob("*")
                    if item.is_file() and item.suffix.lower() in SUPPORTED_EXTENSIONS
                )
            )
        else:
            files.append(path)
    return files


def load_document(path: Path, *, kind: str = "auto") -> LocalDocument:
    resolved_kind = kind
    if resolved_kind == "auto":
        resolved_kind = "pdf" if path.suffix.lower() in PDF_EXTENSIONS else "text"

    if resolved_kind == "pdf":
        encoded = base64.b64encode(path.read_bytes()).decode("ascii")
        return LocalDocument(
            path=path, name=path.name, kind="pdf", content=None, content_encoded=encoded
        )

    return LocalDocument(
        path=path,
        name=path.name,
        kind=resolved_kind,
        content=path.read_text(encoding="utf-8"),
        content_encoded=None,
    )
