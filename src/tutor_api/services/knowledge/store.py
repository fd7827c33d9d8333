from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from pathlib import Path
from typing import Protocol, Sequence
import uuid

from tutor_api.errors import PersistenceError
from tutor_api.services.knowledge.types import (
    Fragment,
    FragmentDraft,
    Material,
    StoreSnapshot,
    fragment_from_record,
    fragment_to_record,
    material_from_record,
    material_to_record,
)

logger = logging.getLogger(__name__)

MATERIALS_FILE = "materials.json"
FRAGMENTS_FILE = "knowledge_base.json"
SEQUENCE_FILE = "fragment_sequence.json"


class KnowledgeStore(Protocol):
    """Append-only repository of materials and their fragments.

    Fragment ids are assigned by the store and are strictly increasing in the
    order drafts are added. Store order is ascending fragment id.
    """

    def add_material(self, *, name: str, kind: str) -> Material: ...

    def add_fragments(self, drafts: Sequence[FragmentDraft]) -> list[Fragment]: ...

    def list_materials(self) -> list[Material]: ...

    def list_fragments(self) -> list[Fragment]: ...

    def list_all(self) -> StoreSnapshot: ...


def new_material_id() -> str:
    return uuid.uuid4().hex


def _read_records(path: Path) -> list[dict[str, object]]:
    if not path.exists():
        return []
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Unreadable store file %s, treating as empty", path, exc_info=True)
        return []
    if not isinstance(payload, list):
        logger.warning("Store file %s does not hold a JSON array, treating as empty", path)
        return []
    return [record for record in payload if isinstance(record, dict)]


def _write_records(path: Path, records: list[dict[str, object]]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(records, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
    except OSError as exc:
        raise PersistenceError(f"Failed to write {path}: {exc}") from exc


def _read_sequence(path: Path) -> int:
    if not path.exists():
        return 0
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Unreadable sequence file %s, ignoring it", path, exc_info=True)
        return 0
    value = payload.get("lastFragmentId") if isinstance(payload, dict) else None
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


def _write_sequence(path: Path, last_id: int) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"lastFragmentId": last_id}), encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Failed to write {path}: {exc}") from exc


class JsonFileKnowledgeStore:
    """Two JSON array files, each rewritten in full on every mutation.

    Nothing is cached between calls: every read and every mutation starts
    from the files on disk, so records written by another store on the same
    directory (the ingest CLI, a second server) are seen and kept. The highest
    fragment id ever issued is recorded in a small sequence file, so ids are
    not reused after records are removed from the end of the array. There is
    no locking, and truly concurrent writers can still lose updates.
    """

    def __init__(self, data_dir: Path) -> None:
        self._materials_path = data_dir / MATERIALS_FILE
        self._fragments_path = data_dir / FRAGMENTS_FILE
        self._sequence_path = data_dir / SEQUENCE_FILE

    @property
    def materials_path(self) -> Path:
        return self._materials_path

    @property
    def fragments_path(self) -> Path:
        return self._fragments_path

    @property
    def sequence_path(self) -> Path:
        return self._sequence_path

    def prepare(self) -> None:
        for path in (self._materials_path, self._fragments_path):
            if not path.exists():
                _write_records(path, [])

    def add_material(self, *, name: str, kind: str) -> Material:
        material = Material(
            id=new_material_id(),
            name=name,
            kind=kind,
            registered_at=datetime.now(timezone.utc),
        )
        materials = [*self._load_materials(), material]
        _write_records(self._materials_path, [material_to_record(item) for item in materials])
        return material

    def add_fragments(self, drafts: Sequence[FragmentDraft]) -> list[Fragment]:
        if not drafts:
            return []

        existing = self._load_fragments()
        highest = max((fragment.id for fragment in existing), default=0)
        next_id = max(highest, _read_sequence(self._sequence_path)) + 1

        added = [
            Fragment(
                id=next_id + offset,
                material_id=draft.material_id,
                source_name=draft.source_name,
                position=draft.position,
                raw_text=draft.raw_text,
                digest=draft.digest,
            )
            for offset, draft in enumerate(drafts)
        ]

        # sequence first: a failed array write may skip ids but never reuses them
        _write_sequence(self._sequence_path, added[-1].id)
        fragments = [*existing, *added]
        _write_records(self._fragments_path, [fragment_to_record(item) for item in fragments])
        return added

    def list_materials(self) -> list[Material]:
        return self._load_materials()

    def list_fragments(self) -> list[Fragment]:
        return self._load_fragments()

    def list_all(self) -> StoreSnapshot:
        return StoreSnapshot(materials=self.list_materials(), fragments=self.list_fragments())

    def _load_materials(self) -> list[Material]:
        records = _read_records(self._materials_path)
        return [
            material
            for material in (material_from_record(record) for record in records)
            if material is not None
        ]

    def _load_fragments(self) -> list[Fragment]:
        records = _read_records(self._fragments_path)
        fragments = [
            fragment
            for fragment in (fragment_from_record(record) for record in records)
            if fragment is not None
        ]
        fragments.sort(key=lambda fragment: fragment.id)
        return fragments
