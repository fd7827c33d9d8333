from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Material:
    id: str
    name: str
    kind: str
    registered_at: datetime


@dataclass(frozen=True)
class FragmentDraft:
    material_id: str
    source_name: str
    position: int
    raw_text: str
    digest: str


@dataclass(frozen=True)
class Fragment:
    id: int
    material_id: str
    source_name: str
    position: int
    raw_text: str
    digest: str


@dataclass(frozen=True)
class StoreSnapshot:
    materials: list[Material]
    fragments: list[Fragment]


@dataclass(frozen=True)
class IngestionResult:
    material_id: str
    fragment_count: int


@dataclass(frozen=True)
class ComposedAnswer:
    answer: str
    used_chunks: int
    model: str


@dataclass(frozen=True)
class QuestionAnswer:
    answer: str
    used_chunks: int | None


def material_to_record(material: Material) -> dict[str, object]:
    return {
        "id": material.id,
        "name": material.name,
        "kind": material.kind,
        "registeredAt": material.registered_at.isoformat(),
    }


def fragment_to_record(fragment: Fragment) -> dict[str, object]:
    return {
        "id": fragment.id,
        "materialId": fragment.material_id,
        "sourceName": fragment.source_name,
        "position": fragment.position,
        "rawText": fragment.raw_text,
        "digest": fragment.digest,
    }


def material_from_record(record: dict[str, object]) -> Material | None:
    material_id = record.get("id")
    name = record.get("name")
    kind = record.get("kind")
    registered_at = record.get("registeredAt")
    if (
        not isinstance(material_id, str)
        or not isinstance(name, str)
        or not isinstance(kind, str)
        or not isinstance(registered_at, str)
    ):
        return None
    try:
        parsed_at = datetime.fromisoformat(registered_at)
    except ValueError:
        return None
    return Material(id=material_id, name=name, kind=kind, registered_at=parsed_at)


def fragment_from_record(record: dict[str, object]) -> Fragment | None:
    fragment_id = record.get("id")
    material_id = record.get("materialId")
    source_name = record.get("sourceName")
    position = record.get("position")
    raw_text = record.get("rawText")
    digest = record.get("digest")
    if (
        not isinstance(fragment_id, int)
        or isinstance(fragment_id, bool)
        or not isinstance(material_id, str)
        or not isinstance(source_name, str)
        or not isinstance(position, int)
        or not isinstance(raw_text, str)
        or not isinstance(digest, str)
    ):
        return None
    return Fragment(
        id=fragment_id,
        material_id=material_id,
        source_name=source_name,
        position=position,
        raw_text=raw_text,
        digest=digest,
    )
