from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tutor_api.db import Base
from tutor_api.errors import PersistenceError
from tutor_api.models import FragmentRecord, MaterialRecord
from tutor_api.services.knowledge.store import new_material_id
from tutor_api.services.knowledge.types import Fragment, FragmentDraft, Material, StoreSnapshot


def _to_material(record: MaterialRecord) -> Material:
    registered_at = record.registered_at
    # sqlite drops tzinfo on the way back
    if registered_at.tzinfo is None:
        registered_at = registered_at.replace(tzinfo=timezone.utc)
    return Material(
        id=record.id,
        name=record.name,
        kind=record.kind,
        registered_at=registered_at,
    )


def _to_fragment(record: FragmentRecord) -> Fragment:
    return Fragment(
        id=record.id,
        material_id=record.material_id,
        source_name=record.source_name,
        position=record.position,
        raw_text=record.raw_text,
        digest=record.digest,
    )


class SqlKnowledgeStore:
    """Knowledge store backed by SQLAlchemy tables; one transaction per mutation."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def prepare(self) -> None:
        try:
            Base.metadata.create_all(bind=self._engine)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to create schema: {exc}") from exc

    def add_material(self, *, name: str, kind: str) -> Material:
        record = MaterialRecord(
            id=new_material_id(),
            name=name,
            kind=kind,
            registered_at=datetime.now(timezone.utc),
        )
        try:
            with Session(self._engine, expire_on_commit=False) as session:
                session.add(record)
                session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to register material: {exc}") from exc
        return _to_material(record)

    def add_fragments(self, drafts: Sequence[FragmentDraft]) -> list[Fragment]:
        if not drafts:
            return []

        records = [
            FragmentRecord(
                material_id=draft.material_id,
                source_name=draft.source_name,
                position=draft.position,
                raw_text=draft.raw_text,
                digest=draft.digest,
            )
            for draft in drafts
        ]
        try:
            with Session(self._engine, expire_on_commit=False) as session:
                # flush one at a time so ids follow draft order
                for record in records:
                    session.add(record)
                    session.flush()
                session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to append fragments: {exc}") from exc
        return [_to_fragment(record) for record in records]

    def list_materials(self) -> list[Material]:
        try:
            with Session(self._engine) as session:
                records = session.scalars(
                    select(MaterialRecord).order_by(
                        MaterialRecord.registered_at.asc(), MaterialRecord.id.asc()
                    )
                ).all()
                return [_to_material(record) for record in records]
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to read materials: {exc}") from exc

    def list_fragments(self) -> list[Fragment]:
        try:
            with Session(self._engine) as session:
                records = session.scalars(
                    select(FragmentRecord).order_by(FragmentRecord.id.asc())
                ).all()
                return [_to_fragment(record) for record in records]
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to read fragments: {exc}") from exc

    def list_all(self) -> StoreSnapshot:
        return StoreSnapshot(materials=self.list_materials(), fragments=self.list_fragments())
