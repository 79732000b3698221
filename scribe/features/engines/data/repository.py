# File: scribe/features/engines/data/repository.py
from dataclasses import asdict
from typing import List, Optional

from scribe.core.database.connection import SessionLocal
from .sql_models import SttEngineModel
from ..domain.interfaces import IEngineRepository
from ..domain.models import EngineDescriptor, EngineProfile, EngineStats


def _to_domain(row: SttEngineModel) -> EngineDescriptor:
    return EngineDescriptor(
        id=row.id,
        display_name=row.display_name,
        kind=row.kind,
        status=row.status,
        config=dict(row.config or {}),
        profile=EngineProfile(**(row.profile or {})),
        stats=EngineStats(
            total_minutes=row.total_minutes or 0.0,
            avg_speed=row.avg_speed or 0.0,
            jobs_processed=row.jobs_processed or 0
        ),
        is_builtin=bool(row.is_builtin)
    )


class SqlEngineRepo(IEngineRepository):

    def get(self, engine_id: str) -> Optional[EngineDescriptor]:
        with SessionLocal() as db:
            row = db.get(SttEngineModel, engine_id)
            return _to_domain(row) if row else None

    def list_all(self) -> List[EngineDescriptor]:
        with SessionLocal() as db:
            rows = db.query(SttEngineModel).order_by(SttEngineModel.created_at, SttEngineModel.id).all()
            return [_to_domain(r) for r in rows]

    def add(self, descriptor: EngineDescriptor) -> EngineDescriptor:
        with SessionLocal() as db:
            row = SttEngineModel(
                id=descriptor.id,
                display_name=descriptor.display_name,
                kind=descriptor.kind,
                status=descriptor.status,
                config=dict(descriptor.config),
                profile=asdict(descriptor.profile),
                total_minutes=descriptor.stats.total_minutes,
                avg_speed=descriptor.stats.avg_speed,
                jobs_processed=descriptor.stats.jobs_processed,
                is_builtin=descriptor.is_builtin
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return _to_domain(row)

    def save(self, descriptor: EngineDescriptor) -> EngineDescriptor:
        with SessionLocal() as db:
            row = db.get(SttEngineModel, descriptor.id)
            if row is None:
                raise ValueError(f"Engine {descriptor.id} does not exist.")
            row.display_name = descriptor.display_name
            row.status = descriptor.status
            row.config = dict(descriptor.config)
            row.total_minutes = descriptor.stats.total_minutes
            row.avg_speed = descriptor.stats.avg_speed
            row.jobs_processed = descriptor.stats.jobs_processed
            db.commit()
            db.refresh(row)
            return _to_domain(row)

    def apply_usage(self, engine_id: str, audio_seconds: float, wall_seconds: Optional[float]) -> Optional[EngineDescriptor]:
        with SessionLocal() as db:
            # Row lock on Postgres so concurrent completions serialize here
            row = (
                db.query(SttEngineModel)
                .filter(SttEngineModel.id == engine_id)
                .with_for_update()
                .first()
            )
            if row is None:
                return None
            stats = EngineStats(
                total_minutes=row.total_minutes or 0.0,
                avg_speed=row.avg_speed or 0.0,
                jobs_processed=row.jobs_processed or 0
            ).with_job(audio_seconds, wall_seconds)
            row.total_minutes = stats.total_minutes
            row.avg_speed = stats.avg_speed
            row.jobs_processed = stats.jobs_processed
            db.commit()
            db.refresh(row)
            return _to_domain(row)

    def delete(self, engine_id: str) -> bool:
        with SessionLocal() as db:
            row = db.get(SttEngineModel, engine_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True
