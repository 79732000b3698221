# File: scribe/features/engines/data/sql_models.py
from datetime import datetime, timezone
from sqlalchemy import Column, String, Float, Integer, Boolean, DateTime, JSON, Enum as SQLEnum
from scribe.core.database.base import Base
from scribe.core.common.enums import EngineKind, EngineStatus


def utc_now():
    return datetime.now(timezone.utc)


class SttEngineModel(Base):
    """
    A registered speech-to-text engine.
    Id is a human slug ('assemblyai') because transcripts and the UI refer to it directly.
    """
    __tablename__ = "stt_engines"

    id = Column(String, primary_key=True)
    display_name = Column(String, nullable=False)
    kind = Column(SQLEnum(EngineKind), nullable=False)
    status = Column(SQLEnum(EngineStatus), default=EngineStatus.INACTIVE, nullable=False)

    # Opaque provider settings (model size, language, speech model...)
    config = Column(JSON, default=dict)
    # Cost / accuracy / formats shown in the engine picker
    profile = Column(JSON, default=dict)

    total_minutes = Column(Float, default=0.0, nullable=False)
    avg_speed = Column(Float, default=0.0, nullable=False)
    jobs_processed = Column(Integer, default=0, nullable=False)

    is_builtin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
