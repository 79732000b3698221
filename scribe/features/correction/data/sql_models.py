# File: scribe/features/correction/data/sql_models.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime
from sqlalchemy.dialects.postgresql import UUID
from scribe.core.database.base import Base


def utc_now():
    return datetime.now(timezone.utc)


class DictionaryEntryModel(Base):
    """
    Shared correction rule, not scoped to any transcript.
    correct_text doubles as boost vocabulary for recognition.
    """
    __tablename__ = "transcript_dictionary"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    wrong_text = Column(String, nullable=False, unique=True, index=True)
    correct_text = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
