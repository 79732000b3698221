# File: scribe/core/database/connection.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from scribe.core.config.settings import settings

# check_same_thread=False is needed only for SQLite (Test Mode)
connect_args = {"check_same_thread": False} if "sqlite" in settings.DATABASE_URL else {}

engine = create_engine(
    settings.DATABASE_URL,
    echo=False,
    pool_pre_ping=True,
    connect_args=connect_args
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency for obtaining a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Creates every registered table. Feature models are imported so they attach to Base."""
    from scribe.core.database.base import Base
    import scribe.features.engines.data.sql_models  # noqa: F401
    import scribe.features.transcription.data.sql_models  # noqa: F401
    import scribe.features.correction.data.sql_models  # noqa: F401

    Base.metadata.create_all(bind=engine)
