"""
Database session management
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from backoffice.core.config import settings

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=False
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_sqlite_schema() -> None:
    """Create all tables directly; local SQLite only, everything else goes through Alembic"""
    if "sqlite" in settings.DATABASE_URL:
        import backoffice.models  # noqa: F401  (registers every table on Base.metadata)
        from backoffice.db.base import Base

        Base.metadata.create_all(bind=engine)
