# path: backend/resumeforge/db/base.py
# Purpose: SQLAlchemy engine, session factory, and declarative base. Single source of DB truth.
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool
from resumeforge.core.config import settings


class Base(DeclarativeBase):
    pass


_engine_kwargs = {"pool_pre_ping": True}  # proactively validate connections
if settings.DATABASE_URL.startswith("sqlite"):
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
    if settings.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        # one shared in-memory database across threads
        _engine_kwargs["poolclass"] = StaticPool

engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    """Yield a database session; close it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
