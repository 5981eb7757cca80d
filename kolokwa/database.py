"""
Database connection and session.

Schema source of truth: kolokwa.models. On startup, Base.metadata.create_all(bind=engine)
creates all tables from the current models. For a new (empty) database no scripts need
to be run; scripts/create_tables.py only adds tables/columns to an existing database.

When DATABASE_URL is empty the store is reported as unavailable: no engine is built and
every request that needs a session gets a 503 instead of failing at import time.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from kolokwa.config import get_settings
from kolokwa.exceptions import ServiceUnavailable

settings = get_settings()
Base = declarative_base()


def build_engine(database_url: str):
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


engine = build_engine(settings.database_url) if settings.database_configured else None
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    if engine is None:
        raise ServiceUnavailable("Database not configured")
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
