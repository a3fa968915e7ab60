# SQLAlchemy database setup.
#
# - Local development: SQLite file (xeur.db) when DATABASE_URL is not set.
# - Production/Railway: PostgreSQL from DATABASE_URL.
#
# "sqlite://" (in-memory) is accepted as well and shares one connection
# across threads so the whole process sees the same database.

import logging
import os
from pathlib import Path
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# .env lives at the project root, next to the xeur_backend package
backend_dir = Path(__file__).parent.parent
env_path = backend_dir / ".env"
load_dotenv(dotenv_path=env_path)

env_database_url = os.getenv("DATABASE_URL", "").strip()

# Railway still hands out postgres:// URLs, SQLAlchemy only knows postgresql://
if env_database_url.startswith("postgres://"):
    env_database_url = env_database_url.replace("postgres://", "postgresql://", 1)

DATABASE_URL = env_database_url or "sqlite:///./xeur.db"
IS_POSTGRES = DATABASE_URL.startswith("postgresql")

if IS_POSTGRES:
    logger.info("[DB] Using external PostgreSQL (DATABASE_URL)")
else:
    logger.info(f"[DB] Using SQLite: {DATABASE_URL}")


def build_engine(url: str):
    """Create an engine with the connect args each backend needs."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True, pool_size=10, max_overflow=20)


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """
    Dependency that injects a DB session into FastAPI endpoints.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
