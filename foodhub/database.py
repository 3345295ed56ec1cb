"""
Database engine and session factory
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from foodhub.config import settings


def normalize_database_url(url: str) -> str:
    # Managed Postgres hosts hand out postgres://, SQLAlchemy only accepts postgresql://
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # Sessions are used from FastAPI's threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 3600,
    }


database_url = normalize_database_url(settings.DATABASE_URL)
engine = create_engine(database_url, **engine_options(database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Request-scoped session, closed when the response is sent"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
