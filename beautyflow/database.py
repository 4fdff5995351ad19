import logging
import os
import time

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import DATABASE_URL

logger = logging.getLogger(__name__)

ENABLE_QUERY_LOGGING = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
SLOW_QUERY_THRESHOLD = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))


def engine_options(url: str) -> dict:
    """
    Engine keyword arguments for the configured backend.

    The studio runs on a local SQLite file by default; a Postgres URL in
    production gets a bounded connection pool instead.
    """
    if url.startswith("sqlite"):
        # Sessions cross FastAPI's threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
        "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "10")),
        "pool_recycle": int(os.getenv("DB_POOL_RECYCLE", "300")),
    }


try:
    engine = create_engine(DATABASE_URL, echo=False, **engine_options(DATABASE_URL))
    logger.info(f"✅ Database engine created ({DATABASE_URL.split(':', 1)[0]})")
except Exception as e:
    logger.error(f"❌ Failed to create database engine: {e}")
    raise

if ENABLE_QUERY_LOGGING:

    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
        conn.info.setdefault("query_start_time", []).append(time.time())

    @event.listens_for(engine, "after_cursor_execute")
    def after_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
        elapsed = time.time() - conn.info["query_start_time"].pop(-1)
        if elapsed > SLOW_QUERY_THRESHOLD:
            logger.warning(f"🐌 Slow query ({elapsed:.2f}s): {statement[:200]}...")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Request-scoped session; collections are committed by the store on save"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
