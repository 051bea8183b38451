from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from pitch2angels.config import settings
import logging

# Set up logging
logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,   # Auto-reconnect on broken connections
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 10,      # Connection timeout in seconds
        "pool_recycle": 1800,    # Recycle connections after 30 minutes
    }


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_connection() -> bool:
    """Run a trivial query so startup logs show whether the database is reachable."""
    try:
        with engine.connect() as conn:
            now = conn.execute(text("SELECT CURRENT_TIMESTAMP")).scalar()
        logger.info(f"✅ Database connection successful (server time: {now})")
        return True
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")
        return False


def init_db():
    """Create tables directly from the models (development only, use alembic elsewhere)."""
    from pitch2angels import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
