from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from online_forms.config import settings
import logging

# Set up logging
logger = logging.getLogger(__name__)

# For Neon.tech, ensure SSL is configured
if settings.DATABASE_URL and "neon.tech" in settings.DATABASE_URL:
    if "sslmode" not in settings.DATABASE_URL:
        if "?" in settings.DATABASE_URL:
            settings.DATABASE_URL += "&sslmode=require"
        else:
            settings.DATABASE_URL += "?sslmode=require"
        logger.info("Added sslmode=require to Neon database URL")


def _engine_options(url: str) -> dict:
    # SQLite (local dev and tests) rejects the pool sizing arguments
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Auto-reconnect on broken connections
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
    }


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create any missing tables. Alembic owns schema changes in production."""
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database tables ensured")


# ✅ This line ensures models are registered before Alembic autogenerate
from online_forms import models  # noqa: E402,F401
