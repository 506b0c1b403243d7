from fastapi import HTTPException, status
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from app.core.config import settings
from app.core.logging_config import logger

DATABASE_URL = settings.DATABASE_URL

# The place lookup needs PostGIS; route planning with explicit waypoints does not,
# so a missing DATABASE_URL only disables the lookup endpoints.
if DATABASE_URL:
    engine = create_engine(
        DATABASE_URL,
        pool_pre_ping=True,      # Test connections before using
        pool_size=10,            # Base connection pool size
        max_overflow=20,         # Max connections beyond pool_size
        pool_timeout=30,         # Timeout for getting connection (seconds)
        pool_recycle=3600,       # Recycle connections after 1 hour
        echo=False,              # Set to True for debugging SQL logs
        future=True,
    )
    SessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        future=True,
    )
    logger.info("Database engine configured")
else:
    engine = None
    SessionLocal = None
    logger.warning("DATABASE_URL not set. Place lookup is disabled.")

from sqlalchemy import Column, DateTime, func

class Base(DeclarativeBase):
    pass

class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

def get_db():
    if SessionLocal is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Place lookup is not configured (DATABASE_URL missing)"
        )
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_optional_db():
    """Like get_db, but yields None instead of failing when no database is configured."""
    if SessionLocal is None:
        yield None
        return
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
