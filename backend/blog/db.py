import structlog
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from .config import settings

logger = structlog.get_logger(__name__)

# Configure database connection based on database type
if settings.is_sqlite:
    connect_args = {"check_same_thread": False}
    extra = {}
    if settings.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        # every thread must see the same in-memory database
        extra["poolclass"] = StaticPool
    engine = create_engine(
        settings.DATABASE_URL,
        future=True,
        echo=settings.DEBUG,
        connect_args=connect_args,
        **extra,
    )
else:
    # PostgreSQL with connection pooling
    engine = create_engine(
        settings.DATABASE_URL,
        future=True,
        echo=settings.DEBUG,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=3600,  # Recycle connections after 1 hour
    )

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
Base = declarative_base()

_initialized = False


def init_db() -> bool:
    """Create the schema once per process. Returns True on the first call only."""
    global _initialized
    if _initialized:
        return False
    # models must be registered on Base before create_all
    from . import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    _initialized = True
    logger.info("Database initialized", url=engine.url.render_as_string(hide_password=True))
    return True


def is_initialized() -> bool:
    return _initialized


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
