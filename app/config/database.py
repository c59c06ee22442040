"""Database configuration and connection setup"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.config.settings import get_settings

settings = get_settings()


def build_engine(database_url: str):
    """Create an engine with pooling suited to the backend"""
    if database_url.startswith("sqlite"):
        # SQLite is used for local runs and tests; it has no server-side pool
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=False,
        )

    connect_args = {}
    if settings.DB_STATEMENT_TIMEOUT_MS > 0:
        # Abandoned availability fetches must not hold a worker past this
        connect_args["options"] = f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"

    return create_engine(
        database_url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        connect_args=connect_args,
        echo=False,
    )


# Engine creation is lazy: no connection is opened until first use
engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    """
    Session factory dependency for work that runs off the request thread.
    Such work opens and closes its own session instead of sharing the
    request-scoped one.
    """
    return SessionLocal


def create_tables(bind=None):
    """Create all database tables that do not exist yet"""
    from app.models import Base

    Base.metadata.create_all(bind=bind or engine)


if __name__ == "__main__":
    create_tables()
    print("✅ Database tables created successfully!")
