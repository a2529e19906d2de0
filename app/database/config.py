import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

# Get database URL from environment or use a local SQLite file
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./issue_tracker.db")


def make_engine(url: str = DATABASE_URL):
    """Create a synchronous engine; SQLite connections may be shared across threads."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


# Synchronous engine backing the persistent key-value storage
engine = make_engine()

# Session factory used by PersistentStorage
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)

# Base class for models
class Base(DeclarativeBase):
    pass
