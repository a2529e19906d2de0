"""Database configuration, models, and key-value storage areas."""

from app.database.config import engine, Base, SessionLocal
from app.database import models
from app.database.storage import (
    KeyValueStorage,
    PersistentStorage,
    SessionRegistry,
    SessionStorage,
    SessionView,
)

__all__ = [
    "engine",
    "Base",
    "SessionLocal",
    "models",
    "KeyValueStorage",
    "PersistentStorage",
    "SessionRegistry",
    "SessionStorage",
    "SessionView",
]
