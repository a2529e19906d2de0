"""Key-value storage areas.

Two scopes mirror what a browser offers a page: ``PersistentStorage`` outlives
the process and is shared by every client, ``SessionStorage`` lives only as
long as one client session. Both expose the same get/set/remove interface so
stores built on top of them do not care which one they were handed.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
import time
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from app.database.config import Base, SessionLocal
from app.database.models import StorageEntry

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """String-to-string storage area."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Overwrite the value under key."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete key. Removing an absent key is a no-op."""


class PersistentStorage(KeyValueStorage):
    """Durable storage backed by the ``storage_entries`` table."""

    def __init__(self, session_factory: sessionmaker[Session] = SessionLocal):
        self._session_factory = session_factory
        Base.metadata.create_all(bind=session_factory.kw["bind"])

    def get_item(self, key: str) -> Optional[str]:
        with self._session_factory() as db:
            entry = db.get(StorageEntry, key)
            return entry.value if entry else None

    def set_item(self, key: str, value: str) -> None:
        with self._session_factory() as db:
            try:
                entry = db.get(StorageEntry, key)
                if entry is None:
                    db.add(StorageEntry(key=key, value=value))
                else:
                    entry.value = value
                db.commit()
            except Exception:
                db.rollback()
                raise

    def remove_item(self, key: str) -> None:
        with self._session_factory() as db:
            entry = db.get(StorageEntry, key)
            if entry is not None:
                db.delete(entry)
                db.commit()


class SessionStorage(KeyValueStorage):
    """In-memory storage scoped to a single client session."""

    def __init__(self):
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    @property
    def is_empty(self) -> bool:
        return not self._items


class SessionRegistry:
    """Issues session ids and holds one SessionStorage per live session.

    Session ids are signed with a per-process secret, so only ids this
    registry handed out are accepted and a restart invalidates all of them.
    Storage for a session is created on the first write and dropped when the
    session ends, empties, or sits idle longer than ``idle_timeout`` seconds.
    Nothing here is ever written to disk.
    """

    def __init__(self, idle_timeout: float = 8 * 60 * 60, secret: Optional[bytes] = None):
        self.idle_timeout = idle_timeout
        self._secret = secret or secrets.token_bytes(32)
        self._sessions: dict[str, SessionStorage] = {}
        self._last_seen: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def _sign(self, token: str) -> str:
        return hmac.new(self._secret, token.encode(), hashlib.sha256).hexdigest()[:32]

    def new_session_id(self) -> str:
        token = secrets.token_urlsafe(16)
        return f"{token}.{self._sign(token)}"

    def is_valid(self, session_id: Optional[str]) -> bool:
        if not session_id or "." not in session_id:
            return False
        token, signature = session_id.rsplit(".", 1)
        return hmac.compare_digest(signature, self._sign(token))

    def lookup(self, session_id: str) -> Optional[SessionStorage]:
        """Return the live storage for a session without creating one."""
        self.sweep()
        storage = self._sessions.get(session_id)
        if storage is not None:
            self._last_seen[session_id] = time.monotonic()
        return storage

    def open(self, session_id: str) -> SessionStorage:
        """Return the storage for a session, creating it if needed."""
        storage = self.lookup(session_id)
        if storage is None:
            storage = SessionStorage()
            self._sessions[session_id] = storage
            self._last_seen[session_id] = time.monotonic()
            logger.debug("Started storage session")
        return storage

    def view(self, session_id: str) -> SessionView:
        return SessionView(self, session_id)

    def end(self, session_id: str) -> None:
        self._last_seen.pop(session_id, None)
        storage = self._sessions.pop(session_id, None)
        if storage is not None:
            storage.clear()
            logger.info("Ended storage session")

    def sweep(self) -> None:
        """End every session idle for longer than the timeout."""
        cutoff = time.monotonic() - self.idle_timeout
        for session_id in [s for s, seen in self._last_seen.items() if seen < cutoff]:
            self.end(session_id)


class SessionView(KeyValueStorage):
    """Session storage that only materializes in the registry once written to."""

    def __init__(self, registry: SessionRegistry, session_id: str):
        self.registry = registry
        self.session_id = session_id

    def get_item(self, key: str) -> Optional[str]:
        storage = self.registry.lookup(self.session_id)
        return storage.get_item(key) if storage is not None else None

    def set_item(self, key: str, value: str) -> None:
        self.registry.open(self.session_id).set_item(key, value)

    def remove_item(self, key: str) -> None:
        storage = self.registry.lookup(self.session_id)
        if storage is None:
            return
        storage.remove_item(key)
        if storage.is_empty:
            self.registry.end(self.session_id)
