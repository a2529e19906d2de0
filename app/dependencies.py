"""Shared application objects and FastAPI dependencies."""

import logging
import os
from typing import Optional

from fastapi import Cookie, Depends, Response

from app.controller import SummarizationController
from app.database.storage import PersistentStorage, SessionRegistry
from app.repository import IssueRepository
from app.stores import CredentialStore, IssueStore

logger = logging.getLogger(__name__)

SESSION_COOKIE = "issue_tracker_session"

_repository_singleton: Optional[IssueRepository] = None
_controller_singleton: Optional[SummarizationController] = None
_registry_singleton: Optional[SessionRegistry] = None


def _auto_describe_enabled() -> bool:
    return os.getenv("AUTO_DESCRIBE", "true").strip().lower() not in ("0", "false", "no", "off")


def get_repository() -> IssueRepository:
    """Single repository for the process, loaded from persistent storage once."""
    global _repository_singleton
    if _repository_singleton is None:
        store = IssueStore(PersistentStorage())
        _repository_singleton = IssueRepository(store, auto_describe=_auto_describe_enabled())
    return _repository_singleton


def get_controller() -> SummarizationController:
    global _controller_singleton
    if _controller_singleton is None:
        _controller_singleton = SummarizationController(get_repository())
    return _controller_singleton


def get_session_registry() -> SessionRegistry:
    global _registry_singleton
    if _registry_singleton is None:
        _registry_singleton = SessionRegistry()
    return _registry_singleton


def get_session_id(
    response: Response,
    session_id: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    registry: SessionRegistry = Depends(get_session_registry),
) -> str:
    """
    Return the caller's session id.

    A missing cookie, or one this process never issued, gets a fresh id.
    Issuing an id allocates nothing; storage appears only once a key is saved.
    """
    if not registry.is_valid(session_id):
        session_id = registry.new_session_id()
        # No max-age: the cookie, and with it the credential, ends with the browser session
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="strict")
    return session_id


def get_credential_store(
    session_id: str = Depends(get_session_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> CredentialStore:
    return CredentialStore(registry.view(session_id))
