from fastapi import APIRouter, status, Depends

from app.database.storage import SessionRegistry
from app.schemas import CredentialStatus, CredentialUpdate
from app.dependencies import get_credential_store, get_session_id, get_session_registry
from app.stores import CredentialStore

router = APIRouter(prefix="/api/v1/session", tags=["session"])


@router.get("/credential", response_model=CredentialStatus)
async def credential_status(credentials: CredentialStore = Depends(get_credential_store)):
    """Report whether this session has an API key. The key itself is never returned."""
    return CredentialStatus(configured=credentials.configured)


@router.put("/credential", response_model=CredentialStatus, status_code=status.HTTP_200_OK)
async def save_credential(
    payload: CredentialUpdate,
    credentials: CredentialStore = Depends(get_credential_store),
):
    """Save an API key for this session; a blank key clears it"""
    credentials.set_credential(payload.api_key)
    return CredentialStatus(configured=credentials.configured)


@router.delete("/credential", status_code=status.HTTP_204_NO_CONTENT)
async def clear_credential(
    session_id: str = Depends(get_session_id),
    credentials: CredentialStore = Depends(get_credential_store),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Remove the API key and end this session's storage"""
    credentials.clear_credential()
    registry.end(session_id)
