from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
import uuid


class IssueStatus(str, Enum):
    OPEN = "open"
    RESOLVED = "resolved"


class IssueSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SummaryMode(str, Enum):
    """Which summarizer produces an issue's description."""

    LOCAL = "local"
    REMOTE = "remote"


def _new_id() -> str:
    return str(uuid.uuid4())


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Issue(BaseModel):
    """A persisted issue record.

    Serialized with the field names of the stored JSON array, so
    ``created_at`` round-trips as ``createdAt``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    title: str = ""
    details: str = ""
    # Open string: unknown severities are kept as entered
    severity: str = IssueSeverity.MEDIUM.value
    contact: str = ""
    created_at: str = Field(default_factory=_now_iso, alias="createdAt")
    status: IssueStatus = IssueStatus.OPEN
    description: Optional[str] = None


class IssueCreate(BaseModel):
    title: str = ""
    details: str = ""
    severity: str = IssueSeverity.MEDIUM.value
    contact: str = ""


class IssueStatusUpdate(BaseModel):
    status: IssueStatus


class DescribeRequest(BaseModel):
    mode: SummaryMode = SummaryMode.LOCAL


class IssueResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    details: str
    severity: str
    contact: str
    created_at: str = Field(alias="createdAt")
    status: IssueStatus
    description: Optional[str] = None
    generating: bool = False


class CredentialUpdate(BaseModel):
    api_key: str = ""


class CredentialStatus(BaseModel):
    configured: bool
