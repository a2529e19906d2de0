import sys
from pathlib import Path

import httpx
import pytest
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from app.database.config import make_engine  # noqa: E402
from app.database.storage import PersistentStorage, SessionStorage  # noqa: E402
from app.llm_service import OpenAIService  # noqa: E402
from app.repository import IssueRepository  # noqa: E402
from app.stores import CredentialStore, IssueStore  # noqa: E402

from .utils import RecordingTransport  # noqa: E402


@pytest.fixture
def persistent_storage(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'storage.db'}")
    yield PersistentStorage(sessionmaker(bind=engine, expire_on_commit=False))
    engine.dispose()


@pytest.fixture
def issue_store(persistent_storage):
    return IssueStore(persistent_storage)


@pytest.fixture
def repository(issue_store):
    return IssueRepository(issue_store, auto_describe=False)


@pytest.fixture
def credentials():
    return CredentialStore(SessionStorage())


@pytest.fixture
def make_llm_service():
    """Build an OpenAIService wired to a RecordingTransport."""

    def _make(**kwargs):
        handler = RecordingTransport(**kwargs)
        service = OpenAIService(transport=httpx.MockTransport(handler))
        return service, handler

    return _make
