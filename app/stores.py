"""Durable issue store and session-scoped credential store."""

import json
import logging
from typing import Iterable, Optional, Union

from pydantic import ValidationError

from app.database.storage import KeyValueStorage, SessionStorage, SessionView
from app.errors import StorageCorrupt
from app.schemas import Issue

logger = logging.getLogger(__name__)

ISSUES_KEY = "issue_tracker.issues.v1"
CREDENTIAL_KEY = "issue_tracker.openai_key"


class IssueStore:
    """Persists the full issue sequence as one JSON array under a fixed key."""

    def __init__(self, storage: KeyValueStorage, key: str = ISSUES_KEY):
        self.storage = storage
        self.key = key

    def load_all(self) -> list[Issue]:
        """
        Load every stored issue in insertion order.

        A missing key yields an empty list. So does a corrupt payload: the
        error is logged and the collection starts over empty.
        """
        raw = self.storage.get_item(self.key)
        if not raw:
            return []

        try:
            return self._decode(raw)
        except StorageCorrupt as e:
            logger.error(f"Failed to load issues, starting empty: {str(e)}", extra={"key": self.key})
            return []

    def save_all(self, issues: Iterable[Issue]) -> None:
        """Serialize the whole sequence and overwrite the key in a single write."""
        payload = json.dumps(
            [issue.model_dump(mode="json", by_alias=True) for issue in issues]
        )
        self.storage.set_item(self.key, payload)

    @staticmethod
    def _decode(raw: str) -> list[Issue]:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageCorrupt(f"Invalid JSON in issue store: {str(e)}") from e

        if not isinstance(data, list):
            raise StorageCorrupt(f"Expected a JSON array, got {type(data).__name__}")

        try:
            return [Issue.model_validate(item) for item in data]
        except ValidationError as e:
            raise StorageCorrupt(f"Invalid issue record: {str(e)}") from e


class CredentialStore:
    """Holds the remote summarizer API key for one session only.

    Backed exclusively by session-scoped storage so the key can never land in the
    persistent storage. The value itself is never logged.
    """

    def __init__(self, storage: Union[SessionStorage, SessionView], key: str = CREDENTIAL_KEY):
        self.storage = storage
        self.key = key

    def set_credential(self, value: Optional[str]) -> None:
        value = (value or "").strip()
        if not value:
            self.clear_credential()
            return
        self.storage.set_item(self.key, value)
        logger.info("API key saved to session")

    def get_credential(self) -> Optional[str]:
        return self.storage.get_item(self.key) or None

    def clear_credential(self) -> None:
        self.storage.remove_item(self.key)
        logger.info("API key cleared from session")

    @property
    def configured(self) -> bool:
        return self.get_credential() is not None
