"""In-memory issue collection that persists and notifies on every change."""

import logging
from typing import Callable, Optional

from app.errors import IssueNotFound, IssueValidationError
from app.schemas import Issue, IssueCreate, IssueSeverity, IssueStatus
from app.stores import IssueStore
from app.summarizer import first_sentence, summarize_locally

logger = logging.getLogger(__name__)

ChangeListener = Callable[[list[Issue]], None]


class IssueRepository:
    """
    Owns the issue sequence loaded from an IssueStore.

    Every mutating method rewrites the whole store and then calls the
    subscribed listeners with a snapshot of the collection.
    """

    def __init__(self, store: IssueStore, auto_describe: bool = True):
        self.store = store
        self.auto_describe = auto_describe
        self._issues: list[Issue] = store.load_all()
        self._listeners: list[ChangeListener] = []

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def list_issues(self) -> list[Issue]:
        return list(self._issues)

    def find(self, issue_id: str) -> Optional[Issue]:
        return next((i for i in self._issues if i.id == issue_id), None)

    def get_issue(self, issue_id: str) -> Issue:
        issue = self.find(issue_id)
        if issue is None:
            raise IssueNotFound(issue_id)
        return issue

    def create_issue(self, fields: IssueCreate) -> Issue:
        title = fields.title.strip()
        details = fields.details.strip()
        if not title and not details:
            raise IssueValidationError("Please provide a short title or some details.")

        issue = Issue(
            title=title or first_sentence(details).strip(),
            details=details,
            severity=fields.severity.strip() or IssueSeverity.MEDIUM.value,
            contact=fields.contact.strip(),
        )
        if self.auto_describe:
            issue.description = summarize_locally(issue)

        self._commit(self._issues + [issue])
        logger.info("Issue created", extra={"issue_id": issue.id})
        return issue

    def set_status(self, issue_id: str, status: IssueStatus) -> Issue:
        return self._update(issue_id, status=status)

    def toggle_status(self, issue_id: str) -> Issue:
        issue = self.get_issue(issue_id)
        toggled = IssueStatus.OPEN if issue.status == IssueStatus.RESOLVED else IssueStatus.RESOLVED
        return self.set_status(issue_id, toggled)

    def delete_issue(self, issue_id: str) -> bool:
        """Remove an issue. Returns False, without writing, if the id is unknown."""
        remaining = [i for i in self._issues if i.id != issue_id]
        if len(remaining) == len(self._issues):
            return False

        self._commit(remaining)
        logger.info("Issue deleted", extra={"issue_id": issue_id})
        return True

    def set_description(self, issue_id: str, description: str) -> Issue:
        return self._update(issue_id, description=description)

    def _update(self, issue_id: str, **changes) -> Issue:
        updated = self.get_issue(issue_id).model_copy(update=changes)
        self._commit([updated if i.id == issue_id else i for i in self._issues])
        return updated

    def _commit(self, issues: list[Issue]) -> None:
        """Persist a new collection; memory only changes once the write succeeded."""
        self.store.save_all(issues)
        self._issues = issues
        snapshot = self.list_issues()
        for listener in list(self._listeners):
            listener(snapshot)
