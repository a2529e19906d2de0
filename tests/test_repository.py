"""Tests for IssueRepository intake, mutation, and change notification."""

import pytest

from app.errors import IssueNotFound, IssueValidationError
from app.repository import IssueRepository
from app.schemas import IssueCreate, IssueStatus


def _create(repository, title="Search broken", details="Search returns nothing.", **kwargs):
    return repository.create_issue(IssueCreate(title=title, details=details, **kwargs))


class TestCreateIssue:
    @pytest.mark.parametrize("title,details", [("", ""), ("   ", "\n\t ")])
    def test_rejects_blank_title_and_details(self, repository, title, details):
        with pytest.raises(IssueValidationError):
            repository.create_issue(IssueCreate(title=title, details=details))
        assert repository.list_issues() == []

    def test_creates_open_issue_with_unique_id(self, repository):
        first = _create(repository)
        second = _create(repository)

        assert first.status == IssueStatus.OPEN
        assert first.id != second.id
        assert first.created_at

    def test_title_only_is_accepted(self, repository):
        issue = _create(repository, title="Logo blurry", details="")
        assert issue.title == "Logo blurry"
        assert issue.details == ""

    def test_title_derived_from_details(self, repository):
        issue = _create(repository, title="", details="Upload fails. Tried twice.")
        assert issue.title == "Upload fails"

    def test_fields_are_stripped_and_severity_defaults(self, repository):
        issue = _create(repository, title="  Spaces  ", details=" body ", severity=" ", contact=" me@x.io ")
        assert issue.title == "Spaces"
        assert issue.details == "body"
        assert issue.severity == "medium"
        assert issue.contact == "me@x.io"

    def test_no_description_without_auto_describe(self, repository):
        assert _create(repository).description is None

    def test_auto_describe_attaches_local_summary(self, issue_store):
        repository = IssueRepository(issue_store, auto_describe=True)
        issue = _create(repository, title="", details="Page crashes on load.", severity="high")
        assert issue.description.startswith("Page crashes on load — Severity: high")

    def test_persists_immediately(self, repository, issue_store):
        issue = _create(repository)
        assert [i.id for i in issue_store.load_all()] == [issue.id]


class TestStatus:
    def test_toggle_twice_restores_status(self, repository):
        issue = _create(repository)
        repository.toggle_status(issue.id)
        assert repository.get_issue(issue.id).status == IssueStatus.RESOLVED
        repository.toggle_status(issue.id)
        assert repository.get_issue(issue.id).status == IssueStatus.OPEN

    def test_set_status_persists(self, repository, issue_store):
        issue = _create(repository)
        repository.set_status(issue.id, IssueStatus.RESOLVED)
        assert issue_store.load_all()[0].status == IssueStatus.RESOLVED

    def test_unknown_id_raises(self, repository):
        with pytest.raises(IssueNotFound):
            repository.toggle_status("missing")


class TestDelete:
    def test_removes_only_that_issue(self, repository, issue_store):
        a = _create(repository, title="a")
        b = _create(repository, title="b")
        c = _create(repository, title="c")

        assert repository.delete_issue(b.id) is True
        assert [i.id for i in repository.list_issues()] == [a.id, c.id]
        assert [i.id for i in issue_store.load_all()] == [a.id, c.id]

    def test_unknown_id_is_noop(self, repository):
        _create(repository)
        calls = []
        repository.subscribe(calls.append)

        assert repository.delete_issue("missing") is False
        assert len(repository.list_issues()) == 1
        assert calls == []


class TestPersistenceAndNotification:
    def test_reloads_from_store(self, repository, issue_store):
        issue = _create(repository)
        repository.set_description(issue.id, "described")

        reloaded = IssueRepository(issue_store)
        (loaded,) = reloaded.list_issues()
        assert loaded.id == issue.id
        assert loaded.description == "described"
        assert loaded.created_at == issue.created_at

    def test_listeners_run_after_persist(self, repository, issue_store):
        seen = []
        repository.subscribe(lambda issues: seen.append([i.id for i in issue_store.load_all()]))

        issue = _create(repository)
        assert seen == [[issue.id]]

    def test_unsubscribe(self, repository):
        calls = []
        unsubscribe = repository.subscribe(calls.append)
        unsubscribe()
        _create(repository)
        assert calls == []

    def test_list_returns_a_copy(self, repository):
        _create(repository)
        repository.list_issues().clear()
        assert len(repository.list_issues()) == 1


class _FailingWrites:
    """Wraps an IssueStore and fails every save once armed."""

    def __init__(self, store):
        self.store = store
        self.fail = False

    def load_all(self):
        return self.store.load_all()

    def save_all(self, issues):
        if self.fail:
            raise RuntimeError("disk full")
        self.store.save_all(issues)


class TestFailedWrites:
    @pytest.fixture
    def failing(self, issue_store):
        return _FailingWrites(issue_store)

    @pytest.fixture
    def guarded(self, failing):
        return IssueRepository(failing, auto_describe=False)

    def test_failed_create_leaves_no_phantom_issue(self, guarded, failing, issue_store):
        kept = _create(guarded, title="kept")
        failing.fail = True

        with pytest.raises(RuntimeError):
            _create(guarded, title="lost")
        assert [i.id for i in guarded.list_issues()] == [kept.id]

        failing.fail = False
        guarded.toggle_status(kept.id)
        assert [i.title for i in issue_store.load_all()] == ["kept"]

    def test_failed_update_keeps_previous_state(self, guarded, failing):
        issue = _create(guarded)
        failing.fail = True

        with pytest.raises(RuntimeError):
            guarded.set_status(issue.id, IssueStatus.RESOLVED)
        with pytest.raises(RuntimeError):
            guarded.set_description(issue.id, "never stored")

        current = guarded.get_issue(issue.id)
        assert current.status == IssueStatus.OPEN
        assert current.description is None

    def test_failed_delete_keeps_issue(self, guarded, failing):
        issue = _create(guarded)
        failing.fail = True

        with pytest.raises(RuntimeError):
            guarded.delete_issue(issue.id)
        assert guarded.find(issue.id) is not None

    def test_no_notification_when_write_fails(self, guarded, failing):
        calls = []
        guarded.subscribe(calls.append)
        failing.fail = True

        with pytest.raises(RuntimeError):
            _create(guarded)
        assert calls == []
