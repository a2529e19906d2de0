"""Domain errors raised by the issue repository, stores, and controller."""


class StorageCorrupt(Exception):
    """Persisted issue payload could not be decoded."""

    pass


class IssueValidationError(ValueError):
    """Raised when an issue is submitted with neither a title nor details."""

    pass


class IssueNotFound(LookupError):
    """Raised when an operation references an unknown issue id."""

    def __init__(self, issue_id: str):
        super().__init__(f"Issue {issue_id} not found")
        self.issue_id = issue_id


class GenerationInProgress(RuntimeError):
    """Raised when a description is already being generated for an issue."""

    def __init__(self, issue_id: str):
        super().__init__(f"Description generation already in progress for issue {issue_id}")
        self.issue_id = issue_id
