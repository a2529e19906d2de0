from fastapi import APIRouter, HTTPException, status, Depends

from app.controller import SummarizationController
from app.dependencies import get_controller, get_credential_store, get_repository
from app.errors import GenerationInProgress, IssueNotFound, IssueValidationError
from app.repository import IssueRepository
from app.schemas import (
    DescribeRequest,
    Issue,
    IssueCreate,
    IssueResponse,
    IssueStatusUpdate,
)
from app.stores import CredentialStore

router = APIRouter(prefix="/api/v1/issues", tags=["issues"])


def _to_response(issue: Issue, controller: SummarizationController) -> IssueResponse:
    return IssueResponse(**issue.model_dump(), generating=controller.is_generating(issue.id))


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Issue not found")


@router.get("/", response_model=list[IssueResponse])
async def list_issues(
    newest_first: bool = False,
    repository: IssueRepository = Depends(get_repository),
    controller: SummarizationController = Depends(get_controller),
):
    """List all issues in insertion order, or most recent first."""
    issues = repository.list_issues()
    if newest_first:
        issues.reverse()
    return [_to_response(issue, controller) for issue in issues]


@router.get("/{issue_id}", response_model=IssueResponse, status_code=status.HTTP_200_OK)
async def get_issue(
    issue_id: str,
    repository: IssueRepository = Depends(get_repository),
    controller: SummarizationController = Depends(get_controller),
):
    """Get issue by ID"""
    try:
        issue = repository.get_issue(issue_id)
    except IssueNotFound:
        raise _not_found()
    return _to_response(issue, controller)


@router.post("/", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
async def create_issue(
    payload: IssueCreate,
    repository: IssueRepository = Depends(get_repository),
    controller: SummarizationController = Depends(get_controller),
):
    """Create new issue"""
    try:
        issue = repository.create_issue(payload)
    except IssueValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _to_response(issue, controller)


@router.put("/{issue_id}/status", response_model=IssueResponse, status_code=status.HTTP_200_OK)
async def set_status(
    issue_id: str,
    payload: IssueStatusUpdate,
    repository: IssueRepository = Depends(get_repository),
    controller: SummarizationController = Depends(get_controller),
):
    """Set issue status"""
    try:
        issue = repository.set_status(issue_id, payload.status)
    except IssueNotFound:
        raise _not_found()
    return _to_response(issue, controller)


@router.post("/{issue_id}/toggle", response_model=IssueResponse, status_code=status.HTTP_200_OK)
async def toggle_status(
    issue_id: str,
    repository: IssueRepository = Depends(get_repository),
    controller: SummarizationController = Depends(get_controller),
):
    """Flip an issue between open and resolved"""
    try:
        issue = repository.toggle_status(issue_id)
    except IssueNotFound:
        raise _not_found()
    return _to_response(issue, controller)


@router.delete("/{issue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_issue(issue_id: str, repository: IssueRepository = Depends(get_repository)):
    """Delete issue by ID. Unknown ids are ignored."""
    repository.delete_issue(issue_id)


@router.post("/{issue_id}/describe", response_model=IssueResponse, status_code=status.HTTP_200_OK)
async def describe_issue(
    issue_id: str,
    payload: DescribeRequest,
    controller: SummarizationController = Depends(get_controller),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """Generate a description with the local heuristic or the remote model"""
    try:
        issue = await controller.generate_description(
            issue_id, payload.mode, credentials.get_credential()
        )
    except IssueNotFound:
        raise _not_found()
    except GenerationInProgress as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    if issue is None:
        raise _not_found()
    return _to_response(issue, controller)
