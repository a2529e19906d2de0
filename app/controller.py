"""Generates issue descriptions with the local or remote summarizer."""

import logging
from typing import Optional

from app.errors import GenerationInProgress
from app.llm_service import OpenAIService, get_llm_service
from app.repository import IssueRepository
from app.schemas import Issue, SummaryMode
from app.summarizer import summarize_locally

logger = logging.getLogger(__name__)

FAILURE_PREFIX = "AI failed: "
FALLBACK_HEADER = "\n\nFallback summary:\n"


def compose_fallback(issue: Issue, error: Exception) -> str:
    """Annotate the local summary with the reason the remote call failed."""
    message = str(error) or "unknown error"
    return f"{FAILURE_PREFIX}{message}{FALLBACK_HEADER}{summarize_locally(issue)}"


class SummarizationController:
    """
    Runs one description generation per issue at a time.

    The repository is injected; the controller never touches storage
    directly. An issue id is marked as generating for the whole duration of
    a request and released on every exit path.
    """

    def __init__(self, repository: IssueRepository, llm_service: Optional[OpenAIService] = None):
        self.repository = repository
        self.llm_service = llm_service or get_llm_service()
        self._generating: set[str] = set()

    def is_generating(self, issue_id: str) -> bool:
        return issue_id in self._generating

    async def generate_description(
        self,
        issue_id: str,
        mode: SummaryMode,
        credential: Optional[str] = None,
    ) -> Optional[Issue]:
        """
        Produce and store a new description for an issue.

        Remote mode always goes through the OpenAI service, which fails fast
        without touching the network when no credential is set. Any remote
        failure is folded into the stored text together with the local
        summary, so the issue always ends up with a description.

        Args:
            issue_id: Issue to describe
            mode: Which summarizer to use
            credential: Session API key, required for remote mode

        Returns:
            The updated issue, or None if it was deleted mid-generation

        Raises:
            IssueNotFound: If issue_id is unknown
            GenerationInProgress: If the issue is already being described
        """
        issue = self.repository.get_issue(issue_id)
        if issue_id in self._generating:
            raise GenerationInProgress(issue_id)

        self._generating.add(issue_id)
        try:
            logger.info(
                f"Generating description for issue {issue_id}",
                extra={"issue_id": issue_id, "mode": mode.value},
            )
            if mode == SummaryMode.REMOTE:
                description = await self._describe_remotely(issue, credential)
            else:
                description = summarize_locally(issue)

            if self.repository.find(issue_id) is None:
                logger.warning(
                    f"Issue {issue_id} was deleted during generation, discarding result",
                    extra={"issue_id": issue_id},
                )
                return None

            updated = self.repository.set_description(issue_id, description)
            logger.info(
                f"Stored description for issue {issue_id}",
                extra={"issue_id": issue_id, "description_length": len(description)},
            )
            return updated
        finally:
            self._generating.discard(issue_id)

    async def _describe_remotely(self, issue: Issue, credential: Optional[str]) -> str:
        try:
            return await self.llm_service.summarize(issue, credential)
        except Exception as e:
            logger.warning(
                f"Remote summary failed, using fallback: {str(e)}",
                extra={"issue_id": issue.id},
            )
            return compose_fallback(issue, e)
