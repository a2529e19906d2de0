import logging
import json
import os
from typing import Optional

import httpx

from app.schemas import Issue

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_BASE_URL = "https://api.openai.com/v1"

SYSTEM_PROMPT = (
    "You are a helpful assistant that converts a user's problem report into a concise "
    "problem description, steps to reproduce, likely causes, and suggested next steps. "
    "Be clear and bullet-oriented."
)

USER_PROMPT_TEMPLATE = """User report:
Title: {title}
Details: {details}
Severity: {severity}
Contact: {contact}

Produce a short structured description with: Summary (1 line), Steps to reproduce (3 bullets if available), Likely causes (2 bullets), Suggested next steps (2 bullets). Keep it under ~200 words."""


class LLMServiceError(Exception):
    """Custom exception for LLM service errors."""

    pass


class MissingCredential(LLMServiceError):
    """Raised before any network access when no API key is available."""

    def __init__(self, message: str = "No OpenAI API key set. Save a key for this session first."):
        super().__init__(message)


class RemoteServiceError(LLMServiceError):
    """The completion request failed or came back with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def build_user_prompt(issue: Issue) -> str:
    return USER_PROMPT_TEMPLATE.format(
        title=issue.title or "",
        details=issue.details or "",
        severity=issue.severity or "",
        contact=issue.contact or "",
    )


def extract_content(result) -> str:
    """
    Pull the first completion's message text out of a chat response.

    Anything missing along the way yields an empty string instead of an
    error, so a provider changing its response shape degrades quietly.
    """
    try:
        content = result["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        logger.warning("Unexpected OpenAI response structure, using empty content")
        return ""

    if not isinstance(content, str):
        return ""
    return content.strip()


class OpenAIService:
    """
    Remote summarizer backed by the OpenAI chat completions API.

    The API key is passed per call rather than held by the service, so one
    instance can serve every session without ever storing a secret.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    def build_payload(self, issue: Issue) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(issue)},
            ],
            "max_tokens": 360,
            "temperature": 0.2,
        }

    async def summarize(self, issue: Issue, credential: Optional[str]) -> str:
        """
        Ask the model for a structured description of an issue.

        Args:
            issue: The issue to describe
            credential: OpenAI API key for the current session

        Returns:
            The trimmed completion text, or "" if the response lacks one

        Raises:
            MissingCredential: If credential is absent or blank
            RemoteServiceError: If the request fails or returns a non-2xx status
        """
        if not credential or not credential.strip():
            raise MissingCredential()

        # No timeout: a hung request keeps the generation open until it resolves
        try:
            async with httpx.AsyncClient(timeout=None, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers={
                        "Authorization": f"Bearer {credential.strip()}",
                        "Content-Type": "application/json",
                    },
                    json=self.build_payload(issue),
                )
        except httpx.HTTPError as e:
            logger.error(f"OpenAI API request failed: {str(e)}", extra={"issue_id": issue.id})
            raise RemoteServiceError(f"OpenAI API request failed: {str(e)}")

        if not response.is_success:
            body = response.text
            logger.error(
                f"OpenAI returned status {response.status_code}",
                extra={"issue_id": issue.id, "status_code": response.status_code},
            )
            raise RemoteServiceError(
                f"OpenAI error: {response.status_code} {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            result = response.json()
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse OpenAI response: {str(e)}", extra={"issue_id": issue.id})
            raise RemoteServiceError(
                f"Invalid JSON response from OpenAI: {str(e)}",
                status_code=response.status_code,
                body=response.text,
            )

        logger.debug(f"OpenAI response: {result}")
        return extract_content(result)


def get_llm_service() -> OpenAIService:
    """
    Factory function to get the configured remote summarizer.

    Reads configuration from environment variables:
    - OPENAI_MODEL: chat model name (default gpt-3.5-turbo)
    - OPENAI_BASE_URL: API root (default https://api.openai.com/v1)

    The API key is never read from the environment; it comes from the
    caller's session.
    """
    model = os.getenv("OPENAI_MODEL", "").strip() or DEFAULT_MODEL
    base_url = os.getenv("OPENAI_BASE_URL", "").strip() or DEFAULT_BASE_URL
    logger.info(f"Using OpenAI model {model}")
    return OpenAIService(model=model, base_url=base_url)


async def summarize_remotely(issue: Issue, credential: Optional[str]) -> str:
    """Describe an issue with the environment-configured OpenAI service."""
    return await get_llm_service().summarize(issue, credential)
