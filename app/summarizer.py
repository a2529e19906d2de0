"""Deterministic local summary used when no remote model is requested or available."""

import re

from app.schemas import Issue, IssueSeverity

PLACEHOLDER_SENTENCE = "User reported an issue"
CLAUSE_SEPARATOR = " — "
MAX_KEYWORDS = 5

_SENTENCE_BREAK = re.compile(r"[.\n]")
_KEYWORD = re.compile(r"\b[a-zA-Z]{6,}\b")


def first_sentence(text: str) -> str:
    """Return the text before the first period or line break."""
    return _SENTENCE_BREAK.split(text, maxsplit=1)[0]


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _keywords(details: str) -> list[str]:
    keywords: list[str] = []
    for word in _KEYWORD.findall(details):
        if word not in keywords:
            keywords.append(word)
        if len(keywords) == MAX_KEYWORDS:
            break
    return keywords


def summarize_locally(issue: Issue) -> str:
    """
    Build a one-line description from the issue text alone.

    Clauses are the capitalized first sentence of the details (or the title,
    or a placeholder), the severity, and up to five long words from the
    details. The keyword clause is dropped when there are none.

    Never raises and performs no I/O.
    """
    details = (issue.details or "").strip()
    sentence = first_sentence(details) or issue.title or PLACEHOLDER_SENTENCE

    clauses = [
        _capitalize(sentence),
        f"Severity: {issue.severity or IssueSeverity.MEDIUM.value}",
    ]

    keywords = _keywords(details)
    if keywords:
        clauses.append(f"Keywords: {', '.join(keywords)}")

    return CLAUSE_SEPARATOR.join(clauses)
