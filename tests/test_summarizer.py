from app.schemas import Issue
from app.summarizer import PLACEHOLDER_SENTENCE, first_sentence, summarize_locally


def test_scenario_first_sentence_and_severity():
    issue = Issue(title="", details="Page crashes on load. Very annoying.", severity="high")
    summary = summarize_locally(issue)

    assert summary.startswith("Page crashes on load")
    assert "Severity: high" in summary
    assert summary == "Page crashes on load — Severity: high — Keywords: crashes, annoying"


def test_is_deterministic():
    issue = Issue(title="t", details="Something unexpected happened during checkout.")
    assert summarize_locally(issue) == summarize_locally(issue)


def test_first_character_is_capitalized():
    issue = Issue(details="button does nothing")
    assert summarize_locally(issue).startswith("Button does nothing")


def test_splits_on_line_break():
    issue = Issue(details="first line\nsecond line")
    assert summarize_locally(issue).startswith("First line — ")


def test_falls_back_to_title():
    issue = Issue(title="dark mode toggle", details="")
    assert summarize_locally(issue) == "Dark mode toggle — Severity: medium"


def test_falls_back_to_placeholder():
    issue = Issue(title="", details="")
    assert summarize_locally(issue) == f"{PLACEHOLDER_SENTENCE} — Severity: medium"


def test_leading_period_falls_back_to_title():
    issue = Issue(title="odd report", details=".hidden text")
    assert summarize_locally(issue).startswith("Odd report")


def test_blank_severity_defaults_to_medium():
    issue = Issue(details="It broke.", severity="")
    assert "Severity: medium" in summarize_locally(issue)


def test_keywords_are_distinct_and_capped_at_five():
    details = (
        "Export export Export timeout while exporting invoices, "
        "payments, receipts and balances"
    )
    summary = summarize_locally(Issue(details=details))

    keywords = summary.split("Keywords: ")[1].split(", ")
    assert keywords == ["Export", "export", "timeout", "exporting", "invoices"]


def test_no_keyword_clause_without_long_words():
    summary = summarize_locally(Issue(details="It is bad."))
    assert "Keywords" not in summary
    assert summary == "It is bad — Severity: medium"


def test_first_sentence_helper():
    assert first_sentence("One. Two.") == "One"
    assert first_sentence("") == ""
