# presentation.py - builds the immutable view the page renders from
import re
from typing import Optional

from search.models import AMBIGUOUS, ERROR, MACHINE_VERIFIED, AuditView, SearchOutcome
from search.scoring import ScoringConfig, score_band, score_outcome

PARSE_ERROR_MESSAGE = "We couldn't read the knowledge graph response. Try a more specific name."
GENERIC_ERROR_MESSAGE = "An error occurred"

# Low-level decoder noise that should never reach the user verbatim
_PARSE_ERROR_PATTERNS = (
    re.compile(r"Expecting value", re.I),
    re.compile(r"Unexpected token", re.I),
    re.compile(r"JSONDecodeError|in JSON at position", re.I),
    re.compile(r"Unexpected response from Knowledge Graph API", re.I),
)


def clean_error_message(text: Optional[str]) -> str:
    if not text or not text.strip():
        return GENERIC_ERROR_MESSAGE
    if any(p.search(text) for p in _PARSE_ERROR_PATTERNS):
        return PARSE_ERROR_MESSAGE
    return text.strip()


def build_view(outcome: SearchOutcome, config: Optional[ScoringConfig] = None) -> AuditView:
    """Pure: one SearchOutcome in, one AuditView out."""
    score = score_outcome(outcome, config)
    band = score_band(score, config)

    if outcome.status == MACHINE_VERIFIED:
        headline = "MACHINE-VERIFIED"
        if band == "low":
            message = "AI recognizes you, but not in the category your customers search for."
        else:
            message = "AI recognizes you as a real-world entity."
    elif outcome.status == AMBIGUOUS:
        headline = "Status: Ambiguous"
        message = "AI sees you as a topic, not a brand."
    else:
        headline = "Status: AI-Invisible"
        message = f'No entity found in the knowledge graph for "{outcome.query}".'

    return AuditView(
        status=outcome.status,
        query=outcome.query,
        result=outcome.result,
        display_score=score,
        band=band,
        headline=headline,
        message=message,
    )


def error_view(message: Optional[str], query: str = "") -> AuditView:
    cleaned = clean_error_message(message)
    return AuditView(
        status=ERROR,
        query=query,
        error_message=cleaned,
        headline="Error",
        message=cleaned,
    )
