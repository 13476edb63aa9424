"""
Job Title Matching.

Responsibilities:
- Normalize job titles and profile headlines.
- Recognize role synonyms, seniority abbreviations and C-level acronyms.

Non-Responsibilities:
- No weighting logic.
- No seniority ranking.
"""

import re

from .models import Comparison, MatchRule
from .similarity import DEFAULT_ALGORITHM, Algorithm, string_similarity

CONTAINMENT_SIMILARITY = 0.9
SYNONYM_SIMILARITY = 0.85

TITLE_SYNONYM_GROUPS = (
    frozenset({"engineer", "developer", "programmer", "coder", "software engineer", "swe"}),
    frozenset({"manager", "mgr", "lead", "director"}),
    frozenset({"senior", "sr", "principal", "lead", "staff"}),
    frozenset({"junior", "jr", "associate", "entry level"}),
    frozenset({"vice president", "vp"}),
    frozenset({"chief executive officer", "ceo"}),
    frozenset({"chief technology officer", "cto"}),
    frozenset({"chief financial officer", "cfo"}),
    frozenset({"chief operating officer", "coo"}),
)

_PUNCTUATION = re.compile(r"[.,]")

# Whole-word lookup so "cto" does not fire inside "director"
_TERM_PATTERNS = {
    term: re.compile(r"\b" + re.escape(term) + r"\b")
    for group in TITLE_SYNONYM_GROUPS
    for term in group
}


def normalize_job_title(title: str) -> str:
    return " ".join(_PUNCTUATION.sub("", title.lower()).split())


def _mentions_any(text: str, group: frozenset) -> bool:
    return any(_TERM_PATTERNS[term].search(text) for term in group)


def share_synonym_group(title_a: str, title_b: str) -> bool:
    """True if both normalized titles mention a term of the same group."""
    return any(
        _mentions_any(title_a, group) and _mentions_any(title_b, group)
        for group in TITLE_SYNONYM_GROUPS
    )


def compare_job_titles(
    title_a: str,
    title_b: str,
    algorithm: Algorithm = DEFAULT_ALGORITHM,
) -> Comparison:
    a = normalize_job_title(title_a)
    b = normalize_job_title(title_b)

    if a == b:
        return Comparison(1.0, MatchRule.EXACT)

    if a and b and (a in b or b in a):
        return Comparison(CONTAINMENT_SIMILARITY, MatchRule.CONTAINMENT)

    if share_synonym_group(a, b):
        return Comparison(SYNONYM_SIMILARITY, MatchRule.SYNONYM)

    return Comparison(string_similarity(a, b, algorithm), MatchRule.FUZZY)


def match_job_titles(
    title_a: str,
    title_b: str,
    algorithm: Algorithm = DEFAULT_ALGORITHM,
) -> float:
    return compare_job_titles(title_a, title_b, algorithm).similarity
