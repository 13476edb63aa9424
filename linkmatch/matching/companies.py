"""
Company Name Matching.

Responsibilities:
- Normalize company names (case, punctuation, legal-entity suffixes).
- Resolve well-known organization abbreviations (IBM, AWS, P&G).

Non-Responsibilities:
- No weighting logic.
- No threshold logic.
"""

import re
from types import MappingProxyType

from .models import Comparison, MatchRule
from .similarity import DEFAULT_ALGORITHM, Algorithm, string_similarity

CONTAINMENT_SIMILARITY = 0.95

COMPANY_SUFFIXES = (
    "inc", "incorporated", "llc", "ltd", "limited", "corp", "corporation",
    "company", "co", "group", "holdings", "enterprises", "international",
    "global", "technologies", "tech", "solutions", "services", "consulting",
)

ABBREVIATIONS = MappingProxyType({
    "ibm": ("international business machines",),
    "aws": ("amazon web services",),
    "ge": ("general electric",),
    "hp": ("hewlett packard", "hewlett-packard"),
    "at&t": ("att",),
    "pwc": ("pricewaterhousecoopers",),
    "kpmg": ("klynveld peat marwick goerdeler",),
    "p&g": ("procter & gamble", "procter and gamble"),
})

_PUNCTUATION = re.compile(r"[.,]")
_SUFFIXES = re.compile(r"\b(?:" + "|".join(COMPANY_SUFFIXES) + r")\b")


def _clean(company: str) -> str:
    cleaned = company.lower().strip().replace("&amp;", "&")
    cleaned = _PUNCTUATION.sub("", cleaned)
    return " ".join(cleaned.split())


def normalize_company(company: str) -> str:
    """Lowercase, drop punctuation and legal-entity suffix words."""
    return " ".join(_SUFFIXES.sub("", _clean(company)).split())


def _is_abbreviation_of(short: str, long_forms: tuple) -> bool:
    expansions = ABBREVIATIONS.get(short)
    if not expansions:
        return False
    return any(exp in form for exp in expansions for form in long_forms)


def compare_companies(
    company_a: str,
    company_b: str,
    algorithm: Algorithm = DEFAULT_ALGORITHM,
) -> Comparison:
    """
    Compare two company names.

    Abbreviations are looked up on the suffix-stripped name but expanded
    against the unstripped one, since expansions such as "International
    Business Machines" contain suffix words themselves.
    """
    clean_a, clean_b = _clean(company_a), _clean(company_b)
    a, b = normalize_company(company_a), normalize_company(company_b)

    if a == b:
        return Comparison(1.0, MatchRule.EXACT)

    if _is_abbreviation_of(a, (clean_b, b)) or _is_abbreviation_of(b, (clean_a, a)):
        return Comparison(1.0, MatchRule.ABBREVIATION)

    # "Google" vs "Google Cloud"
    if a and b and (a in b or b in a):
        return Comparison(CONTAINMENT_SIMILARITY, MatchRule.CONTAINMENT)

    return Comparison(string_similarity(a, b, algorithm), MatchRule.FUZZY)


def match_companies(
    company_a: str,
    company_b: str,
    algorithm: Algorithm = DEFAULT_ALGORITHM,
) -> float:
    return compare_companies(company_a, company_b, algorithm).similarity
