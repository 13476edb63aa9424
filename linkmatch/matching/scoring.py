"""
Scoring Logic for Contact / Profile pairs.

Responsibilities:
- Compute a deterministic match score between a contact and a candidate.
- Emit a per-component breakdown tagged with the rule that fired.

Non-Responsibilities:
- No candidate selection or filtering.
- No wording of explanations.
- No confidence decisions.

Invariant:
Given identical inputs, this module must always return the same breakdown.
Each component lies in [0, weight]; total == round_half_up(sum of components).
"""

import math
from typing import Iterable, Optional

from .companies import compare_companies
from .config import MatchingConfig
from .locations import compare_locations
from .models import (
    CandidateProfile,
    Comparison,
    ComponentScore,
    Contact,
    MatchRule,
    ScoreBreakdown,
)
from .names import compare_names
from .titles import compare_job_titles

DOMAIN_MATCH_FRACTION = 0.5


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def _email_domain(email: str) -> str:
    _, at, domain = email.partition("@")
    return domain if at else ""


def score_email(
    contact_emails: Iterable[str],
    profile_email: Optional[str],
    weight: float,
) -> ComponentScore:
    """
    Exact email identity earns the full weight, a shared domain half of it.

    Args:
        contact_emails: All known addresses of the contact
        profile_email: Address listed on the candidate, if any
        weight: Configured email weight

    Returns:
        ComponentScore with rule EXACT, DOMAIN, NONE or MISSING
    """
    emails = [e.strip().lower() for e in contact_emails if _present(e)]
    if not emails or not _present(profile_email):
        return ComponentScore(0.0, 0.0, MatchRule.MISSING)

    candidate = profile_email.strip().lower()
    if candidate in emails:
        return ComponentScore(float(weight), 1.0, MatchRule.EXACT)

    candidate_domain = _email_domain(candidate)
    if candidate_domain and any(_email_domain(e) == candidate_domain for e in emails):
        return ComponentScore(weight * DOMAIN_MATCH_FRACTION, DOMAIN_MATCH_FRACTION, MatchRule.DOMAIN)

    return ComponentScore(0.0, 0.0, MatchRule.NONE)


def _weighted(comparison: Comparison, weight: float, threshold: float = 0.0) -> ComponentScore:
    similarity = min(max(comparison.similarity, 0.0), 1.0)
    if similarity < threshold:
        return ComponentScore(0.0, similarity, MatchRule.BELOW_THRESHOLD)
    return ComponentScore(similarity * weight, similarity, comparison.rule)


def score_match(
    contact: Contact,
    profile: CandidateProfile,
    config: MatchingConfig,
) -> ScoreBreakdown:
    """
    Score one contact against one candidate profile.

    Name and company are gated by their thresholds; location and job title
    are purely additive. Optional attributes are compared only when both
    sides carry a value.
    """
    weights = config.weights
    algorithm = config.algorithm

    email = score_email(contact.emails, profile.email, weights.email)

    name = ComponentScore()
    if _present(contact.full_name) and _present(profile.name):
        name = _weighted(
            compare_names(contact.full_name, profile.name, algorithm),
            weights.name,
            config.name_threshold,
        )

    company = ComponentScore()
    if _present(contact.company) and _present(profile.company):
        company = _weighted(
            compare_companies(contact.company, profile.company, algorithm),
            weights.company,
            config.company_threshold,
        )

    location = ComponentScore()
    if _present(contact.location) and _present(profile.location):
        location = _weighted(
            compare_locations(contact.location, profile.location, algorithm),
            weights.location,
        )

    job_title = ComponentScore()
    if _present(contact.job_title) and _present(profile.headline):
        job_title = _weighted(
            compare_job_titles(contact.job_title, profile.headline, algorithm),
            weights.job_title,
        )

    subtotal = email.points + name.points + company.points + location.points + job_title.points
    # Rounding up must not push fractional weight sums past their maximum
    total = min(round_half_up(subtotal), math.floor(weights.total))
    return ScoreBreakdown(
        email=email,
        name=name,
        company=company,
        location=location,
        job_title=job_title,
        total=total,
    )
