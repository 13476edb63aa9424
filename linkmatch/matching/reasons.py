"""
Match Reason Composition.

Responsibilities:
- Turn a tagged score breakdown into ordered, human-readable reasons.

Non-Responsibilities:
- No scoring; the rule that fired is read from the breakdown, never re-derived.

Invariant:
Order is fixed: email, name, company, location, job title, then the summary.
"""

from typing import List, Tuple

from .config import MatchingConfig
from .models import CandidateProfile, ComponentScore, Contact, MatchRule, ScoreBreakdown
from .scoring import round_half_up

NEAR_EXACT_NAME = 0.95
NEAR_EXACT_COMPANY = 0.95
NEAR_EXACT_LOCATION = 0.9
NEAR_EXACT_TITLE = 0.9

LOW_CONFIDENCE_REASON = "Low confidence match - minimal similarity found"


def _fmt(value: float) -> str:
    return f"{value:g}"


def _points(component: ComponentScore) -> str:
    return f"+{round_half_up(component.points)} points"


def _percent(component: ComponentScore) -> str:
    return f"{round_half_up(component.similarity * 100)}% match"


def _email_reason(component: ComponentScore) -> str:
    if component.rule is MatchRule.EXACT:
        return f"Exact email match ({_points(component)})"
    return f"Same email domain ({_points(component)})"


def _name_reason(component: ComponentScore, contact_name: str, profile_name: str) -> str:
    if component.rule is MatchRule.NICKNAME:
        return f"Name variation match: {contact_name} ↔ {profile_name} ({_points(component)})"
    if component.rule is MatchRule.EXACT or component.similarity >= NEAR_EXACT_NAME:
        return f"Exact name match ({_points(component)})"
    if component.rule is MatchRule.SURNAME:
        return (
            f"Last name match: {contact_name} ↔ {profile_name} "
            f"({_percent(component)}, {_points(component)})"
        )
    return f"Similar name ({_percent(component)}, {_points(component)})"


def _company_reason(component: ComponentScore, contact_company: str, profile_company: str) -> str:
    if component.rule is MatchRule.ABBREVIATION:
        return (
            f"Company abbreviation match: {contact_company} ↔ {profile_company} "
            f"({_points(component)})"
        )
    if component.similarity >= NEAR_EXACT_COMPANY:
        return f"Company match: {contact_company} ({_points(component)})"
    return f"Similar company ({_percent(component)}, {_points(component)})"


def _location_reason(component: ComponentScore, contact_location: str, profile_location: str) -> str:
    if component.rule is MatchRule.ABBREVIATION:
        return (
            f"Location abbreviation match: {contact_location} ↔ {profile_location} "
            f"({_points(component)})"
        )
    if component.similarity >= NEAR_EXACT_LOCATION:
        return f"Location match: {contact_location} ({_points(component)})"
    return f"Similar location ({_percent(component)}, {_points(component)})"


def _title_reason(component: ComponentScore, contact_title: str, headline: str) -> str:
    if component.similarity >= NEAR_EXACT_TITLE:
        return f"Job title match ({_points(component)})"
    if component.rule is MatchRule.SYNONYM:
        return (
            f"Related job title: {contact_title} ↔ {headline} "
            f"({_percent(component)}, {_points(component)})"
        )
    return f"Similar job title ({_percent(component)}, {_points(component)})"


def summary_line(total: int, max_score: float) -> str:
    return f"Total Score: {total}/{_fmt(max_score)} points"


def compose_reasons(
    contact: Contact,
    profile: CandidateProfile,
    breakdown: ScoreBreakdown,
    config: MatchingConfig,
) -> Tuple[str, ...]:
    """
    Explain a breakdown.

    Components that contributed nothing are omitted. If none contributed,
    a single low-confidence placeholder stands in for them. The total
    summary line always comes last.
    """
    reasons: List[str] = []

    if breakdown.email.contributed:
        reasons.append(_email_reason(breakdown.email))
    if breakdown.name.contributed:
        reasons.append(_name_reason(breakdown.name, contact.full_name, profile.name))
    if breakdown.company.contributed:
        reasons.append(_company_reason(breakdown.company, contact.company, profile.company))
    if breakdown.location.contributed:
        reasons.append(_location_reason(breakdown.location, contact.location, profile.location))
    if breakdown.job_title.contributed:
        reasons.append(_title_reason(breakdown.job_title, contact.job_title, profile.headline))

    if not reasons:
        reasons.append(LOW_CONFIDENCE_REASON)

    reasons.append(summary_line(breakdown.total, config.max_score))
    return tuple(reasons)
