"""
Contact Matching Orchestrator.

Responsibilities:
- Score every candidate profile for one contact.
- Attach confidence bands and reasons.
- Return matches ranked by score.

Non-Responsibilities:
- No network access, caching or rendering.
- No filtering by minimum score or result count; callers decide.

Invariant:
This module must be deterministic given the same inputs. The only state
a ContactMatcher holds is its immutable MatchingConfig.
"""

import logging
from typing import Iterable, List, Optional

from .confidence import classify_confidence
from .config import DEFAULT_CONFIG, MatchingConfig
from .models import CandidateProfile, Contact, Match
from .reasons import compose_reasons
from .scoring import score_match

# Handlers are attached by the application, never here
logger = logging.getLogger(__name__)


class ContactMatcher:
    """Ranks candidate profiles for contacts under a fixed configuration."""

    def __init__(self, config: Optional[MatchingConfig] = None):
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> MatchingConfig:
        return self._config

    def with_config(self, config: MatchingConfig) -> "ContactMatcher":
        """Return a matcher for another configuration; this one is left untouched."""
        return ContactMatcher(config)

    def build_match(self, contact: Contact, profile: CandidateProfile) -> Match:
        breakdown = score_match(contact, profile, self._config)
        return Match(
            contact=contact,
            url=profile.url,
            profile_name=profile.name,
            profile_headline=profile.headline,
            profile_company=profile.company,
            profile_location=profile.location,
            score=breakdown.total,
            confidence=classify_confidence(breakdown.total),
            reasons=compose_reasons(contact, profile, breakdown, self._config),
            breakdown=breakdown,
        )

    def match_contact(
        self,
        contact: Contact,
        candidates: Iterable[CandidateProfile],
    ) -> List[Match]:
        """
        Score and rank candidates for a contact.

        Args:
            contact: The known contact
            candidates: Profiles in discovery order (typically search rank)

        Returns:
            One Match per candidate, highest score first. Ties keep
            discovery order.
        """
        matches = [self.build_match(contact, profile) for profile in candidates]
        # sorted() is stable
        ranked = sorted(matches, key=lambda m: m.score, reverse=True)

        logger.debug(
            "Scored %d candidates for %s (top score %s)",
            len(ranked),
            contact.full_name,
            ranked[0].score if ranked else None,
        )
        return ranked


def match_contact(
    contact: Contact,
    candidates: Iterable[CandidateProfile],
    config: Optional[MatchingConfig] = None,
) -> List[Match]:
    """Functional form of ContactMatcher.match_contact."""
    return ContactMatcher(config).match_contact(contact, candidates)
