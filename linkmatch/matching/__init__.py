"""Identity matching core: contact + candidate profiles -> ranked matches."""

from .confidence import Confidence, classify_confidence
from .config import ConfigError, MatchingConfig, MatchingWeights
from .matcher import ContactMatcher, match_contact
from .models import (
    CandidateProfile,
    ComponentScore,
    Contact,
    Match,
    MatchRule,
    ScoreBreakdown,
)
from .similarity import Algorithm

__all__ = [
    "Algorithm",
    "CandidateProfile",
    "ComponentScore",
    "Confidence",
    "ConfigError",
    "Contact",
    "ContactMatcher",
    "Match",
    "MatchRule",
    "MatchingConfig",
    "MatchingWeights",
    "ScoreBreakdown",
    "classify_confidence",
    "match_contact",
]
