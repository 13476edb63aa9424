"""
Value types exchanged with the matching core.

All of them are immutable. Callers own Contact and CandidateProfile;
the core only reads them for the duration of one match call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional, Tuple

from .confidence import Confidence


@dataclass(frozen=True)
class Contact:
    """A locally known person, as parsed from a contacts export."""

    full_name: str
    first_name: str = ""
    last_name: str = ""
    emails: Tuple[str, ...] = ()
    company: Optional[str] = None
    job_title: Optional[str] = None
    location: Optional[str] = None
    id: str = ""
    phone_numbers: Tuple[str, ...] = ()
    source: str = "vcard"

    def __post_init__(self):
        # Accept lists from callers but keep the instance hashable
        object.__setattr__(self, "emails", tuple(self.emails))
        object.__setattr__(self, "phone_numbers", tuple(self.phone_numbers))


@dataclass(frozen=True)
class CandidateProfile:
    """An externally discovered profile. ``url`` is its identity key."""

    url: str
    name: str
    email: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    headline: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "name": self.name,
            "email": self.email,
            "company": self.company,
            "location": self.location,
            "headline": self.headline,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CandidateProfile":
        return cls(
            url=data["url"],
            name=data.get("name") or "",
            email=data.get("email"),
            company=data.get("company"),
            location=data.get("location"),
            headline=data.get("headline"),
        )


class MatchRule(str, Enum):
    """Which matching branch produced a similarity."""

    MISSING = "missing"
    NONE = "none"
    EXACT = "exact"
    DOMAIN = "domain"
    NICKNAME = "nickname"
    COMPONENTS = "components"
    SURNAME = "surname"
    ABBREVIATION = "abbreviation"
    CONTAINMENT = "containment"
    SHARED_TOKEN = "shared_token"
    SYNONYM = "synonym"
    FUZZY = "fuzzy"
    BELOW_THRESHOLD = "below_threshold"


class Comparison(NamedTuple):
    """Similarity of two attribute values and the rule that produced it."""

    similarity: float
    rule: MatchRule


@dataclass(frozen=True)
class ComponentScore:
    """Points one component contributed, with the similarity and rule behind them."""

    points: float = 0.0
    similarity: float = 0.0
    rule: MatchRule = MatchRule.MISSING

    @property
    def contributed(self) -> bool:
        return self.points > 0


@dataclass(frozen=True)
class ScoreBreakdown:
    email: ComponentScore = field(default_factory=ComponentScore)
    name: ComponentScore = field(default_factory=ComponentScore)
    company: ComponentScore = field(default_factory=ComponentScore)
    location: ComponentScore = field(default_factory=ComponentScore)
    job_title: ComponentScore = field(default_factory=ComponentScore)
    total: int = 0

    def components(self) -> Tuple[Tuple[str, ComponentScore], ...]:
        """Components in reporting order."""
        return (
            ("email", self.email),
            ("name", self.name),
            ("company", self.company),
            ("location", self.location),
            ("job_title", self.job_title),
        )

    def raw_total(self) -> float:
        return sum(component.points for _, component in self.components())


@dataclass(frozen=True)
class Match:
    """One scored candidate for a contact."""

    contact: Contact
    url: str
    profile_name: str
    score: int
    confidence: Confidence
    reasons: Tuple[str, ...] = ()
    profile_headline: Optional[str] = None
    profile_company: Optional[str] = None
    profile_location: Optional[str] = None
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)
