"""
Location Matching.

Responsibilities:
- Normalize free-text locations ("Greater Boston Area", "Austin, TX").
- Expand US state abbreviations and well-known city abbreviations.

Non-Responsibilities:
- No geocoding.
- No weighting logic.
"""

import re
from types import MappingProxyType

from .models import Comparison, MatchRule
from .similarity import DEFAULT_ALGORITHM, Algorithm, string_similarity

CONTAINMENT_SIMILARITY = 0.9
SHARED_TOKEN_SIMILARITY = 0.8
MIN_SIGNIFICANT_TOKEN = 4

CITY_ABBREVIATIONS = MappingProxyType({
    "ny": ("new york", "new york city", "nyc"),
    "nyc": ("new york", "new york city"),
    "sf": ("san francisco", "san fran"),
    "la": ("los angeles",),
    "dc": ("washington dc", "washington"),
    "philly": ("philadelphia",),
    "vegas": ("las vegas",),
})

US_STATES = MappingProxyType({
    "al": "alabama", "ak": "alaska", "az": "arizona", "ar": "arkansas",
    "ca": "california", "co": "colorado", "ct": "connecticut", "de": "delaware",
    "fl": "florida", "ga": "georgia", "hi": "hawaii", "id": "idaho",
    "il": "illinois", "in": "indiana", "ia": "iowa", "ks": "kansas",
    "ky": "kentucky", "la": "louisiana", "me": "maine", "md": "maryland",
    "ma": "massachusetts", "mi": "michigan", "mn": "minnesota", "ms": "mississippi",
    "mo": "missouri", "mt": "montana", "ne": "nebraska", "nv": "nevada",
    "nh": "new hampshire", "nj": "new jersey", "nm": "new mexico", "ny": "new york",
    "nc": "north carolina", "nd": "north dakota", "oh": "ohio", "ok": "oklahoma",
    "or": "oregon", "pa": "pennsylvania", "ri": "rhode island", "sc": "south carolina",
    "sd": "south dakota", "tn": "tennessee", "tx": "texas", "ut": "utah",
    "vt": "vermont", "va": "virginia", "wa": "washington", "wv": "west virginia",
    "wi": "wisconsin", "wy": "wyoming",
})

_PUNCTUATION = re.compile(r"[.,]")
_TRAILING_REGION = re.compile(r"(?:\s+(?:area|metro|metropolitan))+$")
_LEADING_GREATER = re.compile(r"^(?:greater\s+)+")


def _clean(location: str) -> str:
    cleaned = _PUNCTUATION.sub("", location.lower().strip())
    cleaned = " ".join(cleaned.split())
    cleaned = _TRAILING_REGION.sub("", cleaned)
    return _LEADING_GREATER.sub("", cleaned)


def normalize_location(location: str) -> str:
    """Clean a location and expand two-letter US state tokens."""
    return " ".join(US_STATES.get(token, token) for token in _clean(location).split())


def _is_abbreviation_of(short: str, long_forms: tuple) -> bool:
    expansions = CITY_ABBREVIATIONS.get(short)
    if not expansions:
        return False
    return any(exp in form for exp in expansions for form in long_forms)


def compare_locations(
    location_a: str,
    location_b: str,
    algorithm: Algorithm = DEFAULT_ALGORITHM,
) -> Comparison:
    # City abbreviations are checked before state expansion ("LA" is also Louisiana)
    clean_a, clean_b = _clean(location_a), _clean(location_b)
    a, b = normalize_location(location_a), normalize_location(location_b)

    if a == b:
        return Comparison(1.0, MatchRule.EXACT)

    if a and b and (a in b or b in a):
        return Comparison(CONTAINMENT_SIMILARITY, MatchRule.CONTAINMENT)

    if _is_abbreviation_of(clean_a, (clean_b, b)) or _is_abbreviation_of(clean_b, (clean_a, a)):
        return Comparison(1.0, MatchRule.ABBREVIATION)

    shared = {
        token for token in a.split() if len(token) >= MIN_SIGNIFICANT_TOKEN
    } & set(b.split())
    if shared:
        return Comparison(SHARED_TOKEN_SIMILARITY, MatchRule.SHARED_TOKEN)

    return Comparison(string_similarity(a, b, algorithm), MatchRule.FUZZY)


def match_locations(
    location_a: str,
    location_b: str,
    algorithm: Algorithm = DEFAULT_ALGORITHM,
) -> float:
    return compare_locations(location_a, location_b, algorithm).similarity
