"""Confidence bands derived from a total match score."""

from enum import Enum


class Confidence(str, Enum):
    VERY_HIGH = "Very High"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    VERY_LOW = "Very Low"


# Lower bounds are inclusive
CONFIDENCE_BANDS = (
    (80, Confidence.VERY_HIGH),
    (60, Confidence.HIGH),
    (40, Confidence.MEDIUM),
    (20, Confidence.LOW),
)


def classify_confidence(score: float) -> Confidence:
    """Map a total score to its confidence band."""
    for lower_bound, band in CONFIDENCE_BANDS:
        if score >= lower_bound:
            return band
    return Confidence.VERY_LOW
