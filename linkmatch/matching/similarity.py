"""
String Similarity Primitives.

Responsibilities:
- Edit-distance ratio (Levenshtein).
- Prefix-weighted similarity (Jaro-Winkler).
- Dispatch on the configured algorithm.

Non-Responsibilities:
- No domain normalization (names, companies, locations, titles).
- No weighting or thresholds.

Invariant:
Every function returns a value in [0, 1] and compares case-insensitively.
"""

from enum import Enum

from rapidfuzz.distance import Levenshtein

PREFIX_SCALE = 0.1
MAX_PREFIX = 4


class Algorithm(str, Enum):
    """Similarity algorithm selector."""

    LEVENSHTEIN = "levenshtein"
    JARO_WINKLER = "jaro-winkler"


DEFAULT_ALGORITHM = Algorithm.JARO_WINKLER


def _edit_ratio(s1: str, s2: str) -> float:
    longest = max(len(s1), len(s2))
    if longest == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(s1, s2) / longest


def _jaro(s1: str, s2: str) -> float:
    len1, len2 = len(s1), len(s2)
    if len1 == 0 and len2 == 0:
        return 1.0
    if len1 == 0 or len2 == 0:
        return 0.0

    window = max(max(len1, len2) // 2 - 1, 0)
    s1_matched = [False] * len1
    s2_matched = [False] * len2

    matches = 0
    for i, ch in enumerate(s1):
        start = max(0, i - window)
        end = min(i + window + 1, len2)
        for j in range(start, end):
            if s2_matched[j] or s2[j] != ch:
                continue
            s1_matched[i] = True
            s2_matched[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    # Half the out-of-order matched characters count as transpositions
    transpositions = 0
    k = 0
    for i, ch in enumerate(s1):
        if not s1_matched[i]:
            continue
        while not s2_matched[k]:
            k += 1
        if ch != s2[k]:
            transpositions += 1
        k += 1

    return (
        matches / len1
        + matches / len2
        + (matches - transpositions / 2) / matches
    ) / 3.0


def _jaro_winkler(s1: str, s2: str) -> float:
    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    jaro = _jaro(s1, s2)

    prefix = 0
    for c1, c2 in zip(s1[:MAX_PREFIX], s2[:MAX_PREFIX]):
        if c1 != c2:
            break
        prefix += 1

    return jaro + prefix * PREFIX_SCALE * (1 - jaro)


def edit_ratio(a: str, b: str) -> float:
    """1 - (edit distance / longer length). Two empty strings are identical."""
    return _edit_ratio(a.lower(), b.lower())


def prefix_weighted_similarity(a: str, b: str) -> float:
    """
    Jaro-Winkler similarity.

    The Jaro score counts characters matching within a window of
    ``floor(max(len) / 2) - 1`` positions, penalized for transpositions.
    Up to four shared leading characters then boost it by 0.1 each,
    scaled by the remaining distance to 1.0.
    """
    return _jaro_winkler(a.lower(), b.lower())


def string_similarity(
    a: str,
    b: str,
    algorithm: Algorithm | str = DEFAULT_ALGORITHM,
) -> float:
    """
    Compare two strings with the selected algorithm.

    Args:
        a: First string
        b: Second string
        algorithm: ``Algorithm`` member or its string value

    Returns:
        Similarity in [0, 1]
    """
    s1 = a.lower()
    s2 = b.lower()
    if Algorithm(algorithm) is Algorithm.JARO_WINKLER:
        return _jaro_winkler(s1, s2)
    return _edit_ratio(s1, s2)
