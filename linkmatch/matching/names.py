"""
Person Name Matching.

Responsibilities:
- Normalize free-text full names.
- Recognize common nickname equivalences (William <-> Bill).
- Combine direct, per-component and surname-only strategies.

Non-Responsibilities:
- No weighting logic.
- No threshold logic.

Invariant:
The result is the best of independent strategies, so a valid reordering
or abbreviation is never penalized by a weaker one.
"""

from types import MappingProxyType

from .models import Comparison, MatchRule
from .similarity import DEFAULT_ALGORITHM, Algorithm, string_similarity

SURNAME_CREDIT = 0.7
SURNAME_MIN_SIMILARITY = 0.9

NICKNAMES = MappingProxyType({
    "william": ("bill", "will", "billy", "willy"),
    "robert": ("rob", "bob", "bobby", "robbie"),
    "richard": ("rick", "dick", "rich", "ricky"),
    "james": ("jim", "jimmy", "jamie"),
    "john": ("jack", "johnny"),
    "michael": ("mike", "mikey", "mick"),
    "david": ("dave", "davey"),
    "joseph": ("joe", "joey"),
    "thomas": ("tom", "tommy"),
    "charles": ("charlie", "chuck"),
    "christopher": ("chris",),
    "daniel": ("dan", "danny"),
    "matthew": ("matt", "matty"),
    "anthony": ("tony",),
    "donald": ("don", "donny"),
    "steven": ("steve",),
    "andrew": ("andy", "drew"),
    "joshua": ("josh",),
    "kenneth": ("ken", "kenny"),
    "kevin": ("kev",),
    "timothy": ("tim", "timmy"),
    "jonathan": ("jon", "john"),
    "nicholas": ("nick", "nicky"),
    "alexander": ("alex", "al"),
    "benjamin": ("ben", "benny"),
    "zachary": ("zach", "zack"),
    "elizabeth": ("liz", "beth", "lizzie", "betty"),
    "margaret": ("maggie", "meg", "peggy"),
    "catherine": ("cathy", "kate", "katie"),
    "susan": ("sue", "susie"),
    "jennifer": ("jen", "jenny"),
    "patricia": ("pat", "patty", "tricia"),
    "barbara": ("barb", "barbie"),
    "jessica": ("jess", "jessie"),
    "rebecca": ("becky", "becca"),
    "stephanie": ("steph",),
    "kimberly": ("kim",),
    "michelle": ("shelly", "mich"),
    "amanda": ("mandy",),
    "christina": ("chris", "tina", "christie"),
    "samantha": ("sam", "sammy"),
})

# A formal name and its nicknames form one equivalence group
NICKNAME_GROUPS = tuple(
    frozenset((formal,) + nicknames) for formal, nicknames in NICKNAMES.items()
)


def normalize_name(name: str) -> str:
    return name.lower().strip()


def are_name_variations(first_a: str, first_b: str) -> bool:
    """True if two given names are equal or share a nickname group."""
    a = normalize_name(first_a)
    b = normalize_name(first_b)
    if a == b:
        return True
    return any(a in group and b in group for group in NICKNAME_GROUPS)


def compare_names(
    name_a: str,
    name_b: str,
    algorithm: Algorithm = DEFAULT_ALGORITHM,
) -> Comparison:
    """
    Compare two full names.

    Strategies, best one wins (ties go to the earlier one):
        1. Direct similarity of the whole strings.
        2. First names (nickname-aware) and last names compared separately
           and averaged; needs two or more tokens on both sides.
        3. Last names alone: at least 0.9 similar credits 0.7, which covers
           initials such as "J. Smith" vs "John Smith".
    """
    a = normalize_name(name_a)
    b = normalize_name(name_b)
    if a == b:
        return Comparison(1.0, MatchRule.EXACT)

    best = Comparison(string_similarity(a, b, algorithm), MatchRule.FUZZY)

    tokens_a = a.split()
    tokens_b = b.split()

    if len(tokens_a) >= 2 and len(tokens_b) >= 2:
        first_a, first_b = tokens_a[0], tokens_b[0]
        is_nickname = first_a != first_b and are_name_variations(first_a, first_b)
        if is_nickname:
            first_score = 1.0
        else:
            first_score = string_similarity(first_a, first_b, algorithm)
        last_score = string_similarity(tokens_a[-1], tokens_b[-1], algorithm)
        component = (first_score + last_score) / 2
        if component > best.similarity:
            rule = MatchRule.NICKNAME if is_nickname else MatchRule.COMPONENTS
            best = Comparison(component, rule)

    if tokens_a and tokens_b:
        surname = string_similarity(tokens_a[-1], tokens_b[-1], algorithm)
        if surname >= SURNAME_MIN_SIMILARITY and SURNAME_CREDIT > best.similarity:
            best = Comparison(SURNAME_CREDIT, MatchRule.SURNAME)

    return best


def match_names(name_a: str, name_b: str, algorithm: Algorithm = DEFAULT_ALGORITHM) -> float:
    return compare_names(name_a, name_b, algorithm).similarity
