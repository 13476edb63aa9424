"""
Markdown report of contact matches.
"""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

from .matching.confidence import Confidence
from .matching.models import Contact, Match

TOP_MATCHES_SHOWN = 3

CONFIDENCE_MARKERS = {
    Confidence.VERY_HIGH: "⭐⭐⭐",
    Confidence.HIGH: "⭐⭐",
    Confidence.MEDIUM: "⭐",
    Confidence.LOW: "❓",
    Confidence.VERY_LOW: "❔",
}


@dataclass
class ContactMatches:
    contact: Contact
    matches: List[Match] = field(default_factory=list)


def _contact_details(contact: Contact) -> str:
    details = []
    if contact.company:
        details.append(f"**Company**: {contact.company}")
    if contact.job_title:
        details.append(f"**Job Title**: {contact.job_title}")
    if contact.location:
        details.append(f"**Location**: {contact.location}")
    if contact.emails:
        details.append(f"**Email**: {contact.emails[0]}")
    return " | ".join(details)


def render_match(match: Match, index: int, max_score: float = 110) -> List[str]:
    marker = CONFIDENCE_MARKERS[match.confidence]
    lines = [
        f"#### {index}. [{match.profile_name}]({match.url}) - Score: {match.score}/{max_score:g} "
        f"{marker} {match.confidence.value} Confidence"
    ]
    if match.profile_headline:
        lines.append(f"- **Headline**: {match.profile_headline}")
    if match.profile_company:
        lines.append(f"- **Company**: {match.profile_company}")
    if match.profile_location:
        lines.append(f"- **Location**: {match.profile_location}")
    if match.reasons:
        lines.append("- **Match Reasons**:")
        lines.extend(f"  - {reason}" for reason in match.reasons)
    return lines


def render_contact(result: ContactMatches, max_score: float = 110) -> List[str]:
    lines = [f"## {result.contact.full_name}"]
    details = _contact_details(result.contact)
    if details:
        lines.extend([details, ""])

    if not result.matches:
        lines.append("*No LinkedIn matches found*")
        return lines

    shown = result.matches[:TOP_MATCHES_SHOWN]
    lines.extend([f"### Top {len(shown)} Matches:", ""])
    for i, match in enumerate(shown, 1):
        lines.extend(render_match(match, i, max_score))
        lines.append("")
    return lines


def render_report(
    results: Sequence[ContactMatches],
    max_score: float = 110,
    generated: Optional[date] = None,
) -> str:
    """Build the full markdown document."""
    generated = generated or date.today()
    with_matches = sum(1 for r in results if r.matches)

    lines = [
        "# LinkedIn Contact Matches",
        "",
        f"Generated: {generated.isoformat()}",
        "",
        "## Summary",
        f"- Total Contacts: {len(results)}",
        f"- Contacts with Matches: {with_matches}",
        f"- No Matches Found: {len(results) - with_matches}",
        "",
        "---",
        "",
    ]
    for result in results:
        lines.extend(render_contact(result, max_score))
        lines.extend(["", "---", ""])
    return "\n".join(lines)


def write_report(path: Path, results: Sequence[ContactMatches], max_score: float = 110) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(results, max_score), encoding="utf-8")
    return path
