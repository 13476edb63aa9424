"""
Tests for the markdown report.
"""

from datetime import date

from linkmatch.matching import CandidateProfile, Contact, ContactMatcher
from linkmatch.report import ContactMatches, render_contact, render_report, write_report


def _results(john_doe, john_doe_profile):
    matches = ContactMatcher().match_contact(john_doe, [john_doe_profile])
    return [
        ContactMatches(contact=john_doe, matches=matches),
        ContactMatches(contact=Contact(full_name="Nobody Known")),
    ]


class TestRenderReport:
    """Test report layout."""

    def test_header_and_summary(self, john_doe, john_doe_profile):
        text = render_report(_results(john_doe, john_doe_profile), generated=date(2024, 1, 15))
        lines = text.splitlines()
        assert lines[0] == "# LinkedIn Contact Matches"
        assert "Generated: 2024-01-15" in lines
        assert "- Total Contacts: 2" in lines
        assert "- Contacts with Matches: 1" in lines
        assert "- No Matches Found: 1" in lines

    def test_match_entry(self, john_doe, john_doe_profile):
        text = render_report(_results(john_doe, john_doe_profile), generated=date(2024, 1, 15))
        assert (
            "#### 1. [John Doe](https://www.linkedin.com/in/john-doe) - Score: 103/110 ⭐⭐⭐ Very High Confidence"
            in text
        )
        assert "- **Company**: Acme Corp" in text
        assert "- **Location**: San Francisco Bay Area" in text
        assert "  - Exact email match (+50 points)" in text

    def test_contact_details_line(self, john_doe, john_doe_profile):
        text = render_report(_results(john_doe, john_doe_profile))
        assert (
            "**Company**: Acme Corp | **Job Title**: Software Engineer | "
            "**Location**: San Francisco, CA | **Email**: john.doe@acme.com"
        ) in text

    def test_no_matches(self, john_doe, john_doe_profile):
        text = render_report(_results(john_doe, john_doe_profile))
        section = text.split("## Nobody Known", 1)[1]
        assert "*No LinkedIn matches found*" in section

    def test_at_most_three_matches_shown(self, john_doe):
        profiles = [
            CandidateProfile(url=f"https://www.linkedin.com/in/john-doe-{i}", name="John Doe")
            for i in range(5)
        ]
        matches = ContactMatcher().match_contact(john_doe, profiles)
        lines = render_contact(ContactMatches(contact=john_doe, matches=matches))
        assert "### Top 3 Matches:" in lines
        assert not any(line.startswith("#### 4.") for line in lines)

    def test_custom_max_score(self, john_doe, john_doe_profile):
        text = render_report(_results(john_doe, john_doe_profile), max_score=120)
        assert "Score: 103/120" in text


class TestWriteReport:
    """Test writing the report to disk."""

    def test_writes_file(self, tmp_path, john_doe, john_doe_profile):
        path = write_report(tmp_path / "out" / "matches.md", _results(john_doe, john_doe_profile))
        assert path.exists()
        assert path.read_text(encoding="utf-8").startswith("# LinkedIn Contact Matches")
