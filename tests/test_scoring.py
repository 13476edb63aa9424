"""
Tests for the scoring engine.
"""

import pytest

from linkmatch.matching import CandidateProfile, Contact, MatchingConfig, MatchRule
from linkmatch.matching.names import compare_names
from linkmatch.matching.scoring import round_half_up, score_email, score_match

CONFIG = MatchingConfig()


class TestRoundHalfUp:
    """Test score rounding."""

    @pytest.mark.parametrize("value,expected", [(2.5, 3), (3.5, 4), (2.4999, 2), (0.0, 0), (109.5, 110)])
    def test_rounds_half_away_from_zero(self, value, expected):
        assert round_half_up(value) == expected


class TestScoreEmail:
    """Test the email component."""

    def test_exact_match_is_case_insensitive(self):
        result = score_email(["John.Doe@Acme.com"], "john.doe@acme.com", 50)
        assert result.points == 50
        assert result.rule is MatchRule.EXACT

    def test_any_contact_email_can_match(self):
        result = score_email(["old@example.com", "john@acme.com"], "john@acme.com", 50)
        assert result.rule is MatchRule.EXACT

    def test_same_domain_earns_half(self):
        result = score_email(["john@acme.com"], "jane@acme.com", 50)
        assert result.points == 25
        assert result.rule is MatchRule.DOMAIN

    def test_different_domain(self):
        result = score_email(["john@acme.com"], "john@globex.com", 50)
        assert result.points == 0
        assert result.rule is MatchRule.NONE

    def test_missing_profile_email(self):
        assert score_email(["john@acme.com"], None, 50).rule is MatchRule.MISSING

    def test_missing_contact_emails(self):
        assert score_email([], "john@acme.com", 50).rule is MatchRule.MISSING


class TestScoreMatch:
    """Test whole-profile scoring."""

    def test_scenario_full_identity(self, john_doe, john_doe_profile):
        """Same email, name and company plus a related location."""
        breakdown = score_match(john_doe, john_doe_profile, CONFIG)
        assert breakdown.email.points == 50
        assert breakdown.name.points == 30
        assert breakdown.company.points == 15
        assert breakdown.location.rule is MatchRule.SHARED_TOKEN
        assert breakdown.total == 103
        assert breakdown.total >= 95

    def test_scenario_nickname_only(self):
        contact = Contact(full_name="William Smith")
        profile = CandidateProfile(url="https://www.linkedin.com/in/bill-smith", name="Bill Smith")
        breakdown = score_match(contact, profile, CONFIG)
        assert breakdown.name.points == CONFIG.weights.name
        assert breakdown.total == 30

    def test_scenario_company_abbreviation(self):
        contact = Contact(full_name="Pat Kim", company="IBM")
        profile = CandidateProfile(
            url="https://www.linkedin.com/in/pat-kim",
            name="Pat Kim",
            company="International Business Machines",
        )
        breakdown = score_match(contact, profile, CONFIG)
        assert breakdown.company.similarity == 1.0
        assert breakdown.company.points == 15

    def test_scenario_location_abbreviation(self):
        contact = Contact(full_name="Pat Kim", location="SF")
        profile = CandidateProfile(url="https://www.linkedin.com/in/pat-kim", name="Pat Kim", location="San Francisco")
        breakdown = score_match(contact, profile, CONFIG)
        assert breakdown.location.similarity == 1.0
        assert breakdown.location.points == 10

    def test_exact_email_beats_domain_by_half_weight(self, john_doe):
        exact = CandidateProfile(url="https://www.linkedin.com/in/a", name="John Doe", email="john.doe@acme.com")
        domain = CandidateProfile(url="https://www.linkedin.com/in/b", name="John Doe", email="jdoe@acme.com")
        diff = score_match(john_doe, exact, CONFIG).total - score_match(john_doe, domain, CONFIG).total
        assert diff == 25

    def test_name_below_threshold_contributes_nothing(self, john_doe, stranger_profile):
        breakdown = score_match(john_doe, stranger_profile, CONFIG)
        assert breakdown.name.points == 0
        assert breakdown.name.rule is MatchRule.BELOW_THRESHOLD
        assert breakdown.name.similarity < CONFIG.name_threshold

    def test_name_threshold_boundary(self):
        """A similarity exactly at the threshold scores; just above it does not."""
        contact = Contact(full_name="John Doe")
        profile = CandidateProfile(url="https://www.linkedin.com/in/jon-doe", name="Jon Doe")
        similarity = compare_names(contact.full_name, profile.name).similarity
        assert 0 < similarity < 1

        at = score_match(contact, profile, MatchingConfig.create(name_threshold=similarity))
        above = score_match(contact, profile, MatchingConfig.create(name_threshold=similarity + 1e-9))
        below = score_match(contact, profile, MatchingConfig.create(name_threshold=similarity - 1e-9))

        assert at.name.points > 0
        assert below.name.points == at.name.points
        assert above.name.points == 0
        assert above.name.rule is MatchRule.BELOW_THRESHOLD

    def test_closer_title_never_scores_lower(self, john_doe):
        """Making the headline textually closer keeps the other components fixed and never lowers its own."""
        headlines = ["Pastry Chef", "Senior Software Engineer at Acme", "Software Engineer"]
        breakdowns = [
            score_match(
                john_doe,
                CandidateProfile(url="https://www.linkedin.com/in/john-doe", name="John Doe", headline=h),
                CONFIG,
            )
            for h in headlines
        ]

        points = [b.job_title.points for b in breakdowns]
        assert points == sorted(points)
        assert points[-1] == CONFIG.weights.job_title
        assert len({(b.email, b.name, b.company, b.location) for b in breakdowns}) == 1
        totals = [b.total for b in breakdowns]
        assert totals == sorted(totals)

    def test_company_below_threshold_contributes_nothing(self, john_doe, stranger_profile):
        breakdown = score_match(john_doe, stranger_profile, CONFIG)
        assert breakdown.company.points == 0
        assert breakdown.company.rule is MatchRule.BELOW_THRESHOLD

    def test_absent_fields_are_missing(self, john_doe):
        profile = CandidateProfile(url="https://www.linkedin.com/in/john-doe", name="John Doe")
        breakdown = score_match(john_doe, profile, CONFIG)
        for component in (breakdown.email, breakdown.company, breakdown.location, breakdown.job_title):
            assert component.rule is MatchRule.MISSING
            assert component.points == 0

    def test_blank_names_score_no_name_points(self):
        contact = Contact(full_name="   ")
        profile = CandidateProfile(url="https://www.linkedin.com/in/x", name="")
        assert score_match(contact, profile, CONFIG).name.rule is MatchRule.MISSING

    def test_job_title_compared_with_headline(self, john_doe):
        profile = CandidateProfile(
            url="https://www.linkedin.com/in/john-doe",
            name="John Doe",
            headline="Senior Software Engineer at Acme",
        )
        breakdown = score_match(john_doe, profile, CONFIG)
        assert breakdown.job_title.rule is MatchRule.CONTAINMENT
        assert breakdown.job_title.points == pytest.approx(4.5)

    def test_perfect_match_reaches_max_score(self, john_doe):
        profile = CandidateProfile(
            url="https://www.linkedin.com/in/john-doe",
            name="John Doe",
            email="john.doe@acme.com",
            company="Acme Corp",
            location="San Francisco, CA",
            headline="Software Engineer",
        )
        assert score_match(john_doe, profile, CONFIG).total == 110

    def test_components_within_weights(self, john_doe, john_doe_profile, stranger_profile):
        config = MatchingConfig.create(weights={"name": 40}, algorithm="levenshtein")
        weights = dict(
            email=config.weights.email,
            name=config.weights.name,
            company=config.weights.company,
            location=config.weights.location,
            job_title=config.weights.job_title,
        )
        for profile in (john_doe_profile, stranger_profile):
            breakdown = score_match(john_doe, profile, config)
            for name, component in breakdown.components():
                assert 0 <= component.points <= weights[name]
            assert 0 <= breakdown.total <= config.max_score

    def test_fractional_weights_cap_total(self, john_doe):
        """Half-up rounding never lifts the total above the weight sum."""
        config = MatchingConfig.create(
            weights={"email": 0.3, "name": 0.3, "company": 0.3, "location": 0.3, "job_title": 0.3}
        )
        profile = CandidateProfile(
            url="https://www.linkedin.com/in/john-doe",
            name="John Doe",
            email="john.doe@acme.com",
            company="Acme Corp",
            location="San Francisco, CA",
            headline="Software Engineer",
        )
        breakdown = score_match(john_doe, profile, config)
        assert breakdown.raw_total() == pytest.approx(1.5)
        assert breakdown.total == 1
        assert breakdown.total <= config.max_score

    def test_total_is_rounded_sum(self, john_doe, john_doe_profile):
        breakdown = score_match(john_doe, john_doe_profile, CONFIG)
        assert breakdown.total == round_half_up(breakdown.raw_total())

    def test_higher_weight_never_lowers_score(self, john_doe, john_doe_profile):
        low = score_match(john_doe, john_doe_profile, MatchingConfig.create(weights={"company": 5}))
        high = score_match(john_doe, john_doe_profile, MatchingConfig.create(weights={"company": 25}))
        assert high.total >= low.total

    def test_deterministic(self, john_doe, john_doe_profile):
        assert score_match(john_doe, john_doe_profile, CONFIG) == score_match(john_doe, john_doe_profile, CONFIG)
