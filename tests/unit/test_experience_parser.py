"""
Tests for hr_assistant.ml.nlp.parsers.experience_parser — experience
signals and level classification.
"""

from datetime import date

import pytest

from hr_assistant.ml.nlp.parsers import (
    ExperienceParser,
    ExperienceSignals,
    classify_experience_level,
)
from hr_assistant.utils.constants import ExperienceLevel

from conftest import JOB_TEXT, POLICY_TEXT, RESUME_TEXT

TODAY = date(2024, 1, 1)


@pytest.fixture
def parser():
    return ExperienceParser()


# ── ExperienceParser.parse() ────────────────────────────────────────────────


class TestStatedYears:
    def test_years_mention(self, parser):
        assert parser.parse("8 years of experience", today=TODAY).stated_years == 8.0

    def test_plus_and_abbreviation(self, parser):
        assert parser.parse("10+ yrs in recruiting", today=TODAY).stated_years == 10.0

    def test_largest_mention_wins(self, parser):
        assert parser.parse("2 years Go, 5 years Python", today=TODAY).stated_years == 5.0

    def test_implausible_value_ignored(self, parser):
        assert parser.parse("75 years of tradition", today=TODAY).stated_years is None


class TestDatedYears:
    def test_range_to_present(self, parser):
        signals = parser.parse("Jan 2018 - Present", today=TODAY)
        assert signals.dated_years == pytest.approx(6.0)

    def test_overlapping_ranges_merged(self, parser):
        signals = parser.parse("2015 - 2018\n2017 - 2020", today=TODAY)
        assert signals.dated_years == pytest.approx(5.0)

    def test_future_end_ignored(self, parser):
        assert parser.parse("2020 - 2030", today=TODAY).dated_years is None

    def test_inverted_range_ignored(self, parser):
        assert parser.parse("2020 - 2015", today=TODAY).dated_years is None


class TestTitles:
    def test_senior_titles(self, parser):
        signals = parser.parse("Senior Software Engineer, then Senior Lead", today=TODAY)
        assert signals.senior_titles == ["senior", "lead"]

    def test_junior_titles(self, parser):
        assert parser.parse("Summer Intern", today=TODAY).junior_titles == ["intern"]


# ── classify_experience_level() ─────────────────────────────────────────────


class TestClassifyExperienceLevel:
    @pytest.mark.parametrize(
        "years, expected",
        [
            (8.0, ExperienceLevel.SENIOR),
            (6.0, ExperienceLevel.SENIOR),
            (4.0, ExperienceLevel.MID),
            (1.5, ExperienceLevel.JUNIOR),
        ],
    )
    def test_years_decide(self, years, expected):
        assert classify_experience_level(ExperienceSignals(stated_years=years)) == expected

    def test_years_override_titles(self):
        signals = ExperienceSignals(stated_years=1.0, senior_titles=["senior"])
        assert classify_experience_level(signals) == ExperienceLevel.JUNIOR

    def test_senior_title_without_years(self):
        assert classify_experience_level(ExperienceSignals(senior_titles=["lead"])) == ExperienceLevel.SENIOR

    def test_junior_title_without_years(self):
        assert classify_experience_level(ExperienceSignals(junior_titles=["intern"])) == ExperienceLevel.JUNIOR

    def test_no_evidence_is_unknown(self):
        signals = ExperienceSignals()
        assert not signals.has_signal
        assert classify_experience_level(signals) == ExperienceLevel.UNKNOWN

    def test_custom_thresholds(self):
        signals = ExperienceSignals(stated_years=4.0)
        assert classify_experience_level(signals, senior_years=4.0) == ExperienceLevel.SENIOR

    def test_years_prefers_larger_source(self):
        assert ExperienceSignals(stated_years=3.0, dated_years=7.5).years == 7.5


class TestSampleDocuments:
    def test_resume_is_senior(self, parser):
        assert classify_experience_level(parser.parse(RESUME_TEXT, today=TODAY)) == ExperienceLevel.SENIOR

    def test_job_description_is_mid(self, parser):
        assert classify_experience_level(parser.parse(JOB_TEXT, today=TODAY)) == ExperienceLevel.MID

    def test_policy_is_unknown(self, parser):
        assert classify_experience_level(parser.parse(POLICY_TEXT, today=TODAY)) == ExperienceLevel.UNKNOWN
