"""
Experience signal parser.

Derives years of experience (stated "N years" mentions and dated role
ranges) and seniority title cues, and buckets them into an
``ExperienceLevel``.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from hr_assistant.utils.constants import ExperienceLevel
from hr_assistant.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ExperienceSignals:
    """Raw experience evidence found in a document."""

    stated_years: Optional[float] = None
    dated_years: Optional[float] = None
    senior_titles: list[str] = field(default_factory=list)
    junior_titles: list[str] = field(default_factory=list)

    @property
    def years(self) -> Optional[float]:
        """Best estimate of total years (largest of the two sources)."""
        values = [v for v in (self.stated_years, self.dated_years) if v]
        return max(values) if values else None

    @property
    def has_signal(self) -> bool:
        return bool(self.years or self.senior_titles or self.junior_titles)


class ExperienceParser:
    """Parser for experience-level evidence."""

    MONTH_NAMES = [
        "january", "february", "march", "april", "may", "june",
        "july", "august", "september", "october", "november", "december",
        "jan", "feb", "mar", "apr", "may", "jun",
        "jul", "aug", "sep", "oct", "nov", "dec",
    ]

    # "7 years", "10+ years", "3.5 yrs"
    YEARS_PATTERN = re.compile(
        r"\b(\d{1,2}(?:\.\d)?)\s*\+?\s*(?:years?|yrs?)\b",
        re.IGNORECASE,
    )

    # Pattern for date ranges like "Jan 2019 - Present", "2015 to 2020"
    DATE_RANGE_PATTERN = re.compile(
        r"("
        r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|jun(?:e)?|"
        r"jul(?:y)?|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
        r"[,.\s]*\d{4}|\d{1,2}[/\-]\d{4}|\d{4}"
        r")"
        r"\s*(?:-|\u2013|\u2014|to)\s*"
        r"("
        r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|jun(?:e)?|"
        r"jul(?:y)?|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
        r"[,.\s]*\d{4}|\d{1,2}[/\-]\d{4}|\d{4}|present|current|now|ongoing"
        r")",
        re.IGNORECASE,
    )

    SENIOR_TITLE_PATTERN = re.compile(
        r"\b(senior|sr\.|lead|principal|staff (?:engineer|scientist|developer)|"
        r"head of|director|vice president|vp of|chief|cto|ceo|cfo|coo|chro|executive)\b",
        re.IGNORECASE,
    )
    JUNIOR_TITLE_PATTERN = re.compile(
        r"\b(junior|jr\.|intern|internship|trainee|apprentice|graduate|entry[- ]level)\b",
        re.IGNORECASE,
    )

    # Ignore implausible spans (typos, birth years)
    MAX_STATED_YEARS = 50
    MIN_RANGE_YEAR = 1950

    def parse(self, text: str, today: Optional[date] = None) -> ExperienceSignals:
        """Collect experience evidence from text."""
        return ExperienceSignals(
            stated_years=self._extract_stated_years(text),
            dated_years=self._extract_dated_years(text, today or date.today()),
            senior_titles=self._unique_matches(self.SENIOR_TITLE_PATTERN, text),
            junior_titles=self._unique_matches(self.JUNIOR_TITLE_PATTERN, text),
        )

    def _extract_stated_years(self, text: str) -> Optional[float]:
        values = [
            float(m.group(1))
            for m in self.YEARS_PATTERN.finditer(text)
            if 0 < float(m.group(1)) <= self.MAX_STATED_YEARS
        ]
        return max(values) if values else None

    def _extract_dated_years(self, text: str, today: date) -> Optional[float]:
        """Total years covered by date ranges, with overlaps merged."""
        intervals: list[tuple[date, date]] = []
        for match in self.DATE_RANGE_PATTERN.finditer(text):
            start = self._parse_date(match.group(1))
            end_raw = match.group(2).strip().lower()
            end = today if end_raw in ("present", "current", "now", "ongoing") else self._parse_date(end_raw)
            if not start or not end or end < start or end > today:
                continue
            if start.year < self.MIN_RANGE_YEAR:
                continue
            intervals.append((start, end))

        if not intervals:
            return None

        intervals.sort()
        total_days = 0
        current_start, current_end = intervals[0]
        for start, end in intervals[1:]:
            if start <= current_end:
                current_end = max(current_end, end)
            else:
                total_days += (current_end - current_start).days
                current_start, current_end = start, end
        total_days += (current_end - current_start).days

        years = round(total_days / 365.25, 1)
        return years or None

    def _parse_date(self, date_str: str) -> Optional[date]:
        """Parse a date string into a date object."""
        if not date_str:
            return None

        date_str = date_str.strip().lower()

        month = 1  # Default to January
        for i, month_name in enumerate(self.MONTH_NAMES):
            if month_name in date_str:
                month = (i % 12) + 1
                break

        numeric = re.match(r"(\d{1,2})[/\-](\d{4})", date_str)
        if numeric and 1 <= int(numeric.group(1)) <= 12:
            month = int(numeric.group(1))

        year_match = re.search(r"\b(19|20)\d{2}\b", date_str)
        if year_match:
            return date(int(year_match.group(0)), month, 1)

        return None

    @staticmethod
    def _unique_matches(pattern: re.Pattern, text: str) -> list[str]:
        seen: list[str] = []
        for match in pattern.finditer(text):
            value = match.group(1).lower()
            if value not in seen:
                seen.append(value)
        return seen


def classify_experience_level(
    signals: ExperienceSignals,
    senior_years: float = 6.0,
    mid_years: float = 3.0,
) -> ExperienceLevel:
    """
    Bucket experience evidence into the closed level set.

    Years decide when present; otherwise seniority titles decide; with
    neither the level is UNKNOWN.
    """
    years = signals.years
    if years:
        if years >= senior_years:
            return ExperienceLevel.SENIOR
        if years >= mid_years:
            return ExperienceLevel.MID
        return ExperienceLevel.JUNIOR

    if signals.senior_titles:
        return ExperienceLevel.SENIOR
    if signals.junior_titles:
        return ExperienceLevel.JUNIOR
    return ExperienceLevel.UNKNOWN
