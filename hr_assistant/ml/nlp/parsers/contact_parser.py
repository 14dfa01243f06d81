"""
Contact information parser.

Pattern/heuristic extraction of emails, phone numbers, profile URLs, names
and locations, plus the merge rules that combine it with model-based
extraction.
"""

import re
from typing import Optional

from hr_assistant.data.models import ContactInfo
from hr_assistant.utils.logger import get_logger

logger = get_logger(__name__)


class ContactParser:
    """Parser for extracting contact information from document text."""

    # Email pattern
    EMAIL_PATTERN = re.compile(
        r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"
    )

    # Phone patterns (various formats)
    PHONE_PATTERNS = [
        # US formats
        re.compile(r"\+?1?[-.\s]?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b"),
        # International
        re.compile(r"\+\d{1,3}[-.\s]?\d{1,4}[-.\s]?\d{1,4}[-.\s]?\d{1,9}"),
        # General
        re.compile(r"\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b"),
    ]

    LINKEDIN_PATTERN = re.compile(
        r"(?:https?://)?(?:www\.)?linkedin\.com/in/[\w\-]+/?",
        re.IGNORECASE,
    )

    GITHUB_PATTERN = re.compile(
        r"(?:https?://)?(?:www\.)?github\.com/[\w\-]+/?",
        re.IGNORECASE,
    )

    WEBSITE_PATTERN = re.compile(
        r"(?:https?://)?(?:www\.)?[\w\-]+\.(?:com|io|dev|me|org|net|co)(?:/[\w\-./]*)?",
        re.IGNORECASE,
    )

    # "City, ST" or "City, Country"
    CITY_STATE_PATTERN = re.compile(
        r"\b([A-Z][a-z]+(?:\s[A-Z][a-z]+)?)\s*,\s*([A-Z]{2}|[A-Z][a-z]+(?:\s[A-Z][a-z]+)?)\b"
    )
    LOCATION_LABEL_PATTERN = re.compile(
        r"^\s*(?:location|address|based in)\s*[:\-]\s*(.+)$",
        re.IGNORECASE | re.MULTILINE,
    )

    SKIP_DOMAINS = ("google.com", "facebook.com", "twitter.com", "indeed.com")

    # Words that rule a line out as a name
    NAME_STOPWORDS = {
        "resume", "cv", "curriculum", "vitae", "page", "of",
        "phone", "email", "address", "linkedin", "github",
        "objective", "summary", "experience", "education", "skills",
        "references", "available", "upon", "request", "policy",
        "job", "description", "position", "handbook",
    }

    def parse(self, text: str, header_lines: int = 20) -> ContactInfo:
        """
        Parse contact information from document text.

        Emails and phones are searched in the whole text; the first match is
        primary and further distinct matches go to ``other_identifiers``.
        Name and location are only looked for in the first ``header_lines``.
        """
        header_text = "\n".join(text.split("\n")[:header_lines])

        emails = self._extract_emails(text)
        phones = self._extract_phones(text)
        linkedin = self._extract_url(self.LINKEDIN_PATTERN, text)
        github = self._extract_url(self.GITHUB_PATTERN, text)
        portfolio = self._extract_portfolio(text, exclude=[linkedin, github])

        others = emails[1:] + phones[1:]

        return ContactInfo(
            full_name=self._extract_name(header_text),
            email=emails[0] if emails else None,
            phone=phones[0] if phones else None,
            location=self._extract_location(header_text),
            linkedin_url=linkedin,
            github_url=github,
            portfolio_url=portfolio,
            other_identifiers=others,
        )

    def _extract_emails(self, text: str) -> list[str]:
        """All distinct email addresses, lower-cased, in order of appearance."""
        seen: list[str] = []
        for email in self.EMAIL_PATTERN.findall(text):
            email = email.lower()
            if email not in seen:
                seen.append(email)
        return seen

    def _extract_phones(self, text: str) -> list[str]:
        """All distinct phone numbers with at least 10 digits."""
        found: list[str] = []
        digit_keys: set[str] = set()
        for pattern in self.PHONE_PATTERNS:
            for match in pattern.finditer(text):
                phone = match.group(0).strip()
                digits = re.sub(r"\D", "", phone)
                if len(digits) < 10 or digits[-10:] in digit_keys:
                    continue
                digit_keys.add(digits[-10:])
                found.append(phone)
        return found

    @staticmethod
    def _extract_url(pattern: re.Pattern, text: str) -> Optional[str]:
        match = pattern.search(text)
        if match:
            url = match.group(0)
            if not url.startswith("http"):
                url = "https://" + url
            return url
        return None

    def _extract_portfolio(
        self, text: str, exclude: Optional[list[Optional[str]]] = None
    ) -> Optional[str]:
        """Extract portfolio/personal website URL."""
        exclude = [u for u in (exclude or []) if u]
        # Email domains are not websites
        text = self.EMAIL_PATTERN.sub(" ", text)

        for url in self.WEBSITE_PATTERN.findall(text):
            lowered = url.lower()
            if "linkedin.com" in lowered or "github.com" in lowered:
                continue
            if any(url in ex for ex in exclude):
                continue
            if any(domain in lowered for domain in self.SKIP_DOMAINS):
                continue

            if not url.startswith("http"):
                url = "https://" + url
            return url

        return None

    def _extract_name(self, text: str) -> Optional[str]:
        """
        Extract a person's name from the document header.

        Uses heuristics since the name is typically the first prominent line.
        """
        for line in text.split("\n")[:10]:
            line = line.strip()

            if not line or len(line) < 3 or len(line) > 50:
                continue

            line_lower = line.lower()
            if any(word in line_lower.split() for word in self.NAME_STOPWORDS):
                continue

            if self.EMAIL_PATTERN.search(line) or any(p.search(line) for p in self.PHONE_PATTERNS):
                continue

            if "http" in line_lower or ".com" in line_lower:
                continue

            # All-caps short lines are usually section headers
            if line.isupper() and len(line.split()) <= 2:
                continue

            words = line.split()
            if 2 <= len(words) <= 4 and all(
                word[0].isupper() and word.replace("-", "").replace("'", "").replace(".", "").isalpha()
                for word in words
            ):
                return line

        return None

    def _extract_location(self, text: str) -> Optional[str]:
        """Extract a location string from labelled lines or ``City, ST`` patterns."""
        labelled = self.LOCATION_LABEL_PATTERN.search(text)
        if labelled:
            return labelled.group(1).strip()

        for line in text.split("\n"):
            if self.EMAIL_PATTERN.search(line):
                line = self.EMAIL_PATTERN.sub(" ", line)
            match = self.CITY_STATE_PATTERN.search(line)
            if match:
                return f"{match.group(1)}, {match.group(2)}"

        return None


def _add_identifier(identifiers: list[str], value: Optional[str], *exclude: Optional[str]) -> None:
    if not value:
        return
    key = value.strip().lower()
    if key in {e.strip().lower() for e in exclude if e}:
        return
    if key not in {i.strip().lower() for i in identifiers}:
        identifiers.append(value.strip())


def merge_contact_info(
    pattern_info: Optional[ContactInfo],
    model_info: Optional[ContactInfo],
) -> Optional[ContactInfo]:
    """
    Merge pattern-based and model-based contact info.

    Precedence:
    - email, phone and profile URLs: the pattern value wins; a differing
      model value is kept in ``other_identifiers``.
    - name and location: the model value wins when present, since it is
      better at reading free-form headers; the pattern value fills gaps.
    - ``other_identifiers`` from both sides are unioned without duplicates.
    """
    if pattern_info is None and model_info is None:
        return None
    if model_info is None:
        return pattern_info
    if pattern_info is None:
        return model_info

    identifiers: list[str] = []
    merged: dict[str, Optional[str]] = {}

    for field_name in ("email", "phone", "linkedin_url", "github_url", "portfolio_url"):
        pattern_value = getattr(pattern_info, field_name)
        model_value = getattr(model_info, field_name)
        merged[field_name] = pattern_value or model_value
        if pattern_value and model_value:
            _add_identifier(identifiers, model_value, pattern_value)

    for field_name in ("full_name", "location"):
        merged[field_name] = getattr(model_info, field_name) or getattr(pattern_info, field_name)

    primary = [merged["email"], merged["phone"]]
    for value in pattern_info.other_identifiers + model_info.other_identifiers:
        _add_identifier(identifiers, value, *primary)

    return ContactInfo(**merged, other_identifiers=identifiers)
