"""
Keyword extraction.

Known skills lead (in order of first mention), followed by the most
frequent content words. Matching is case-insensitive; the first spelling
seen is kept.
"""

import re
from collections import Counter
from typing import Optional

from hr_assistant.utils.constants import STOPWORDS

from .skills_parser import SkillsParser, get_skills_parser

TOKEN_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9+#]*(?:[.\-][A-Za-z0-9+#]+)*")


def tokenize(text: str) -> list[str]:
    """Lower-cased content tokens with stopwords removed."""
    return [
        token.lower()
        for token in TOKEN_PATTERN.findall(text)
        if token.lower() not in STOPWORDS
    ]


class KeywordParser:
    """Extracts a bounded, deduplicated keyword list."""

    MIN_TOKEN_LENGTH = 3

    def __init__(self, max_keywords: int = 15, skills_parser: Optional[SkillsParser] = None):
        self.max_keywords = max_keywords
        self.skills_parser = skills_parser or get_skills_parser()

    def parse(self, text: str) -> list[str]:
        keywords: list[str] = []
        seen: set[str] = set()

        def add(term: str) -> None:
            key = term.lower()
            if key not in seen and len(keywords) < self.max_keywords:
                seen.add(key)
                keywords.append(term)

        for skill in self.skills_parser.parse(text).skills:
            add(skill.name)

        counts: Counter[str] = Counter()
        first_spelling: dict[str, str] = {}
        first_position: dict[str, int] = {}
        for position, match in enumerate(TOKEN_PATTERN.finditer(text)):
            token = match.group(0)
            key = token.lower()
            if key in STOPWORDS or len(key) < self.MIN_TOKEN_LENGTH:
                continue
            counts[key] += 1
            first_spelling.setdefault(key, token)
            first_position.setdefault(key, position)

        # Frequency first, then earliest mention, so the order is stable
        for key in sorted(counts, key=lambda k: (-counts[k], first_position[k])):
            add(first_spelling[key])

        return keywords
