"""
Lexicon-based sentiment scoring.
"""

import re

from hr_assistant.data.models import SentimentResult
from hr_assistant.utils.constants import NEGATIVE_WORDS, POSITIVE_WORDS, SentimentLabel

WORD_PATTERN = re.compile(r"[a-z']+")
NEGATIONS = {"not", "no", "never", "without", "don't", "didn't", "isn't", "wasn't"}


class SentimentParser:
    """Scores tone in [-1, 1] from positive/negative word counts."""

    def parse(self, text: str) -> SentimentResult:
        words = WORD_PATTERN.findall(text.lower())
        positive = negative = 0

        for i, word in enumerate(words):
            negated = i > 0 and words[i - 1] in NEGATIONS
            if word in POSITIVE_WORDS:
                if negated:
                    negative += 1
                else:
                    positive += 1
            elif word in NEGATIVE_WORDS:
                if negated:
                    positive += 1
                else:
                    negative += 1

        total = positive + negative
        score = 0.0 if total == 0 else round((positive - negative) / total, 3)

        return SentimentResult(
            label=SentimentLabel.from_score(score),
            score=score,
            source="lexicon",
        )
