"""
Tests for hr_assistant.ml.nlp.parsers.sentiment_parser — lexicon sentiment.
"""

import pytest

from hr_assistant.ml.nlp.parsers import SentimentParser
from hr_assistant.utils.constants import SentimentLabel


@pytest.fixture
def parser():
    return SentimentParser()


class TestSentimentParser:
    def test_positive(self, parser):
        result = parser.parse("Excellent work, achieved great results.")
        assert result.label == SentimentLabel.POSITIVE
        assert result.score == pytest.approx(1.0)
        assert result.source == "lexicon"

    def test_negative(self, parser):
        result = parser.parse("Poor attendance led to a disciplinary warning.")
        assert result.label == SentimentLabel.NEGATIVE
        assert result.score < 0

    def test_negation_flips_word(self, parser):
        result = parser.parse("The review was not good.")
        assert result.label == SentimentLabel.NEGATIVE
        assert result.score == pytest.approx(-1.0)

    def test_balanced_is_neutral(self, parser):
        result = parser.parse("Good onboarding, bad parking.")
        assert result.label == SentimentLabel.NEUTRAL
        assert result.score == 0.0

    def test_no_sentiment_words(self, parser):
        result = parser.parse("The meeting is on Tuesday.")
        assert result.label == SentimentLabel.NEUTRAL
        assert result.score == 0.0

    def test_score_bounded(self, parser):
        result = parser.parse("great " * 50 + "bad")
        assert -1.0 <= result.score <= 1.0
