"""
Tests for hr_assistant.utils.constants — enums, label mappings, MIME tables.
"""

import pytest

from hr_assistant.utils.constants import (
    EXTENSION_TO_MIME,
    MIME_DOCX,
    MIME_PDF,
    NO_CONTEXT_MARKER,
    SKILL_CATEGORIES,
    SUPPORTED_MIME_TYPES,
    AuditAction,
    DocumentStatus,
    DocumentType,
    ExperienceLevel,
    SentimentLabel,
)


# ── ExperienceLevel.from_label() ────────────────────────────────────────────


class TestExperienceLevelFromLabel:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("entry", ExperienceLevel.JUNIOR),
            ("Entry-Level", ExperienceLevel.JUNIOR),
            ("intern", ExperienceLevel.JUNIOR),
            ("mid-level", ExperienceLevel.MID),
            ("intermediate", ExperienceLevel.MID),
            ("Senior", ExperienceLevel.SENIOR),
            ("executive", ExperienceLevel.SENIOR),
            ("principal", ExperienceLevel.SENIOR),
        ],
    )
    def test_known_labels_map_to_closed_set(self, label, expected):
        assert ExperienceLevel.from_label(label) == expected

    def test_unmapped_label_is_unknown(self):
        assert ExperienceLevel.from_label("wizard") == ExperienceLevel.UNKNOWN

    def test_none_is_unknown(self):
        assert ExperienceLevel.from_label(None) == ExperienceLevel.UNKNOWN

    def test_surrounding_whitespace_ignored(self):
        assert ExperienceLevel.from_label("  lead ") == ExperienceLevel.SENIOR


# ── SentimentLabel ──────────────────────────────────────────────────────────


class TestSentimentLabel:
    def test_from_label_maps_synonyms(self):
        assert SentimentLabel.from_label("Favourable") == SentimentLabel.POSITIVE
        assert SentimentLabel.from_label("mixed") == SentimentLabel.NEUTRAL
        assert SentimentLabel.from_label("critical") == SentimentLabel.NEGATIVE

    def test_from_label_unknown_returns_none(self):
        assert SentimentLabel.from_label("ecstatic-ish") is None
        assert SentimentLabel.from_label("") is None

    def test_from_score_positive(self):
        assert SentimentLabel.from_score(0.5) == SentimentLabel.POSITIVE

    def test_from_score_negative(self):
        assert SentimentLabel.from_score(-0.5) == SentimentLabel.NEGATIVE

    def test_from_score_neutral_band(self):
        assert SentimentLabel.from_score(0.1) == SentimentLabel.NEUTRAL
        assert SentimentLabel.from_score(-0.1) == SentimentLabel.NEUTRAL
        assert SentimentLabel.from_score(0.0) == SentimentLabel.NEUTRAL


# ── Enum value correctness ──────────────────────────────────────────────────


class TestDocumentStatus:
    def test_all_values_present(self):
        assert {s.value for s in DocumentStatus} == {"pending", "processing", "completed", "error"}


class TestDocumentType:
    def test_all_values_present(self):
        assert {t.value for t in DocumentType} == {"resume", "job_description", "policy", "other"}


class TestAuditAction:
    def test_values_are_snake_case(self):
        for action in AuditAction:
            assert action.value == action.value.lower()
            assert " " not in action.value


# ── MIME tables ─────────────────────────────────────────────────────────────


class TestMimeTables:
    def test_every_extension_maps_to_supported_type(self):
        for mime in EXTENSION_TO_MIME.values():
            assert mime in SUPPORTED_MIME_TYPES

    def test_legacy_word_not_supported(self):
        assert "application/msword" not in SUPPORTED_MIME_TYPES

    def test_pdf_and_docx_extensions(self):
        assert EXTENSION_TO_MIME[".pdf"] == MIME_PDF
        assert EXTENSION_TO_MIME[".docx"] == MIME_DOCX


class TestMiscConstants:
    def test_no_context_marker(self):
        assert NO_CONTEXT_MARKER == "NO_SUPPORTING_CONTEXT"

    def test_skill_categories_are_lowercase(self):
        for skills in SKILL_CATEGORIES.values():
            for skill in skills:
                assert skill == skill.lower()
