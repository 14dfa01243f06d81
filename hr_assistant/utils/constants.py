"""
Application-wide constants for the HR assistant.

This module contains all constant values used throughout the application.
Modify these values to customize behavior without changing code logic.
"""

from enum import Enum
from typing import Final


# =============================================================================
# Application Constants
# =============================================================================

APP_NAME: Final[str] = "HR-Assistant"
APP_DISPLAY_NAME: Final[str] = "HR Assistant Document Intelligence"
VERSION: Final[str] = "0.1.0"


# =============================================================================
# File Types
# =============================================================================

MIME_PDF: Final[str] = "application/pdf"
MIME_DOCX: Final[str] = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MIME_TEXT: Final[str] = "text/plain"
MIME_MARKDOWN: Final[str] = "text/markdown"
MIME_OCTET_STREAM: Final[str] = "application/octet-stream"

SUPPORTED_MIME_TYPES: Final[tuple[str, ...]] = (
    MIME_PDF,
    MIME_DOCX,
    MIME_TEXT,
    MIME_MARKDOWN,
)

# Used when the declared type is missing or generic
EXTENSION_TO_MIME: Final[dict[str, str]] = {
    ".pdf": MIME_PDF,
    ".docx": MIME_DOCX,
    ".txt": MIME_TEXT,
    ".text": MIME_TEXT,
    ".md": MIME_MARKDOWN,
    ".markdown": MIME_MARKDOWN,
}

SUPPORTED_DOCUMENT_FORMATS: Final[tuple[str, ...]] = tuple(EXTENSION_TO_MIME)


# =============================================================================
# NLP Constants
# =============================================================================

# Common skill categories for extraction
SKILL_CATEGORIES: Final[dict[str, list[str]]] = {
    "programming_languages": [
        "python", "java", "javascript", "typescript", "c++", "c#", "go", "rust",
        "ruby", "php", "swift", "kotlin", "scala", "matlab", "sql",
    ],
    "frameworks": [
        "react", "angular", "vue", "django", "flask", "fastapi", "spring",
        "node.js", "express", ".net", "rails", "laravel", "tensorflow",
        "pytorch", "keras", "scikit-learn", "next.js",
    ],
    "databases": [
        "postgresql", "mysql", "mongodb", "redis", "elasticsearch", "cassandra",
        "oracle", "sql server", "sqlite", "dynamodb", "firebase", "supabase",
    ],
    "cloud_platforms": [
        "aws", "azure", "gcp", "google cloud", "heroku", "digitalocean",
        "kubernetes", "docker", "terraform", "ansible",
    ],
    "hr_practices": [
        "recruiting", "onboarding", "payroll", "performance management",
        "talent acquisition", "employee relations", "compensation", "benefits",
        "hris", "workday", "compliance", "training",
    ],
    "soft_skills": [
        "leadership", "communication", "teamwork", "problem-solving",
        "analytical", "creative", "adaptable", "organized", "detail-oriented",
    ],
}

# Terms ignored when ranking frequent keywords and tokenizing queries
STOPWORDS: Final[frozenset[str]] = frozenset(
    """
    a about above after again against all also am an and any are as at be because been
    before being below between both but by can could did do does doing down during each
    few for from further had has have having he her here hers herself him himself his how
    i if in into is it its itself just me more most my myself no nor not now of off on once
    only or other our ours ourselves out over own same she should so some such than that
    the their theirs them themselves then there these they this those through to too under
    until up very was we were what when where which while who whom why will with would you
    your yours yourself yourselves per via etc within using used use including include
    """.split()
)

# Sentiment lexicon used when no generation provider is configured
POSITIVE_WORDS: Final[frozenset[str]] = frozenset({
    "achieved", "excellent", "outstanding", "improved", "success", "successful",
    "successfully", "strong", "great", "good", "positive", "award", "awarded",
    "exceeded", "innovative", "passionate", "led", "delivered", "growth",
    "recognized", "effective", "efficient", "motivated", "proud", "happy",
    "excited", "thrilled", "welcome", "benefit", "benefits", "reward",
})
NEGATIVE_WORDS: Final[frozenset[str]] = frozenset({
    "failed", "failure", "poor", "bad", "negative", "terminated", "termination",
    "violation", "misconduct", "complaint", "complaints", "problem", "problems",
    "issue", "issues", "late", "warning", "disciplinary", "penalty", "unfortunately",
    "decline", "declined", "lost", "loss", "risk", "difficult", "unacceptable",
})

# Keywords that hint at the document's type, used by the rule-based classifier
DOCUMENT_TYPE_KEYWORDS: Final[dict[str, list[str]]] = {
    "resume": [
        "experience", "education", "skills", "curriculum vitae", "resume",
        "work history", "employment history", "references", "objective",
    ],
    "job_description": [
        "responsibilities", "requirements", "qualifications", "we are looking for",
        "job description", "apply", "what you'll do", "preferred", "role overview",
    ],
    "policy": [
        "policy", "procedure", "employees must", "handbook", "compliance",
        "effective date", "scope", "guidelines", "code of conduct",
    ],
}

# Marker handed to the generation provider when retrieval found nothing
NO_CONTEXT_MARKER: Final[str] = "NO_SUPPORTING_CONTEXT"


# =============================================================================
# Enums
# =============================================================================


class DocumentStatus(str, Enum):
    """Lifecycle status of an uploaded document."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class DocumentType(str, Enum):
    """Coarse classification of document content."""

    RESUME = "resume"
    JOB_DESCRIPTION = "job_description"
    POLICY = "policy"
    OTHER = "other"


# Free-form labels (from models or older records) mapped onto ExperienceLevel
EXPERIENCE_LABEL_MAP: Final[dict[str, str]] = {
    "junior": "junior",
    "entry": "junior",
    "entry-level": "junior",
    "entry level": "junior",
    "intern": "junior",
    "graduate": "junior",
    "associate": "junior",
    "mid": "mid",
    "mid-level": "mid",
    "mid level": "mid",
    "intermediate": "mid",
    "senior": "senior",
    "lead": "senior",
    "principal": "senior",
    "staff": "senior",
    "executive": "senior",
    "director": "senior",
}


class ExperienceLevel(str, Enum):
    """Closed set of experience levels."""

    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: str | None) -> "ExperienceLevel":
        """Map a free-form label onto the closed set; anything unmapped is UNKNOWN."""
        if not label:
            return cls.UNKNOWN
        mapped = EXPERIENCE_LABEL_MAP.get(label.strip().lower())
        return cls(mapped) if mapped else cls.UNKNOWN


# Free-form sentiment labels mapped onto SentimentLabel
SENTIMENT_LABEL_MAP: Final[dict[str, str]] = {
    "positive": "positive",
    "very positive": "positive",
    "favorable": "positive",
    "favourable": "positive",
    "optimistic": "positive",
    "neutral": "neutral",
    "mixed": "neutral",
    "objective": "neutral",
    "informational": "neutral",
    "negative": "negative",
    "very negative": "negative",
    "unfavorable": "negative",
    "unfavourable": "negative",
    "critical": "negative",
}

SENTIMENT_NEUTRAL_BAND: Final[float] = 0.1


class SentimentLabel(str, Enum):
    """Closed set of sentiment labels."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"

    @classmethod
    def from_label(cls, label: str | None) -> "SentimentLabel | None":
        """Map a free-form label; returns None when the label is not recognized."""
        if not label:
            return None
        mapped = SENTIMENT_LABEL_MAP.get(label.strip().lower())
        return cls(mapped) if mapped else None

    @classmethod
    def from_score(cls, score: float) -> "SentimentLabel":
        """Convert a score in [-1, 1] to a label."""
        if score > SENTIMENT_NEUTRAL_BAND:
            return cls.POSITIVE
        elif score < -SENTIMENT_NEUTRAL_BAND:
            return cls.NEGATIVE
        return cls.NEUTRAL


class QueryKind(str, Enum):
    """Kinds of logged queries."""

    SEARCH = "search"
    ANSWER = "answer"


class AuditAction(str, Enum):
    """Types of actions that can be audited."""

    DOCUMENT_INGESTED = "document_ingested"
    DOCUMENT_FAILED = "document_failed"
    ANALYSIS_COMPLETED = "analysis_completed"
    EMBEDDING_WRITTEN = "embedding_written"
    BACKFILL_RUN = "backfill_run"
    SEARCH_PERFORMED = "search_performed"
    ANSWER_GENERATED = "answer_generated"
