"""
NLP pipeline for the HR assistant.

Provides text extraction, preprocessing, and structured analysis of HR
documents (resumes, job descriptions, policies).

Main Components:
- TextExtractor: Format-aware text extraction (PDF, DOCX, plain text)
- TextPreprocessor: Text cleaning and section detection
- DocumentAnalyzer: Concurrent, failure-isolated analysis orchestrator
- ContactParser: Contact information extraction
- SkillsParser: Skills extraction and categorization
- ExperienceParser: Experience evidence for level classification
"""

from .preprocessor import (
    TextPreprocessor,
    PreprocessedText,
    TextSection,
    SECTION_HEADERS,
)

from .extractors import (
    ExtractorFactory,
    ExtractionResult,
    BaseExtractor,
    PDFExtractor,
    DOCXExtractor,
    PlainTextExtractor,
    NormalizedText,
    TextExtractor,
    resolve_mime_type,
)

from .parsers import (
    ContactParser,
    SkillsParser,
    ExtractedSkill,
    ExperienceParser,
    ExperienceSignals,
    KeywordParser,
    SummaryParser,
    SentimentParser,
    classify_document_type,
    classify_experience_level,
    merge_contact_info,
)

from .document_analyzer import DocumentAnalyzer, ModelContactExtractor

__all__ = [
    # Preprocessor
    "TextPreprocessor",
    "PreprocessedText",
    "TextSection",
    "SECTION_HEADERS",
    # Extractors
    "ExtractorFactory",
    "ExtractionResult",
    "BaseExtractor",
    "PDFExtractor",
    "DOCXExtractor",
    "PlainTextExtractor",
    "NormalizedText",
    "TextExtractor",
    "resolve_mime_type",
    # Parsers
    "ContactParser",
    "SkillsParser",
    "ExtractedSkill",
    "ExperienceParser",
    "ExperienceSignals",
    "KeywordParser",
    "SummaryParser",
    "SentimentParser",
    "classify_document_type",
    "classify_experience_level",
    "merge_contact_info",
    # Analyzer
    "DocumentAnalyzer",
    "ModelContactExtractor",
]
