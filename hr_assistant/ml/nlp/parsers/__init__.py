"""
Section parsers for extracting structured information.

Each parser is responsible for one kind of information (contact info,
skills, experience evidence, keywords, summary, sentiment, document type).
"""

from .contact_parser import ContactParser, merge_contact_info
from .skills_parser import SkillsParser, ExtractedSkill, SkillsParseResult, get_skills_parser
from .experience_parser import ExperienceParser, ExperienceSignals, classify_experience_level
from .keyword_parser import KeywordParser, tokenize
from .summary_parser import SummaryParser, SummaryParseResult, split_sentences, truncate_text
from .sentiment_parser import SentimentParser
from .document_type_parser import classify_document_type

__all__ = [
    "ContactParser",
    "merge_contact_info",
    "SkillsParser",
    "ExtractedSkill",
    "SkillsParseResult",
    "get_skills_parser",
    "ExperienceParser",
    "ExperienceSignals",
    "classify_experience_level",
    "KeywordParser",
    "tokenize",
    "SummaryParser",
    "SummaryParseResult",
    "split_sentences",
    "truncate_text",
    "SentimentParser",
    "classify_document_type",
]
