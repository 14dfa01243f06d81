"""
Rule-based document type classification.
"""

import re
from typing import Optional

from hr_assistant.utils.constants import DOCUMENT_TYPE_KEYWORDS, DocumentType


def classify_document_type(text: str, filename: Optional[str] = None) -> DocumentType:
    """
    Pick the type whose cue phrases occur most often.

    Filename hints ("resume", "cv", "policy", "jd") add one vote. Fewer than
    two votes in total yields OTHER.
    """
    lowered = text.lower()
    votes: dict[str, int] = {}

    for doc_type, cues in DOCUMENT_TYPE_KEYWORDS.items():
        votes[doc_type] = sum(
            1 for cue in cues if re.search(rf"\b{re.escape(cue)}\b", lowered)
        )

    if filename:
        name = filename.lower()
        if re.search(r"resume|\bcv\b|curriculum", name):
            votes["resume"] += 1
        if re.search(r"policy|handbook|procedure", name):
            votes["policy"] += 1
        if re.search(r"job|\bjd\b|posting|description", name):
            votes["job_description"] += 1

    best_type, best_votes = max(votes.items(), key=lambda item: item[1])
    if best_votes < 2:
        return DocumentType.OTHER
    return DocumentType(best_type)
