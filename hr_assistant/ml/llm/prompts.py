"""Prompt templates for analysis and answering."""

from hr_assistant.utils.constants import NO_CONTEXT_MARKER

SUMMARY_SYSTEM_PROMPT = (
    "You summarize HR documents (resumes, job descriptions, policies). "
    "Write a factual summary of at most {max_sentences} sentences. "
    "Do not add information that is not in the document."
)

SENTIMENT_SYSTEM_PROMPT = (
    "Classify the overall tone of the HR document. "
    'Respond with JSON only: {"label": "positive" | "neutral" | "negative", '
    '"score": number between -1 and 1}.'
)

CONTACT_SYSTEM_PROMPT = (
    "Extract the primary person's contact details from the document. "
    'Respond with JSON only: {"full_name": string|null, "email": string|null, '
    '"phone": string|null, "location": string|null, "linkedin_url": string|null, '
    '"github_url": string|null, "portfolio_url": string|null, '
    '"other_identifiers": [string]}. Use null for anything not present.'
)

ANSWER_SYSTEM_PROMPT = (
    "You are an HR assistant answering questions about the organization's documents. "
    "Answer only from the context block. Cite documents by their [n] label. "
    f"If the context is exactly {NO_CONTEXT_MARKER} or does not contain the answer, "
    "say that no supporting documents were found instead of guessing."
)


def document_message(filename: str, text: str) -> list[dict[str, str]]:
    """User message carrying one document."""
    return [{"role": "user", "content": f"Document: {filename}\n\n{text}"}]


def answer_messages(query: str, context_block: str) -> list[dict[str, str]]:
    """User message carrying the question and its context block."""
    return [
        {
            "role": "user",
            "content": f"Context:\n{context_block}\n\nQuestion: {query}",
        }
    ]
