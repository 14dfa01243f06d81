"""
Generation provider integration.

- client: async chat client with retries
- json_utils: JSON extraction from model output
- prompts: prompt templates
"""

from .client import LLMClient, OpenAIChatClient, get_llm_client
from .json_utils import extract_json, require_object

__all__ = [
    "LLMClient",
    "OpenAIChatClient",
    "get_llm_client",
    "extract_json",
    "require_object",
]
