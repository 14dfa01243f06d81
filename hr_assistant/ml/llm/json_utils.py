"""Utilities for robustly extracting JSON from LLM responses."""

import json
import re
from typing import Any

_JSON_BLOCK = re.compile(r"(\{.*\}|\[.*\])", re.DOTALL)


def _strip_code_fences(text: str) -> str:
    """Remove surrounding ```...``` fences (with or without 'json') if present."""
    t = text.strip()
    if t.startswith("```") and t.endswith("```"):
        t = re.sub(r"^```[A-Za-z0-9_-]*\s*", "", t, flags=re.DOTALL)
        t = re.sub(r"\s*```$", "", t, flags=re.DOTALL)
    return t.strip()


def extract_json(text: str) -> Any:
    """
    Extract and parse the first JSON object/array from an LLM response.

    Handles code fences and leading/trailing prose. Returns ``{}`` when
    nothing parseable is found.
    """
    if not text:
        return {}
    t = _strip_code_fences(text)

    try:
        return json.loads(t)
    except json.JSONDecodeError:
        pass

    m = _JSON_BLOCK.search(t)
    if not m:
        return {}
    block = m.group(1)
    try:
        return json.loads(block)
    except json.JSONDecodeError:
        return [] if block.lstrip().startswith("[") else {}


def require_object(text: str, err: str = "Expected a JSON object.") -> dict:
    """Strict: must return a non-empty object, else raise."""
    data = extract_json(text)
    if not isinstance(data, dict) or not data:
        raise ValueError(err)
    return data
