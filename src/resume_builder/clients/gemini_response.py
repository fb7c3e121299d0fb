"""Text extraction from the Gemini generateContent envelope.

The expected reply is ``{"candidates": [{"content": {"parts": [{"text": ...}]}}]}``.
Only the first candidate's first part is read. Every missing link raises
``UnexpectedResponseShape`` rather than defaulting, so an empty model answer
stays distinguishable from a changed or broken envelope.
"""

from __future__ import annotations

import json
from typing import Any

from resume_builder.errors import UnexpectedResponseShape


def _first(container: Any, key: str) -> Any:
    if not isinstance(container, dict) or key not in container:
        raise UnexpectedResponseShape(f"Gemini response has no '{key}'")
    items = container[key]
    if not isinstance(items, list) or not items:
        raise UnexpectedResponseShape(f"Gemini response '{key}' is empty")
    return items[0]


def extract_text(envelope_json: str | bytes) -> str:
    """Return the first candidate's first text part."""
    try:
        envelope = json.loads(envelope_json)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise UnexpectedResponseShape("Gemini response body is not valid JSON") from e

    candidate = _first(envelope, "candidates")
    if not isinstance(candidate, dict) or not isinstance(candidate.get("content"), dict):
        raise UnexpectedResponseShape("Gemini candidate has no 'content'")

    part = _first(candidate["content"], "parts")
    if not isinstance(part, dict) or not isinstance(part.get("text"), str):
        raise UnexpectedResponseShape("Gemini part has no 'text'")
    return part["text"]


def build_request_body(prompt: str) -> dict:
    return {"contents": [{"parts": [{"text": prompt}]}]}
