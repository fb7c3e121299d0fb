"""Tolerant extraction of the JSON object a model was asked to emit."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

logger = logging.getLogger(__name__)


def extract_json(text: str) -> Any:
    """Extract JSON from model output.

    Tries in order:
    1. Direct json.loads on the full text
    2. Strip fenced code block markers (```json ... ```) and parse
    3. First '{' to last '}' and parse
    4. Close the braces/brackets of a truncated object and parse

    Raises ValueError when nothing parses.
    """
    text = text.strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    stripped = _strip_code_fences(text)
    if stripped != text:
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass

    result = _extract_braces(stripped)
    if result is not None:
        return result

    result = _try_repair_truncated(stripped)
    if result is not None:
        return result

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def try_parse_structured(text: str, expected_keys: Iterable[str]) -> dict[str, Any] | None:
    """Return the embedded JSON object if it carries every expected key.

    Returns None when the text holds no parseable JSON, when the root value
    is not an object, or when a key is missing.
    """
    try:
        data = extract_json(text)
    except ValueError:
        logger.debug("Model output is not JSON")
        return None

    if not isinstance(data, dict):
        logger.debug("Model output root is %s, not an object", type(data).__name__)
        return None

    missing = [k for k in expected_keys if k not in data]
    if missing:
        logger.debug("Model output missing keys: %s", ", ".join(missing))
        return None
    return data


def _strip_code_fences(text: str) -> str:
    lines = text.split("\n")

    if lines and lines[0].strip().startswith("```"):
        lines = lines[1:]

    while lines and lines[-1].strip() in ("```", ""):
        lines = lines[:-1]

    return "\n".join(lines).strip()


def _extract_braces(text: str) -> dict | None:
    """Try to parse the span from the first '{' to the last '}'."""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass
    return None


def _try_repair_truncated(text: str) -> dict | None:
    """Close the structures left open by a response cut off mid-object."""
    start = text.find("{")
    if start == -1:
        return None

    candidate = text[start:]
    open_braces = candidate.count("{") - candidate.count("}")
    open_brackets = candidate.count("[") - candidate.count("]")
    if open_braces <= 0 and open_brackets <= 0:
        return None

    repaired = candidate.rstrip().rstrip(",")
    repaired += "]" * max(0, open_brackets) + "}" * max(0, open_braces)
    try:
        return json.loads(repaired)
    except json.JSONDecodeError:
        pass

    # Drop the dangling partial value after the last complete string
    last_quote = candidate.rfind('"')
    if last_quote > 0:
        truncated = candidate[: last_quote + 1]
        ob = truncated.count("{") - truncated.count("}")
        ol = truncated.count("[") - truncated.count("]")
        if ob > 0 or ol > 0:
            repaired = truncated.rstrip().rstrip(",")
            repaired += "]" * max(0, ol) + "}" * max(0, ob)
            try:
                return json.loads(repaired)
            except json.JSONDecodeError:
                pass

    return None
