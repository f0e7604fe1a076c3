"""Helpers for pulling JSON out of free-form model completions."""

import json
import re

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> dict[str, object] | None:
    """Return the outermost brace-delimited JSON object found in text.

    Matching is greedy, so prose or markdown fences around the object are
    ignored. Returns None when no object is present, and raises
    json.JSONDecodeError when the matched span is not valid JSON.
    """
    match = _JSON_OBJECT.search(text)
    if match is None:
        return None
    parsed = json.loads(match.group(0))
    if not isinstance(parsed, dict):
        return None
    return parsed


def as_bool(value: object, *, default: bool) -> bool:
    """Coerce a JSON boolean or its string spelling; other values get default."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return default
