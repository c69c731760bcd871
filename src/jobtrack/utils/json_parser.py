"""Pull a JSON object out of free-form model output."""

from __future__ import annotations

import json


def extract_json(text: str) -> dict | list:
    """Parse JSON from an LLM response.

    Tries in order:
    1. The whole text
    2. The body of a ```json fenced block
    3. The span from the first '{' to the last '}'
    """
    text = (text or "").strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    fenced = _strip_code_fences(text)
    if fenced != text:
        try:
            return json.loads(fenced)
        except json.JSONDecodeError:
            text = fenced

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def _strip_code_fences(text: str) -> str:
    """Return the content of the first fenced block, or ``text`` unchanged."""
    opening = text.find("```")
    if opening == -1:
        return text
    body_start = text.find("\n", opening)
    if body_start == -1:
        return text
    closing = text.find("```", body_start)
    body = text[body_start + 1 : closing if closing != -1 else len(text)]
    return body.strip()
