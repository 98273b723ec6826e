"""Two-stage JSON parsing for model-produced payloads.

Model output is not always clean JSON: arguments can arrive with trailing
junk or wrapped in prose. ``parse_json`` first tries a strict parse and then
falls back to the first brace-balanced ``{...}`` run in the text.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class JsonParseResult:
    ok: bool
    value: Any = None
    error: Optional[str] = None
    recovered: bool = False  # True when stage 2 extraction was needed


def parse_json(text: Optional[str], empty_as_object: bool = True) -> JsonParseResult:
    """Parse ``text`` as JSON without raising.

    Args:
        text: Raw payload.
        empty_as_object: Treat an empty or whitespace-only payload as ``{}``.

    Returns:
        JsonParseResult tagged with ``ok``; ``error`` is set on failure.
    """
    if text is None or not text.strip():
        if empty_as_object:
            return JsonParseResult(ok=True, value={})
        return JsonParseResult(ok=False, error="Empty payload")

    try:
        return JsonParseResult(ok=True, value=json.loads(text))
    except json.JSONDecodeError as e:
        strict_error = str(e)

    candidate = extract_json_object(text)
    if candidate is None:
        return JsonParseResult(ok=False, error=f"Invalid JSON: {strict_error}")

    try:
        return JsonParseResult(ok=True, value=json.loads(candidate), recovered=True)
    except json.JSONDecodeError as e:
        return JsonParseResult(ok=False, error=f"Invalid JSON: {e}")


def extract_json_object(text: str) -> Optional[str]:
    """Return the first brace-balanced ``{...}`` substring, or None.

    Braces inside JSON strings are ignored.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start : i + 1]
        # Unbalanced from this brace; try the next one.
        start = text.find("{", start + 1)
    return None
