import json
from typing import Any, Dict, Optional


def strip_code_fences(content: str) -> str:
    cleaned = content.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def first_balanced_object(content: str) -> Optional[str]:
    """Return the first top-level {...} span, or None if the braces never balance.

    Braces inside JSON strings are ignored so quoted text cannot end the object early.
    """
    depth = 0
    start = None
    in_string = False
    escaped = False
    for i, ch in enumerate(content):
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
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                return content[start:i + 1]
    return None


def parse_starter(content: str, salvage: bool = False) -> Dict[str, Any]:
    """Parse model output as JSON; with salvage, fall back to the first balanced object.

    Raises ValueError when nothing parses.
    """
    cleaned = strip_code_fences(content)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        if not salvage:
            raise ValueError("AI response was not valid JSON")
    candidate = first_balanced_object(cleaned)
    if candidate is None:
        raise ValueError("AI response was not valid JSON")
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        raise ValueError("AI response was not valid JSON")
