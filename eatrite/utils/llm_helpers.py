"""Shared helpers for parsing chat-completion responses."""

import json
import re
from typing import Any, Dict, List, Optional

_CODE_FENCE_START = re.compile(r"^```(?:json)?\s*", flags=re.IGNORECASE | re.MULTILINE)
_CODE_FENCE_END = re.compile(r"\s*```\s*$", flags=re.MULTILINE)
_NUMBER_PREFIX = re.compile(r"^\d+\.\s*")
_BULLET_PREFIX = re.compile(r"^[-*]\s*")


def extract_json_from_text(text: str) -> str:
    """
    Extract a JSON object from a model response.

    Handles:
    - markdown fences
    - leading/trailing prose around a single object
    """
    t = (text or "").strip()

    # Remove markdown code fences if they appear
    t = _CODE_FENCE_START.sub("", t)
    t = _CODE_FENCE_END.sub("", t).strip()

    if t.startswith("{") and t.endswith("}"):
        return t

    first = t.find("{")
    last = t.rfind("}")
    if first != -1 and last > first:
        return t[first:last + 1]

    return t


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Parse completion content into a JSON object.

    Raises:
        ValueError: If the content is not JSON or not an object
            (json.JSONDecodeError is a ValueError subclass)
    """
    data = json.loads(extract_json_from_text(text))
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def get_message_content(data: Any) -> Optional[str]:
    """Return ``choices[0].message.content`` from a chat-completion body, if any."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if isinstance(content, str) and content.strip():
        return content
    return None


def get_error_message(data: Any) -> Optional[str]:
    """Return ``error.message`` from a chat-completion error body, if any."""
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    elif isinstance(error, str) and error.strip():
        return error.strip()
    return None


def parse_suggestions(content: str, limit: int = 3) -> List[str]:
    """
    Split a free-text list of recipe ideas into clean entries.

    "1. Omelette" -> "Omelette", "- Salad" -> "Salad"; blank lines are dropped.
    """
    suggestions = []
    for line in (content or "").split("\n"):
        line = line.strip()
        if not line:
            continue
        line = _NUMBER_PREFIX.sub("", line)
        line = _BULLET_PREFIX.sub("", line).strip()
        if line:
            suggestions.append(line)
    return suggestions[:limit]
