import json
import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

# Reasoning models wrap their scratchpad in <think> tags
_THINK_RE = re.compile(r"<think>[\s\S]*?</think>", re.IGNORECASE)
_DECODER = json.JSONDecoder()


def deep_serialize(obj: Any) -> Any:
    """
    Recursively convert objects to JSON-safe primitives.
    """
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if hasattr(obj, "model_dump"):
        return deep_serialize(obj.model_dump(by_alias=True, exclude_none=True))
    if isinstance(obj, dict):
        return {k: deep_serialize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [deep_serialize(v) for v in obj]
    if isinstance(obj, (str, int, float, bool)):
        return obj
    if hasattr(obj, "__dataclass_fields__"):
        return {k: deep_serialize(getattr(obj, k)) for k in obj.__dataclass_fields__}
    return str(obj)


def strip_reasoning(text: Optional[str]) -> str:
    if not text:
        return ""
    return _THINK_RE.sub("", text).strip()


def extract_json_object(text: Optional[str]) -> Optional[str]:
    """
    Return the first complete {...} object of a model reply, ignoring
    reasoning traces, code fences and prose on either side. None if no
    object decodes.
    """
    cleaned = strip_reasoning(text)
    start = cleaned.find("{")
    while start != -1:
        try:
            obj, end = _DECODER.raw_decode(cleaned, start)
        except json.JSONDecodeError:
            obj = None
        if isinstance(obj, dict):
            return cleaned[start:end]
        start = cleaned.find("{", start + 1)
    return None


def format_price(amount: Any) -> str:
    return f"Rs.{float(amount or 0):.2f}"
