"""Fast JSON handling for service responses and plan parsing."""

from typing import Any
import json

import msgspec
import orjson
from json_repair import repair_json


MAX_JSON_DEPTH = 20

_decoder = msgspec.json.Decoder()
_encoder = msgspec.json.Encoder()


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def extract_json_boundaries(text: str) -> str | None:
    """
    Locate the first JSON object in free text.

    Code fences are unwrapped first; the object spans from the first ``{``
    to the last ``}``.

    Args:
        text: Text potentially containing JSON

    Returns:
        The candidate JSON string, or None if no braces were found
    """
    working_text = text

    # Remove markdown code blocks
    if "```" in working_text:
        if "```json" in working_text:
            start_marker = working_text.find("```json") + 7
        else:
            start_marker = working_text.find("```") + 3

        end_marker = working_text.find("```", start_marker)
        if end_marker != -1:
            working_text = working_text[start_marker:end_marker].strip()

    start = working_text.find("{")
    end = working_text.rfind("}")

    if start == -1 or end == -1 or end < start:
        return None

    return working_text[start:end + 1]


def _as_dict(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        raise JSONParseError(f"Expected dict, got {type(result).__name__}")
    return result


def extract_json(text: str, repair: bool = True) -> dict[str, Any]:
    """
    Extract and parse a JSON object from model output.

    Args:
        text: Text containing JSON
        repair: Attempt to repair invalid JSON with json_repair

    Returns:
        Parsed JSON dictionary

    Raises:
        JSONParseError: If parsing fails
    """
    json_str = extract_json_boundaries(text.strip())
    if json_str is None:
        raise JSONParseError("No JSON object found in text")

    # msgspec first (fastest, strict)
    try:
        return _as_dict(_decoder.decode(json_str.encode("utf-8")))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e) from e

    # Last resort: json_repair handles trailing commas, single quotes, etc.
    try:
        repaired = repair_json(json_str)
        return _as_dict(json.loads(repaired))
    except JSONParseError:
        raise
    except Exception as repair_error:
        raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error) from repair_error


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode object to JSON string using fastest available library.

    Args:
        obj: Object to encode
        **kwargs: Additional arguments (indent, etc.)

    Returns:
        JSON string
    """
    indent = kwargs.get("indent", 0)

    if indent == 0:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except (TypeError, ValueError):
            # e.g. integers outside 64-bit range
            pass
        try:
            return _encoder.encode(obj).decode("utf-8")
        except (TypeError, ValueError):
            pass

    return json.dumps(obj, indent=indent if indent > 0 else None, default=str)


def validate_json_depth(obj: Any, max_depth: int = MAX_JSON_DEPTH, current_depth: int = 0) -> None:
    """
    Validate JSON nesting depth to prevent runaway recursion.

    Args:
        obj: Object to validate
        max_depth: Maximum allowed nesting depth
        current_depth: Current depth (internal)

    Raises:
        JSONParseError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise JSONParseError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)
