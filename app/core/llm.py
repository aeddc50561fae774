"""Parsing utilities for JSON payloads returned by providers."""

import json
import re

from app.core.logging import get_logger

logger = get_logger(__name__)


class ParseError(ValueError):
    """Provider output could not be turned into JSON, even after repair."""


def _strip_llm_fences(raw_output: str) -> str:
    """Strip markdown code fences from LLM output.

    Handles: ```json ... ```, ``` ... ```, leading/trailing whitespace.
    """
    cleaned = raw_output.strip()

    # Extract JSON from markdown code fences
    fence_match = re.search(r"```(?:json)?\s*\n?(.*?)```", cleaned, re.DOTALL)
    if fence_match:
        return fence_match.group(1).strip()

    # Unterminated fence
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def _isolate(text: str, opening: str, closing: str) -> str:
    """Substring from the first opening char to the last closing char (or to the end)."""
    start = text.find(opening)
    if start == -1:
        return text
    end = text.rfind(closing)
    if end < start:
        return text[start:]
    return text[start : end + 1]


def repair_truncated_json(text: str) -> str:
    """Append missing closers: brackets first, then braces."""
    missing_brackets = text.count("[") - text.count("]")
    missing_braces = text.count("{") - text.count("}")
    return text + "]" * max(missing_brackets, 0) + "}" * max(missing_braces, 0)


def parse_json_object(raw_output: str) -> dict:
    """
    Parse a JSON object out of provider output.

    Strips fences, isolates the outermost braces and, if that fails to parse, appends
    the missing closing brackets/braces once and retries.

    Args:
        raw_output: Raw provider text

    Returns:
        Parsed dict

    Raises:
        ParseError: If the payload is not a JSON object even after repair
    """
    cleaned = _isolate(_strip_llm_fences(raw_output or ""), "{", "}")
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        repaired = repair_truncated_json(cleaned)
        logger.debug("Initial JSON parse failed, retrying with repaired closers")
        try:
            parsed = json.loads(repaired)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON payload: {e}") from e

    if not isinstance(parsed, dict):
        raise ParseError("JSON payload is not an object")
    return parsed


def parse_json_array(raw_output: str) -> list:
    """Parse the JSON array found between the first '[' and the last ']'.

    Raises:
        ParseError: If no valid array is found
    """
    cleaned = _strip_llm_fences(raw_output or "")
    start = cleaned.find("[")
    end = cleaned.rfind("]")
    if start == -1 or end < start:
        raise ParseError("No JSON array found")
    try:
        parsed = json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON array: {e}") from e
    if not isinstance(parsed, list):
        raise ParseError("JSON payload is not an array")
    return parsed

