"""Extraction of a JSON object from raw generator output."""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def parse_report_json(raw: Any) -> dict[str, Any] | None:
    """
    Parse generator output into a JSON object.

    Tries a direct parse first, then the slice between the first ``{`` and the
    last ``}`` so that prose or Markdown fences around the JSON are tolerated.

    Args:
        raw: Raw generator output (usually a string)

    Returns:
        Parsed object, or None if no JSON object could be extracted
    """
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, str):
        return None

    try:
        parsed = json.loads(raw)
        if isinstance(parsed, dict):
            return parsed
    except (ValueError, RecursionError):
        pass

    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end <= start:
        logger.warning(f"[PARSE] No JSON object found in generator output ({len(raw)} chars)")
        return None

    try:
        parsed = json.loads(raw[start:end + 1])
    except (ValueError, RecursionError) as e:
        logger.warning(f"[PARSE] Failed to parse extracted JSON: {e}")
        return None

    return parsed if isinstance(parsed, dict) else None
