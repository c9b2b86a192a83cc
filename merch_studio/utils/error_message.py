from __future__ import annotations
from typing import Optional
import json
import re

DEFAULT_ERROR_MESSAGE = "An error occurred while enhancing the image"

_JSON_BLOB = re.compile(r"\{[\s\S]*\}")
_LEADING_PREFIX = re.compile(r"^[^:]+:\s*")


def extract_error_message(message: Optional[str]) -> str:
    """
    Best-effort extraction of a readable message from an upstream error string.

    Provider errors often embed the raw JSON body, e.g.
    ``Gemini API error: {"error": {"message": "API key not valid"}}``.
    The embedded object wins when it carries ``error.message``, ``message`` or
    ``error`` (in that order); otherwise the ``Something:`` prefix is dropped.
    """
    if not message:
        return DEFAULT_ERROR_MESSAGE

    match = _JSON_BLOB.search(message)
    if not match:
        return _LEADING_PREFIX.sub("", message, count=1).strip()

    try:
        error_json = json.loads(match.group(0))
    except ValueError:
        stripped = _JSON_BLOB.sub("", _LEADING_PREFIX.sub("", message, count=1), count=1).strip()
        return stripped or DEFAULT_ERROR_MESSAGE

    error = error_json.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if error_json.get("message"):
        return str(error_json["message"])
    if error:
        return error if isinstance(error, str) else json.dumps(error)
    return DEFAULT_ERROR_MESSAGE
