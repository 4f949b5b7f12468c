"""
Request shaping for untrusted input arriving at the HTTP or CLI boundary.
"""

import math
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from config.config import CrosscheckConfig
from crosscheck.errors import InvalidRequestError
from crosscheck.models.schemas import CrosscheckRequest


def _text(raw: Mapping[str, Any], key: str, limit: int) -> Optional[str]:
    value = raw.get(key)
    if not isinstance(value, str):
        return None
    value = value.strip()[:limit].strip()
    return value or None


def _number(raw: Mapping[str, Any], *keys: str) -> Optional[int]:
    for key in keys:
        value = raw.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                continue
        if isinstance(value, (int, float)) and math.isfinite(value):
            return int(value)
    return None


def shape_request(raw: Any, config: CrosscheckConfig) -> CrosscheckRequest:
    """
    Turn a decoded JSON body into a CrosscheckRequest.

    Unknown keys and wrongly-typed fields are dropped, text fields are
    trimmed and truncated to the configured ceilings. Numeric limits are
    passed through unclamped; the orchestrator clamps them.

    Raises:
        InvalidRequestError: if the question is missing or blank
    """
    if not isinstance(raw, Mapping):
        raw = {}

    question = _text(raw, "question", config.max_question_chars)
    if not question:
        raise InvalidRequestError("Missing 'question' in JSON body.")

    try:
        return CrosscheckRequest(
            question=question,
            jurisdiction=_text(raw, "jurisdiction", config.max_jurisdiction_chars),
            facts=_text(raw, "facts", config.max_facts_chars),
            constraints=_text(raw, "constraints", config.max_constraints_chars),
            timeout_ms=_number(raw, "timeout_ms", "timeoutMs"),
            max_tokens=_number(raw, "max_tokens", "maxTokens")
        )
    except ValidationError as e:
        raise InvalidRequestError(str(e)) from e
