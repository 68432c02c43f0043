"""Tolerant extraction of the diagnosis JSON from free-form completion text.

The model is asked for a bare JSON object but may wrap it in prose or a
code fence. We locate the first ``{`` and its matching ``}`` by scanning
brace depth (skipping braces inside string literals), decode that span,
then validate it strictly. Partial decodes are never accepted.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import pydantic

from whyfi.errors import ParseError, ValidationError
from whyfi.models import DiagnosisResult

logger = logging.getLogger("whyfi.agents.parsing")

INVALID_JSON_MESSAGE = "Failed to parse AI response"


def _find_object_span(text: str) -> tuple[int, int] | None:
    start = text.find("{")
    if start < 0:
        return None

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
                return start, i + 1
    return None


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the first balanced ``{...}`` object embedded in ``text``.

    Raises:
        ParseError: no balanced object, or the span is not valid JSON.
    """
    span = _find_object_span(text)
    if span is None:
        logger.warning("No JSON object found in completion (%d chars)", len(text))
        raise ParseError("no balanced JSON object in response")

    candidate = text[span[0] : span[1]]
    try:
        decoded = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning("Embedded JSON did not decode: %s", e)
        raise ParseError(
            f"embedded object is not valid JSON: {e}",
            user_message=INVALID_JSON_MESSAGE,
        ) from e
    return decoded


def parse_diagnosis(text: str) -> DiagnosisResult:
    """Extract and validate a DiagnosisResult from completion text.

    Raises:
        ParseError: see ``extract_json_object``.
        ValidationError: a required field is missing or has the wrong shape.
    """
    payload = extract_json_object(text)
    try:
        return DiagnosisResult.model_validate(payload)
    except pydantic.ValidationError as e:
        logger.warning("Diagnosis payload failed validation: %d errors", e.error_count())
        raise ValidationError(str(e)) from e
