"""Pydantic AI agents for WhyFi.

- Diagnostician (OpenAI gpt-5-mini): turns collected telemetry into a
  structured report with issues and recommendations.

The reply is free text; the JSON object is extracted and validated by
``parsing`` rather than trusted.
"""

from whyfi.agents.diagnostician import (
    DIAGNOSIS_MODEL,
    AgentCompletion,
    DiagnosisEngine,
    TextCompletion,
    build_diagnosis_prompt,
    classify_failure,
    diagnostician_agent,
    format_series,
)
from whyfi.agents.parsing import extract_json_object, parse_diagnosis

__all__ = [
    # Diagnostician
    "diagnostician_agent",
    "build_diagnosis_prompt",
    "format_series",
    "DiagnosisEngine",
    "TextCompletion",
    "AgentCompletion",
    "classify_failure",
    "DIAGNOSIS_MODEL",
    # Parsing
    "extract_json_object",
    "parse_diagnosis",
]
