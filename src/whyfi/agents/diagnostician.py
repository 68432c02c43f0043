"""Diagnostician agent - AI summary of the collected Wi-Fi telemetry.

The engine renders every piece of held state (snapshot, history, optional
interference and speed-test results) into one deterministic prompt, sends
it to a text-completion service, and parses the JSON object out of the
reply. Transport and service failures are mapped to DiagnosisError
subclasses carrying a user-facing message.

No timeout is imposed here; a hung call stays loading until the transport
gives up.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import httpx
from pydantic_ai import Agent
from pydantic_ai.exceptions import ModelHTTPError

from whyfi.agents.parsing import parse_diagnosis
from whyfi.errors import (
    CredentialError,
    DiagnosisError,
    RateLimitError,
    RequestTimeoutError,
    ServiceUnavailableError,
    UnknownError,
)
from whyfi.history import Channel

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from pydantic_ai.models import Model

    from whyfi.models import DiagnosisInput, DiagnosisResult

logger = logging.getLogger("whyfi.agents.diagnostician")

DIAGNOSIS_MODEL = "gpt-5-mini"
PROMPT_SAMPLES = 10

# =============================================================================
# DIAGNOSTICIAN AGENT
# =============================================================================

DIAGNOSTICIAN_INSTRUCTIONS = """You diagnose home Wi-Fi problems from measured telemetry.
Answer with the single JSON object the user asks for and nothing else."""

# Model is supplied per run because the credential belongs to the user.
diagnostician_agent = Agent(
    instructions=DIAGNOSTICIAN_INSTRUCTIONS,
    output_type=str,
    name="wifi_diagnostician",
)


class TextCompletion(Protocol):
    """Single prompt in, free-form text out."""

    async def complete(self, prompt: str) -> str: ...


class AgentCompletion:
    """TextCompletion backed by the diagnostician agent on OpenAI."""

    def __init__(
        self,
        api_key: str,
        *,
        model_name: str = DIAGNOSIS_MODEL,
        model: Model | None = None,
    ) -> None:
        if model is None:
            from pydantic_ai.models.openai import OpenAIChatModel
            from pydantic_ai.providers.openai import OpenAIProvider

            model = OpenAIChatModel(model_name, provider=OpenAIProvider(api_key=api_key))
        self._model = model

    async def complete(self, prompt: str) -> str:
        result = await diagnostician_agent.run(prompt, model=self._model)
        return result.output


# =============================================================================
# PROMPT
# =============================================================================


def _fmt(value: float) -> str:
    return f"{value:g}"


def format_series(values: Sequence[float], unit: str, samples: int = PROMPT_SAMPLES) -> str:
    """Render the last ``samples`` values oldest first, e.g. ``[50, 65] dBm``."""
    if not values:
        return "No data"
    recent = list(values)[-samples:]
    return f"[{', '.join(_fmt(v) for v in recent)}] {unit}"


def build_diagnosis_prompt(
    diagnosis_input: DiagnosisInput, samples: int = PROMPT_SAMPLES
) -> str:
    """Build the prompt for the diagnostician.

    Args:
        diagnosis_input: Snapshot, history and any held task results
        samples: Most recent samples per history channel to include

    Returns:
        Formatted prompt string
    """
    history = diagnosis_input.history

    def series(channel: Channel, unit: str) -> str:
        return format_series(history.get(channel, []), unit, samples)

    prompt = """You are a Wi-Fi network diagnostic expert. Analyze the following network metrics and provide actionable recommendations to improve the user's Wi-Fi experience.

The data below includes time series measurements (oldest to newest) to help you identify trends and patterns.

## Network Configuration
"""

    snapshot = diagnosis_input.snapshot
    if snapshot is not None:
        servers = ", ".join(snapshot.dns.servers) or "None configured"
        prompt += f"""- Frequency Band: {snapshot.wifi.frequency_band or "Unknown"}
- Channel: {snapshot.wifi.channel or "Unknown"}
- DNS Servers: {servers}
"""

    sample_count = min(len(history.get(Channel.SIGNAL, [])), samples)

    prompt += f"""
## Time Series Metrics ({sample_count} samples, oldest to newest)

### Wi-Fi Signal Quality
- Signal Strength (dBm): {series(Channel.SIGNAL, "dBm")}
- Noise Level (dBm): {series(Channel.NOISE, "dBm")}
- Link Rate (Mbps): {series(Channel.LINK_RATE, "Mbps")}

### Router Connection
- Latency (ms): {series(Channel.ROUTER_PING, "ms")}
- Jitter (ms): {series(Channel.ROUTER_JITTER, "ms")}
- Packet Loss (%): {series(Channel.ROUTER_LOSS, "%")}

### Internet Connection (to 1.1.1.1)
- Latency (ms): {series(Channel.INTERNET_PING, "ms")}
- Jitter (ms): {series(Channel.INTERNET_JITTER, "ms")}
- Packet Loss (%): {series(Channel.INTERNET_LOSS, "%")}

### DNS
- Lookup Latency (ms): {series(Channel.DNS_LOOKUP, "ms")}
"""

    interference = diagnosis_input.interference
    if interference is not None:
        snr = f"{interference.snr_db} dB" if interference.snr_db is not None else "Unknown"
        prompt += f"""
### Interference Analysis
- Interference Level: {interference.interference_level}
- Signal-to-Noise Ratio: {snr} ({interference.snr_quality})
- Current Channel: {interference.current_channel or "Unknown"}
- Networks on Same Channel: {interference.same_channel_count}
- Overlapping Networks: {interference.overlapping_count}
- Total Nearby Networks: {len(interference.nearby_networks)}
"""

    speed = diagnosis_input.speed_test
    if speed is not None:
        prompt += f"""
### Speed Test Results
- Download Speed: {speed.download_mbps:.1f} Mbps
- Upload Speed: {speed.upload_mbps:.1f} Mbps
- Latency: {speed.latency_ms:.0f} ms
- Jitter: {speed.jitter_ms:.0f} ms
"""

    prompt += """
## Instructions
Analyze the above data and respond with a JSON object in this exact format:
{
  "summary": "A one-paragraph summary of the overall network health and main findings",
  "overallHealth": "good" | "warning" | "poor",
  "issues": [
    {
      "description": "Description of an identified issue",
      "severity": "high" | "medium" | "low"
    }
  ],
  "recommendations": [
    "Specific actionable recommendation"
  ]
}

Guidelines:
- Provide exactly the top 3 most important issues, prioritized by severity and impact
- Provide exactly 3 highly actionable recommendations, prioritized by impact (most impactful first)
- Recommendations must be specific actions the user can take immediately (e.g., "Move your router away from the microwave" not "Reduce interference")
- Analyze the time series data for trends: improving, degrading, stable, or intermittent patterns
- Look for correlations between metrics (e.g., signal drops coinciding with latency spikes)
- Signal strength: -30 to -50 dBm is excellent, -50 to -60 is good, -60 to -70 is fair, below -70 is weak
- Ping latency: under 20ms is excellent, 20-50ms is good, 50-100ms is acceptable, over 100ms is problematic
- Any packet loss above 0% is concerning
- If interference analysis is available, consider channel congestion
- Respond ONLY with the JSON object, no additional text
"""
    return prompt


# =============================================================================
# FAILURE MAPPING
# =============================================================================

_TIMEOUT_MARKERS = ("timeout", "ETIMEDOUT", "timed out")


def _mentions_timeout(message: str) -> bool:
    return any(marker in message for marker in _TIMEOUT_MARKERS)


def _is_timeout(exc: BaseException) -> bool:
    seen: BaseException | None = exc
    while seen is not None:
        if isinstance(seen, (TimeoutError, httpx.TimeoutException)):
            return True
        if _mentions_timeout(str(seen)):
            return True
        seen = seen.__cause__
    return False


def _service_message(exc: ModelHTTPError) -> str:
    body = exc.body
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return exc.message


def classify_failure(exc: BaseException) -> DiagnosisError:
    """Map a completion failure to the DiagnosisError taxonomy."""
    if isinstance(exc, DiagnosisError):
        return exc

    if isinstance(exc, ModelHTTPError):
        status = exc.status_code
        message = _service_message(exc)
        if status == 401:
            return CredentialError(message)
        if status == 429:
            return RateLimitError(message)
        if status == 408 or _mentions_timeout(message):
            return RequestTimeoutError(message)
        if 500 <= status < 600:
            return ServiceUnavailableError(message)
        return UnknownError(f"API error: {message}")

    if _is_timeout(exc):
        return RequestTimeoutError(str(exc))
    return UnknownError(str(exc) or type(exc).__name__)


# =============================================================================
# ENGINE
# =============================================================================


class DiagnosisEngine:
    """Prompt → completion → parsed DiagnosisResult.

    ``completion_factory`` builds a TextCompletion for a credential; the
    default talks to OpenAI through the diagnostician agent.
    """

    def __init__(
        self,
        completion_factory: Callable[[str], TextCompletion] | None = None,
        *,
        model_name: str = DIAGNOSIS_MODEL,
        prompt_samples: int = PROMPT_SAMPLES,
    ) -> None:
        self._factory = completion_factory or (
            lambda key: AgentCompletion(key, model_name=model_name)
        )
        self._model_name = model_name
        self._prompt_samples = prompt_samples

    async def diagnose(self, api_key: str, diagnosis_input: DiagnosisInput) -> DiagnosisResult:
        """Run one diagnosis. Raises a DiagnosisError subclass on failure."""
        if not api_key:
            raise CredentialError("no API key configured")

        prompt = build_diagnosis_prompt(diagnosis_input, self._prompt_samples)
        logger.info("Starting AI diagnosis: model=%s", self._model_name)
        logger.debug("Diagnosis prompt:\n%s", prompt)

        try:
            text = await self._factory(api_key).complete(prompt)
        except Exception as e:
            failure = classify_failure(e)
            logger.error("Diagnosis request failed: %s", e)
            raise failure from e

        logger.debug("Received completion: %d chars", len(text))
        result = parse_diagnosis(text)
        logger.info(
            "Diagnosis complete: health=%s issues=%d",
            result.overall_health,
            len(result.issues),
        )
        return result
