"""Error taxonomy for WhyFi.

- AcquisitionError: the host or speed-test transport failed. The polling
  scheduler recovers by keeping its last good state; on-demand tasks surface
  it as their error.
- DiagnosisError family: everything that can go wrong on the AI path, each
  carrying the message shown to the user.

An absent sub-record (no router, no internet) is not an error at all.
"""


class WhyFiError(Exception):
    """Base class for all WhyFi errors."""


class AcquisitionError(WhyFiError):
    """A metrics, interference or speed-test request failed transport-side."""


class SpeedTestError(AcquisitionError):
    """Terminal failure of a speed test run. No partial result is kept."""


class DiagnosisError(WhyFiError):
    """Base for AI diagnosis failures.

    ``user_message`` is what the user sees; ``str(exc)`` keeps the detail
    for logs.
    """

    default_message = "Diagnosis failed."

    def __init__(self, detail: str = "", *, user_message: str | None = None) -> None:
        super().__init__(detail or self.default_message)
        self.user_message = user_message or self.default_message


class ParseError(DiagnosisError):
    """No JSON object could be extracted from the completion text."""

    default_message = "Failed to parse AI response - no JSON found"


class ValidationError(DiagnosisError):
    """The extracted object is missing a required field or has the wrong shape."""

    default_message = "Invalid response format from AI"


class CredentialError(DiagnosisError):
    default_message = "Invalid API key. Please check your OpenAI API key in Settings."


class RateLimitError(DiagnosisError):
    default_message = "Rate limit exceeded. Please wait a moment and try again."


class RequestTimeoutError(DiagnosisError):
    default_message = "Request timed out. Please try again."


class ServiceUnavailableError(DiagnosisError):
    default_message = "OpenAI service is temporarily unavailable. Please try again later."


class UnknownError(DiagnosisError):
    """Fallback: the raw message is surfaced as-is."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail, user_message=detail)
