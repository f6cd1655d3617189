"""Error taxonomy for provider-backed generation.

OutputValidationError is internal: it feeds the one-shot repair path and is
never shown to users directly. Everything deriving from GenerationError is
terminal for the request and carries enough context for the API layer to
tell "nothing was generated" apart from "something was generated but
unusable".
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ValidationIssue:
    path: str        # e.g. "options", "options.0.timeMins", "$"
    constraint: str  # e.g. "too_short", "missing", "json_syntax"
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message} [{self.constraint}]"


class OutputValidationError(ValueError):
    """Provider text failed to parse as JSON or failed the schema."""

    def __init__(self, message: str, issues: list[ValidationIssue], raw_text: Optional[str] = None):
        super().__init__(message)
        self.issues = issues
        self.raw_text = raw_text

    def __str__(self) -> str:
        details = "; ".join(str(i) for i in self.issues[:5])
        return f"{self.args[0]} ({details})" if details else self.args[0]


class GenerationError(Exception):
    error_kind = "generation_failed"
    status_code = 502
    generated = False
    retryable = True

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnusableOutputError(GenerationError):
    """The provider answered, but the answer cannot be used."""
    error_kind = "invalid_output"
    generated = True


class RepairExhaustedError(UnusableOutputError):
    """First attempt and the single repair attempt both failed validation."""

    def __init__(self, message: str, first_error: OutputValidationError, repair_error: OutputValidationError):
        super().__init__(message)
        self.first_error = first_error
        self.repair_error = repair_error


class ProviderError(GenerationError):
    """The provider call itself failed (network, quota, server error)."""
    error_kind = "provider_error"


class ProviderTimeoutError(ProviderError):
    error_kind = "provider_timeout"
    status_code = 504


class RepairUnavailableError(UnusableOutputError):
    """First attempt failed validation and the repair call never answered.

    Keeps the provider failure's status and retryability.
    """

    def __init__(self, message: str, first_error: OutputValidationError, provider_error: ProviderError):
        super().__init__(message)
        self.first_error = first_error
        self.provider_error = provider_error
        self.status_code = provider_error.status_code
        self.retryable = provider_error.retryable


class ProviderUnavailableError(GenerationError):
    """AI is disabled or not configured; nothing was attempted."""
    error_kind = "provider_unavailable"
    status_code = 503
    retryable = False
