"""Exceptions for the content enhancement pipeline.

Provider and malformed-output errors are raised by adapters and caught at
the invocation boundary, where they become failed task outcomes. They are
never meant to escape an enhancement request.
"""

from __future__ import annotations


class ContentEnhancerError(Exception):
    """Base exception for content enhancement errors."""


class ProviderError(ContentEnhancerError):
    """Non-success HTTP status or network failure reaching the provider."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Store the provider HTTP status (None for transport failures)."""
        super().__init__(message)
        self.status_code = status_code


class MalformedOutputError(ContentEnhancerError):
    """Provider response lacks a message or is not a JSON object."""


class PayloadValidationError(ContentEnhancerError):
    """A parsed payload failed structural or semantic checks."""

    def __init__(self, violations: list[str] | tuple[str, ...]) -> None:
        """Keep the individual violation messages for reporting."""
        self.violations = tuple(violations)
        super().__init__("Validation failed: " + "; ".join(self.violations))


class ConfigurationError(ContentEnhancerError):
    """Raised when configuration is invalid or incomplete."""


class InvariantViolationError(ContentEnhancerError):
    """Raised when a dispatch or merge invariant does not hold."""

    def __init__(self, message: str, *, stage_name: str | None = None) -> None:
        """Record which stage observed the broken invariant."""
        super().__init__(message)
        self.stage_name = stage_name


class PromptBuildError(ContentEnhancerError):
    """A task's prompts could not be built from the request inputs."""
