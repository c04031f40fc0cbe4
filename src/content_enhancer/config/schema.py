"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces configuration
values from various sources (environment, files, programmatic) into the correct
types with proper defaults.
"""

from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["openai", "gemini"]
ValidationPolicy = Literal["strict", "lenient"]

FIELD_NAMES: tuple[str, ...] = (
    "api_key",
    "provider",
    "model",
    "base_url",
    "use_real_api",
    "temperature",
    "request_timeout_s",
    "max_concurrency",
    "validation_policy",
    "telemetry_enabled",
)


class EnhancerSettings(BaseSettings):
    """Pydantic settings schema for the enhancement pipeline.

    This handles validation, type coercion, and default values for all
    configuration fields. It integrates with environment variables using
    the CONTENT_ENHANCER_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTENT_ENHANCER_",
        env_file=None,  # Only used when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Core Configuration Fields ---

    api_key: str | None = Field(
        default=None,
        description="Completion provider API key",
    )

    provider: ProviderName = Field(
        default="openai",
        description="Completion provider: OpenAI-compatible chat API or Gemini",
    )

    model: str = Field(
        default="gpt-4-turbo-preview",
        description="Default model identifier for every task",
        min_length=1,
    )

    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the chat completions endpoint",
        min_length=1,
    )

    use_real_api: bool = Field(
        default=False,
        description="Call the real provider instead of the offline mock",
    )

    temperature: float = Field(
        default=0.3,
        description="Sampling temperature; fixed and low for determinism",
        ge=0.0,
        le=2.0,
    )

    request_timeout_s: float = Field(
        default=60.0,
        description="Per-request transport timeout in seconds",
        gt=0,
    )

    max_concurrency: int | None = Field(
        default=None,
        description="Upper bound on in-flight tasks per request (None = all)",
        ge=1,
    )

    validation_policy: ValidationPolicy = Field(
        default="strict",
        description="strict: invalid payloads fail the task; lenient: log only",
    )

    telemetry_enabled: bool = Field(
        default=False,
        description="Emit telemetry to configured reporters",
    )

    # --- Validation Rules ---

    @field_validator("provider", "validation_policy", mode="before")
    @classmethod
    def normalize_choice(cls, v: Any) -> Any:
        """Accept choices case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL so endpoint paths join cleanly."""
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_api_key_requirement(self) -> "EnhancerSettings":
        """Ensure api_key is provided when use_real_api is True."""
        if self.use_real_api and not self.api_key:
            raise ValueError(
                "api_key is required when use_real_api=True. "
                "Set CONTENT_ENHANCER_API_KEY, provide it in pyproject.toml, "
                "or pass it programmatically."
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary suitable for origin annotation."""
        return {name: getattr(self, name) for name in FIELD_NAMES}
