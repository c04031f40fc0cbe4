"""Core configuration data types.

Configuration follows the resolve-once, freeze-then-flow pattern: values are
merged from all sources into a `ResolvedConfig` (with origin tracking) and then
frozen into the `FrozenConfig` that the orchestrator carries.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

from .schema import FIELD_NAMES, ProviderName, ValidationPolicy

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing."""

    api_key: str | None
    provider: ProviderName
    model: str
    base_url: str
    use_real_api: bool
    temperature: float
    request_timeout_s: float
    max_concurrency: int | None
    validation_policy: ValidationPolicy
    telemetry_enabled: bool

    # Audit metadata - tracks where each field value came from
    origin: SourceMap

    def __repr__(self) -> str:
        """Repr with redacted API key for safe logging."""
        api_key_display = "[REDACTED]" if self.api_key else None
        return (
            f"ResolvedConfig(api_key={api_key_display!r}, provider={self.provider!r}, "
            f"model={self.model!r}, use_real_api={self.use_real_api!r}, "
            f"validation_policy={self.validation_policy!r}, "
            f"origin={dict(self.origin)!r})"
        )

    __str__ = __repr__

    def to_frozen(self) -> "FrozenConfig":
        """Convert to the immutable configuration used at runtime."""
        return FrozenConfig(**{name: getattr(self, name) for name in FIELD_NAMES})

    def audit(self) -> str:
        """Generate a redacted report showing the origin of each field."""
        lines = []
        for field in FIELD_NAMES:
            origin = self.origin.get(field, "default")
            value = getattr(self, field)
            if field == "api_key":
                display = f"{origin}:None" if value is None else f"{origin}:<redacted>"
            elif origin == "env":
                display = f"env:CONTENT_ENHANCER_{field.upper()}={value}"
            else:
                display = f"{origin}:{value}"
            lines.append(f"{field}: {display}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration carried by the orchestrator.

    Any attempt to modify this object will raise an exception.
    """

    api_key: str | None = None
    provider: ProviderName = "openai"
    model: str = "gpt-4-turbo-preview"
    base_url: str = "https://api.openai.com/v1"
    use_real_api: bool = False
    temperature: float = 0.3
    request_timeout_s: float = 60.0
    max_concurrency: int | None = None
    validation_policy: ValidationPolicy = "strict"
    telemetry_enabled: bool = False

    def __repr__(self) -> str:
        """Representation with redacted API key for safe debugging."""
        api_key_display = "[REDACTED]" if self.api_key else None
        return (
            f"FrozenConfig(api_key={api_key_display!r}, provider={self.provider!r}, "
            f"model={self.model!r}, base_url={self.base_url!r}, "
            f"use_real_api={self.use_real_api!r}, temperature={self.temperature!r}, "
            f"request_timeout_s={self.request_timeout_s!r}, "
            f"max_concurrency={self.max_concurrency!r}, "
            f"validation_policy={self.validation_policy!r}, "
            f"telemetry_enabled={self.telemetry_enabled!r})"
        )

    __str__ = __repr__
