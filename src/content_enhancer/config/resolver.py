"""Configuration resolution with precedence handling.

Precedence: Programmatic > Environment > Project file > Defaults
"""

import logging
import os
from pathlib import Path
from typing import Any

from content_enhancer.exceptions import ConfigurationError

from .loaders import ConfigFileError, EnvironmentConfigLoader, FileConfigLoader
from .schema import FIELD_NAMES, EnhancerSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig

log = logging.getLogger(__name__)


class ConfigResolver:
    """Merges configuration values from all sources with origin tracking."""

    def __init__(self) -> None:
        """Initialize the configuration resolver."""
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        use_env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources with proper precedence.

        Raises:
            ConfigurationError: If validation fails, a required value is
                missing, or a configuration source is malformed.
        """
        origin: dict[str, ConfigOrigin] = {}
        merged: dict[str, Any] = {}

        if profile is None:
            profile = os.getenv("CONTENT_ENHANCER_PROFILE")

        # Step 1: schema defaults (read from the field definitions so ambient
        # environment does not leak into the "default" origin)
        for name in FIELD_NAMES:
            merged[name] = EnhancerSettings.model_fields[name].default
            origin[name] = "default"

        # Step 2: project file
        try:
            file_values = self.file_loader.load_project_config(
                project_root=project_root, profile=profile
            )
        except ConfigFileError as e:
            raise ConfigurationError(str(e)) from e
        self._apply(merged, origin, file_values, "file")

        # Step 3: environment
        try:
            env_values = self.env_loader.load_env_config(env_file=use_env_file)
        except (ValueError, FileNotFoundError) as e:
            raise ConfigurationError(f"Environment configuration error: {e}") from e
        self._apply(merged, origin, env_values, "env")

        # Step 4: programmatic overrides (highest precedence)
        self._apply(merged, origin, programmatic or {}, "programmatic")

        # Step 5: validate the merged result
        try:
            final = EnhancerSettings(**merged).to_dict()
        except ValueError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        resolved = ResolvedConfig(**final, origin=origin)
        log.debug("Resolved configuration: %r", resolved)
        return resolved

    @staticmethod
    def _apply(
        merged: dict[str, Any],
        origin: dict[str, ConfigOrigin],
        values: dict[str, Any],
        source: ConfigOrigin,
    ) -> None:
        for field, value in values.items():
            if field in merged:  # Only override known fields
                merged[field] = value
                origin[field] = source


_resolver = ConfigResolver()


def resolve_config_with_origin(
    overrides: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration and keep the per-field origin map for auditing."""
    return _resolver.resolve(
        overrides,
        profile=profile,
        use_env_file=use_env_file,
        project_root=project_root,
    )


def resolve_config(
    overrides: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> FrozenConfig:
    """Resolve configuration from all sources and freeze it.

    This is the only place where ambient configuration is read.

    Example:
        config = resolve_config()
        config = resolve_config({"use_real_api": True, "api_key": "sk-..."})
        config = resolve_config(profile="production")
    """
    return resolve_config_with_origin(
        overrides,
        profile=profile,
        use_env_file=use_env_file,
        project_root=project_root,
    ).to_frozen()
