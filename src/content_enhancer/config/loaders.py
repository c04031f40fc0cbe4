"""Environment and file configuration loading.

Environment variables use the CONTENT_ENHANCER_ prefix, with optional .env
file support. Project configuration lives in ``pyproject.toml`` under
``[tool.content_enhancer]`` with named profiles in
``[tool.content_enhancer.profiles.<name>]``.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

from .schema import FIELD_NAMES, EnhancerSettings

ENV_PREFIX = "CONTENT_ENHANCER_"
TOOL_SECTION = "content_enhancer"


class ConfigFileError(Exception):
    """Raised when configuration file loading fails."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        """Initialize with file path, message, and optional cause."""
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


class EnvironmentConfigLoader:
    """Loads configuration from CONTENT_ENHANCER_* environment variables."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Load configuration from environment variables.

        Args:
            env_file: Optional .env file whose values are loaded into the
                environment first (existing variables are not overridden).

        Returns:
            Only the fields actually set in the environment, coerced.

        Raises:
            ValueError: If environment variables contain invalid values.
        """
        if env_file:
            self._load_env_file(env_file)

        env_values = {
            field: os.environ[f"{ENV_PREFIX}{field.upper()}"]
            for field in FIELD_NAMES
            if f"{ENV_PREFIX}{field.upper()}" in os.environ
        }
        if not env_values:
            return {}

        try:
            # Parse through the schema for coercion, but report only what was set.
            # The key requirement is enforced after all sources are merged.
            validated = EnhancerSettings(**{**env_values, "use_real_api": False})
        except ValueError as e:
            names = ", ".join(f"{ENV_PREFIX}{f.upper()}" for f in env_values)
            raise ValueError(
                f"Invalid environment variable values ({names}): {e}"
            ) from e

        result = {field: getattr(validated, field) for field in env_values}
        if "use_real_api" in env_values:
            result["use_real_api"] = _parse_bool(env_values["use_real_api"])
        return result

    def _load_env_file(self, env_file: str | Path) -> None:
        """Load KEY=VALUE lines from a .env file into the environment."""
        env_path = Path(env_file)
        if not env_path.exists():
            raise FileNotFoundError(f"Environment file not found: {env_path}")

        with env_path.open(encoding="utf-8") as f:
            for line_num, raw_line in enumerate(f, 1):
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    raise ValueError(
                        f"Invalid format at line {line_num}: {line}. "
                        "Expected KEY=VALUE format."
                    )
                key, value = (part.strip() for part in line.split("=", 1))
                if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                    value = value[1:-1]
                os.environ.setdefault(key, value)


class FileConfigLoader:
    """Loads configuration from the project's pyproject.toml."""

    def load_project_config(
        self, project_root: Path | None = None, profile: str | None = None
    ) -> dict[str, Any]:
        """Load ``[tool.content_enhancer]`` (or one of its profiles).

        Returns:
            Configuration values from the file; empty when there is no file
            or no section.

        Raises:
            ConfigFileError: If the file cannot be parsed or the profile is
                missing.
        """
        pyproject_path = self._find_pyproject_toml(project_root)
        if pyproject_path is None:
            return {}

        try:
            with pyproject_path.open(mode="rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(
                pyproject_path, f"Failed to parse TOML: {e}", cause=e
            ) from e

        section = data.get("tool", {}).get(TOOL_SECTION, {})
        if not isinstance(section, dict) or not section:
            if profile:
                raise ConfigFileError(
                    pyproject_path, f"Profile '{profile}' not found. Available: []"
                )
            return {}

        if profile:
            profiles = section.get("profiles", {})
            if profile not in profiles:
                raise ConfigFileError(
                    pyproject_path,
                    f"Profile '{profile}' not found. Available: {sorted(profiles)}",
                )
            return dict(profiles[profile])

        config = dict(section)
        config.pop("profiles", None)
        return config

    def _find_pyproject_toml(self, start: Path | None) -> Path | None:
        current = (start or Path.cwd()).resolve()
        for directory in (current, *current.parents):
            candidate = directory / "pyproject.toml"
            if candidate.is_file():
                return candidate
            if start is not None:
                # An explicit root is authoritative; do not walk upwards.
                return None
        return None


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}
