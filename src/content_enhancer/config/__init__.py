"""Configuration for the enhancement pipeline.

Resolve once, freeze, then flow: `resolve_config()` merges programmatic
overrides, CONTENT_ENHANCER_* environment variables, the project's
``[tool.content_enhancer]`` table and schema defaults into a `FrozenConfig`.
"""

from .loaders import ConfigFileError, EnvironmentConfigLoader, FileConfigLoader
from .resolver import ConfigResolver, resolve_config, resolve_config_with_origin
from .schema import EnhancerSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [
    "ConfigFileError",
    "ConfigOrigin",
    "ConfigResolver",
    "EnhancerSettings",
    "EnvironmentConfigLoader",
    "FileConfigLoader",
    "FrozenConfig",
    "ResolvedConfig",
    "SourceMap",
    "resolve_config",
    "resolve_config_with_origin",
]
