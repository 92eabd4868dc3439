"""Configuration for the extraction pipeline.

Resolve once, freeze, then flow: `resolve_config()` merges every source into
a `ResolvedConfig`, and `ResolvedConfig.to_frozen()` produces the
`FrozenConfig` an `Extractor` holds.
"""

from llm_json.exceptions import ConfigFileError, ProfileNotFoundError

from .api import (
    check_environment,
    get_effective_profile,
    list_available_profiles,
    print_config_audit,
    resolve_config,
)
from .audit import SourceTracker, summarize_origins
from .file_loader import FileConfigLoader
from .resolver import ConfigResolver
from .schema import ExtractorSettings
from .scope import config_override, config_scope, get_ambient_resolved_config
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [  # noqa: RUF022
    # Main API
    "resolve_config",
    "list_available_profiles",
    "get_effective_profile",
    "print_config_audit",
    "check_environment",
    # Scoping
    "config_scope",
    "config_override",
    "get_ambient_resolved_config",
    # Core types
    "ResolvedConfig",
    "FrozenConfig",
    "SourceMap",
    "ConfigOrigin",
    # Advanced usage
    "ExtractorSettings",
    "ConfigResolver",
    "FileConfigLoader",
    "ConfigFileError",
    "ProfileNotFoundError",
    "SourceTracker",
    "summarize_origins",
]
