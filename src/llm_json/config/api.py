"""Public entry points of the configuration system."""

from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .scope import get_ambient_resolved_config
from .types import ResolvedConfig

_resolver = ConfigResolver()

# ruff: noqa: T201


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Precedence: programmatic > environment > project file > home file >
    defaults. Inside a `config_scope`, the scoped configuration replaces the
    file, environment and default sources.

    Args:
        programmatic: Overrides with the highest precedence. Unknown keys are
            ignored.
        profile: Profile to load from configuration files. Falls back to
            `LLM_JSON_PROFILE`.
        project_root: Directory to search for pyproject.toml. Defaults to the
            current directory and its parents.

    Returns:
        ResolvedConfig with merged values and an origin map.

    Raises:
        ValueError: If a value fails validation.
        ConfigFileError: If the project configuration file is malformed.

    Example:
        config = resolve_config({"enable_repair": False})
        print(config.audit())
    """
    ambient = get_ambient_resolved_config()
    if ambient is not None:
        return ambient.with_overrides(**programmatic) if programmatic else ambient
    return _resolver.resolve(
        programmatic=programmatic, profile=profile, project_root=project_root
    )


def list_available_profiles(project_root: Path | None = None) -> dict[str, list[str]]:
    """Profile names available in the project and home files."""
    return _resolver.list_available_profiles(project_root)


def get_effective_profile() -> str | None:
    """Profile named by `LLM_JSON_PROFILE`, or None."""
    return _resolver.get_effective_profile()


def print_config_audit(config: ResolvedConfig) -> None:
    """Print where each configuration value came from.

    Example output:
        enable_repair: default:True
        max_text_size: env:LLM_JSON_MAX_TEXT_SIZE=5000
    """
    print(config.audit())


def check_environment() -> dict[str, str]:
    """Return the `LLM_JSON_*` variables currently set."""
    return _resolver.env_loader.get_env_summary()
