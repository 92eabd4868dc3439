"""Configuration resolution with precedence handling.

Precedence, highest first: programmatic > environment > project file >
home file > defaults.
"""

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from llm_json.exceptions import ConfigFileError, ProfileNotFoundError

from .audit import SourceTracker, summarize_origins
from .env_loader import PROFILE_ENV_VAR, EnvironmentConfigLoader
from .file_loader import FileConfigLoader
from .schema import ExtractorSettings
from .types import ConfigOrigin, ResolvedConfig

log = logging.getLogger(__name__)


class ConfigResolver:
    """Merges configuration from every source into a `ResolvedConfig`."""

    def __init__(self) -> None:
        """Initialize the configuration resolver."""
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources with proper precedence.

        Args:
            programmatic: Programmatic overrides (highest precedence).
            profile: Profile name to load from files; defaults to
                `LLM_JSON_PROFILE`.
            project_root: Directory to search for pyproject.toml.

        Raises:
            ValueError: If a value fails validation.
            ConfigFileError: If the project file is malformed.
        """
        source_tracker = SourceTracker()
        merged: dict[str, Any] = {}

        if profile is None:
            profile = self.get_effective_profile()

        # Step 1: schema defaults
        for field, info in ExtractorSettings.model_fields.items():
            merged[field] = info.default
            source_tracker.set_origin(field, "default")

        # Step 2: home file; errors here are non-fatal
        try:
            home_config = self.file_loader.load_home_config(profile=profile)
        except ConfigFileError as e:
            log.debug("Ignoring home configuration: %s", e)
            home_config = {}
        self._apply(merged, source_tracker, home_config, "file")

        # Step 3: project file; a missing profile is skipped, a bad file is not
        try:
            project_config = self.file_loader.load_project_config(
                project_root=project_root, profile=profile
            )
        except ProfileNotFoundError:
            log.debug("Profile %r not found in project configuration", profile)
            project_config = {}
        self._apply(merged, source_tracker, project_config, "file")

        # Step 4: environment
        self._apply(merged, source_tracker, self.env_loader.load_env_config(), "env")

        # Step 5: programmatic overrides
        self._apply(merged, source_tracker, programmatic or {}, "programmatic")

        # Step 6: validate the merged result
        try:
            settings = ExtractorSettings.model_validate(merged)
        except ValidationError as e:
            raise ValueError(f"Configuration validation failed: {e}") from e

        origin = source_tracker.get_source_map()
        log.debug("Resolved configuration origins: %s", summarize_origins(origin))
        return ResolvedConfig(**settings.to_dict(), origin=origin)

    @staticmethod
    def _apply(
        merged: dict[str, Any],
        source_tracker: SourceTracker,
        values: dict[str, Any],
        origin: ConfigOrigin,
    ) -> None:
        for field, value in values.items():
            if field in merged:
                merged[field] = value
                source_tracker.set_origin(field, origin)

    def get_effective_profile(self) -> str | None:
        """Profile named by `LLM_JSON_PROFILE`, if any."""
        return os.getenv(PROFILE_ENV_VAR) or None

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        """Profile names from the project and home files."""
        return self.file_loader.list_available_profiles(project_root)
