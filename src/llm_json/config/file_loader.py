"""File-based configuration loading with profile support.

Project settings live under `[tool.llm_json]` in the nearest
`pyproject.toml`; user settings live in `~/.config/llm_json.toml`. Both may
define named profiles under a `profiles` table.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

from llm_json.exceptions import ConfigFileError, ProfileNotFoundError

from .env_loader import CONFIG_HOME_ENV_VAR
from .schema import ENV_PREFIX

TOOL_SECTION = "llm_json"
PYPROJECT_PATH_ENV_VAR = f"{ENV_PREFIX}PYPROJECT_PATH"


class FileConfigLoader:
    """Loads configuration from TOML files with profile support."""

    def load_project_config(
        self, project_root: Path | None = None, profile: str | None = None
    ) -> dict[str, Any]:
        """Load `[tool.llm_json]` (or one of its profiles) from pyproject.toml.

        Args:
            project_root: Directory to search for pyproject.toml. If None,
                searches the current directory and its parents.
            profile: Optional profile name under `[tool.llm_json.profiles]`.

        Returns:
            Configuration values; empty if there is no file or no section.

        Raises:
            ConfigFileError: If the file cannot be parsed or the profile is
                missing.
        """
        pyproject_path = self._find_pyproject_toml(project_root)
        if pyproject_path is None:
            return {}

        data = self._read_toml(pyproject_path)
        section = data.get("tool", {}).get(TOOL_SECTION, {})
        if not section:
            return {}
        return self._select_profile(section, profile, pyproject_path)

    def load_home_config(self, profile: str | None = None) -> dict[str, Any]:
        """Load the home configuration file (or one of its profiles).

        Raises:
            ConfigFileError: If the file cannot be parsed or the profile is
                missing.
        """
        home_config_path = self.home_config_path()
        if not home_config_path.exists():
            return {}
        data = self._read_toml(home_config_path)
        return self._select_profile(data, profile, home_config_path)

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        """Profile names found in the project and home files.

        Unreadable files are treated as having no profiles.
        """
        profiles: dict[str, list[str]] = {"project": [], "home": []}

        pyproject_path = self._find_pyproject_toml(project_root)
        if pyproject_path is not None:
            try:
                data = self._read_toml(pyproject_path)
            except ConfigFileError:
                data = {}
            section = data.get("tool", {}).get(TOOL_SECTION, {})
            profiles["project"] = list(section.get("profiles", {}))

        home_config_path = self.home_config_path()
        if home_config_path.exists():
            try:
                data = self._read_toml(home_config_path)
            except ConfigFileError:
                data = {}
            profiles["home"] = list(data.get("profiles", {}))

        return profiles

    def home_config_path(self) -> Path:
        """Path of the home configuration file.

        `LLM_JSON_CONFIG_HOME` names the file directly when set.
        """
        override = os.getenv(CONFIG_HOME_ENV_VAR)
        if override:
            return Path(override)
        return Path.home() / ".config" / f"{TOOL_SECTION}.toml"

    @staticmethod
    def _read_toml(path: Path) -> dict[str, Any]:
        try:
            with path.open(mode="rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e

    @staticmethod
    def _select_profile(
        section: dict[str, Any], profile: str | None, path: Path
    ) -> dict[str, Any]:
        if profile:
            profiles = section.get("profiles", {})
            if profile not in profiles:
                raise ProfileNotFoundError(path, profile, list(profiles))
            return dict(profiles[profile])
        config = dict(section)
        config.pop("profiles", None)
        return config

    def _find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        """Find pyproject.toml by searching up the directory tree.

        `LLM_JSON_PYPROJECT_PATH` pins the file and disables the search.
        """
        pinned = os.getenv(PYPROJECT_PATH_ENV_VAR)
        if pinned:
            pinned_path = Path(pinned)
            return pinned_path if pinned_path.exists() else None

        current = Path(start_dir or Path.cwd()).resolve()
        while current != current.parent:
            candidate = current / "pyproject.toml"
            if candidate.exists():
                return candidate
            current = current.parent
        return None
