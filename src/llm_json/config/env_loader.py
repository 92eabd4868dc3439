"""Environment variable configuration loading.

Reads `LLM_JSON_*` variables and coerces them through `ExtractorSettings`.
"""

import os
from typing import Any

from .schema import ENV_PREFIX, ExtractorSettings

PROFILE_ENV_VAR = f"{ENV_PREFIX}PROFILE"
CONFIG_HOME_ENV_VAR = f"{ENV_PREFIX}CONFIG_HOME"


def env_var_for(field_name: str) -> str:
    """Return the environment variable that sets `field_name`."""
    return f"{ENV_PREFIX}{field_name.upper()}"


class EnvironmentConfigLoader:
    """Loads configuration from `LLM_JSON_*` environment variables."""

    def load_env_config(self) -> dict[str, Any]:
        """Load configuration values that are set in the environment.

        Returns:
            Only the fields actually present in the environment, already
            coerced to their schema types.

        Raises:
            ValueError: If an environment variable holds an invalid value.
        """
        raw = {
            field_name: os.environ[env_var_for(field_name)]
            for field_name in ExtractorSettings.field_names()
            if env_var_for(field_name) in os.environ
        }
        if not raw:
            return {}

        try:
            settings = ExtractorSettings.model_validate(raw)
        except Exception as e:
            assignments = ", ".join(
                f"{env_var_for(name)}={value}" for name, value in raw.items()
            )
            raise ValueError(
                f"Invalid environment variable values: {assignments}. Error: {e}"
            ) from e

        return {field_name: getattr(settings, field_name) for field_name in raw}

    def get_env_summary(self) -> dict[str, str]:
        """Return every `LLM_JSON_*` variable currently set."""
        return {
            name: value
            for name, value in sorted(os.environ.items())
            if name.upper().startswith(ENV_PREFIX)
        }
