"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces values
from every configuration source (environment, files, programmatic) into
the right types with proper defaults.
"""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "LLM_JSON_"


class ExtractorSettings(BaseSettings):
    """Pydantic settings schema for the extraction pipeline.

    Reads `LLM_JSON_*` environment variables when instantiated without
    arguments.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=None,
        case_sensitive=False,
        extra="ignore",
    )

    enable_repair: bool = Field(
        default=True,
        description="Retry failed parses through the json-repair library",
    )

    min_description_length: int = Field(
        default=20,
        description="Shortest line accepted as an inferred description",
        ge=1,
    )

    max_text_size: int = Field(
        default=1_000_000,
        description="Inputs longer than this are truncated before extraction",
        ge=1,
    )

    exhaustive_fallback: bool = Field(
        default=False,
        description="Run every strategy after the preferred ones miss",
    )

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Field names in declaration order."""
        return tuple(cls.model_fields)

    def to_dict(self) -> dict[str, Any]:
        """Plain dictionary of field values."""
        return {name: getattr(self, name) for name in self.field_names()}
