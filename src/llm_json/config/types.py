"""Configuration data types.

Configuration is resolved once into a `ResolvedConfig`, then frozen into a
`FrozenConfig` that the extractor holds for its whole lifetime.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

from .env_loader import env_var_for

# --- Source Tracking Types ---

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

# --- Core Configuration Data ---


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing.

    Carries an `origin` map recording which source supplied each field.
    """

    enable_repair: bool
    min_description_length: int
    max_text_size: int
    exhaustive_fallback: bool

    origin: SourceMap

    def to_frozen(self) -> "FrozenConfig":
        """Drop the audit metadata and return the immutable form."""
        values = self._asdict()
        values.pop("origin")
        return FrozenConfig(**values)

    def with_overrides(self, **overrides: object) -> "ResolvedConfig":
        """Return a copy with programmatic overrides applied.

        Unknown field names are ignored. Overridden fields are marked as
        `programmatic` in the origin map.
        """
        new_values = self._asdict()
        new_origin = dict(self.origin)
        for field, value in overrides.items():
            if field in FrozenConfig.__dataclass_fields__:
                new_values[field] = value
                new_origin[field] = "programmatic"
        new_values["origin"] = new_origin
        return ResolvedConfig(**new_values)

    def audit(self) -> str:
        """One `field: origin:value` line per field, in declaration order."""
        lines = []
        for field in FrozenConfig.__dataclass_fields__:
            origin = self.origin.get(field, "default")
            value = getattr(self, field)
            if origin == "env":
                value_display = f"env:{env_var_for(field)}={value}"
            else:
                value_display = f"{origin}:{value}"
            lines.append(f"{field}: {value_display}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable settings consumed by `Extractor`."""

    enable_repair: bool = True
    min_description_length: int = 20
    max_text_size: int = 1_000_000
    exhaustive_fallback: bool = False
