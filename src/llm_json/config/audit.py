"""Source tracking for resolved configuration."""

from .types import ConfigOrigin, SourceMap


class SourceTracker:
    """Records which source supplied each field during resolution."""

    def __init__(self) -> None:
        """Initialize an empty source tracker."""
        self._origins: dict[str, ConfigOrigin] = {}

    def set_origin(self, field: str, origin: ConfigOrigin) -> None:
        """Record the origin of a configuration field."""
        self._origins[field] = origin

    def get_source_map(self) -> SourceMap:
        """Return a copy of the current source map."""
        return dict(self._origins)


def summarize_origins(source_map: SourceMap) -> dict[str, int]:
    """Count fields per origin, e.g. ``{"default": 3, "env": 1}``."""
    counts: dict[str, int] = {}
    for origin in source_map.values():
        counts[origin] = counts.get(origin, 0) + 1
    return counts
