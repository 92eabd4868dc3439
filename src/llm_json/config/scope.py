"""Scoped configuration overrides.

Inside `config_scope(resolved)`, every `resolve_config()` call returns
`resolved` (plus any programmatic overrides) instead of reading the
configuration sources. Extractors already built keep their frozen settings.
"""

from collections.abc import Generator
from contextlib import contextmanager
import contextvars
from typing import Any

from .types import ResolvedConfig

_ambient_resolved_config: contextvars.ContextVar[ResolvedConfig] = (
    contextvars.ContextVar("llm_json_resolved_config")
)


def get_ambient_resolved_config() -> ResolvedConfig | None:
    """Return the configuration set by an enclosing scope, if any."""
    try:
        return _ambient_resolved_config.get()
    except LookupError:
        return None


@contextmanager
def config_scope(config: ResolvedConfig) -> Generator[None]:
    """Temporarily resolve to `config`.

    Example:
        base = resolve_config()
        with config_scope(base.with_overrides(enable_repair=False)):
            extractor = create_extractor()  # repair disabled
    """
    token = _ambient_resolved_config.set(config)
    try:
        yield
    finally:
        _ambient_resolved_config.reset(token)


@contextmanager
def config_override(**overrides: Any) -> Generator[None]:
    """Shorthand for `config_scope` over the current config plus overrides."""
    base_config = get_ambient_resolved_config()
    if base_config is None:
        from .api import resolve_config

        base_config = resolve_config()
    with config_scope(base_config.with_overrides(**overrides)):
        yield
