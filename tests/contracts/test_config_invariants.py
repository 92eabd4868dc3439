"""Invariants of the resolve-once, freeze-then-flow configuration."""

import dataclasses

import pytest

from llm_json import create_extractor
from llm_json.config import ExtractorSettings, FrozenConfig, config_scope, resolve_config


@pytest.mark.contract
def test_frozen_defaults_match_settings_schema():
    schema_defaults = {
        name: info.default for name, info in ExtractorSettings.model_fields.items()
    }

    assert dataclasses.asdict(FrozenConfig()) == schema_defaults


@pytest.mark.contract
def test_resolved_fields_match_frozen_fields():
    resolved_fields = set(resolve_config()._fields) - {"origin"}

    assert resolved_fields == {f.name for f in dataclasses.fields(FrozenConfig)}


@pytest.mark.contract
def test_every_field_has_an_origin():
    resolved = resolve_config({"enable_repair": False})

    assert set(resolved.origin) == set(ExtractorSettings.field_names())


@pytest.mark.contract
def test_extractor_settings_do_not_follow_later_changes(monkeypatch):
    extractor = create_extractor()
    monkeypatch.setenv("LLM_JSON_ENABLE_REPAIR", "false")

    assert extractor.config.enable_repair is True
    assert create_extractor().config.enable_repair is False


@pytest.mark.contract
def test_scope_does_not_leak():
    scoped = resolve_config().with_overrides(max_text_size=5)

    with config_scope(scoped):
        assert create_extractor().config.max_text_size == 5

    assert create_extractor().config.max_text_size == FrozenConfig().max_text_size
