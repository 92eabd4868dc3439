"""Unit tests for the classify-then-dispatch extractor."""

import json
import logging

import pytest

from llm_json import telemetry
from llm_json.config import FrozenConfig
from llm_json.core.types import InputType, StrategyName
from llm_json.extraction.dispatcher import FULL_FALLBACK, Extractor
from llm_json.telemetry import InMemoryReporter


class TestPlans:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("input_type", "expected"),
        [
            (InputType.PURE_STRUCTURED, (StrategyName.DIRECT_PARSE,)),
            (
                InputType.FENCED_BLOCK,
                (StrategyName.FENCED_BLOCK, StrategyName.EMBEDDED_LITERAL),
            ),
            (
                InputType.EMBEDDED_LITERAL,
                (
                    StrategyName.EMBEDDED_LITERAL,
                    StrategyName.KEY_VALUE,
                    StrategyName.NATURAL_LANGUAGE,
                ),
            ),
            (
                InputType.KEY_VALUE_TEXT,
                (StrategyName.KEY_VALUE, StrategyName.NATURAL_LANGUAGE),
            ),
            (
                InputType.NATURAL_LANGUAGE,
                (
                    StrategyName.NATURAL_LANGUAGE,
                    StrategyName.DIRECT_PARSE,
                    StrategyName.FENCED_BLOCK,
                    StrategyName.EMBEDDED_LITERAL,
                    StrategyName.KEY_VALUE,
                ),
            ),
            (InputType.MIXED_OR_INVALID, FULL_FALLBACK),
        ],
    )
    def test_default_plans(self, input_type, expected):
        assert Extractor().plan_for(input_type) == expected

    @pytest.mark.unit
    def test_exhaustive_fallback_extends_every_plan_without_repeats(self):
        extractor = Extractor(FrozenConfig(exhaustive_fallback=True))

        for input_type in InputType:
            plan = extractor.plan_for(input_type)
            assert set(plan) == set(StrategyName)
            assert len(plan) == len(set(plan))

        assert extractor.plan_for(InputType.KEY_VALUE_TEXT)[:2] == (
            StrategyName.KEY_VALUE,
            StrategyName.NATURAL_LANGUAGE,
        )


class TestExtract:
    @pytest.mark.unit
    def test_pure_structured_uses_direct_parse(self):
        value, diagnostics = Extractor().extract_with_diagnostics('{"a": [1, 2]}')

        assert value == {"a": [1, 2]}
        assert diagnostics.input_type is InputType.PURE_STRUCTURED
        assert diagnostics.attempted_strategies == ["direct-parse"]
        assert diagnostics.successful_strategy == "direct-parse"
        assert diagnostics.used_fallback is False
        assert diagnostics.extraction_duration_ms is not None

    @pytest.mark.unit
    def test_second_preferred_strategy_can_win(self):
        # The fenced body is prose, so the embedded literal after it is used
        text = '```\nSee notes\n```\nresult: {"ok": true}'
        value, diagnostics = Extractor(
            FrozenConfig(enable_repair=False)
        ).extract_with_diagnostics(text)

        assert value == {"ok": True}
        assert diagnostics.input_type is InputType.FENCED_BLOCK
        assert diagnostics.attempted_strategies == ["fenced-block", "embedded-literal"]
        assert "fenced-block" in diagnostics.strategy_errors

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_input_returns_none(self, text):
        value, diagnostics = Extractor().extract_with_diagnostics(text)

        assert value is None
        assert diagnostics.attempted_strategies == []
        assert "empty_input" in diagnostics.flags

    @pytest.mark.unit
    def test_natural_language_runs_the_full_fallback_set(self):
        value, diagnostics = Extractor(
            FrozenConfig(enable_repair=False)
        ).extract_with_diagnostics("Sure thing")

        assert value is None
        assert diagnostics.input_type is InputType.NATURAL_LANGUAGE
        assert diagnostics.attempted_strategies == [
            "natural-language-field-inference",
            "direct-parse",
            "fenced-block",
            "embedded-literal",
            "structured-key-value",
        ]
        assert set(diagnostics.strategy_errors) == set(diagnostics.attempted_strategies)

    @pytest.mark.unit
    def test_exhaustive_fallback_recovers_key_values_after_fence_misses(self):
        text = "```python\ndef f():\n    pass\n```\nstatus: ok"

        assert Extractor(FrozenConfig(enable_repair=False)).extract(text) is None

        value, diagnostics = Extractor(
            FrozenConfig(enable_repair=False, exhaustive_fallback=True)
        ).extract_with_diagnostics(text)
        assert value == {"status": "ok"}
        assert diagnostics.successful_strategy == "structured-key-value"
        assert diagnostics.used_fallback is True

    @pytest.mark.unit
    def test_long_input_is_truncated_and_flagged(self):
        text = '{"a": 1}' + " " * 100 + "trailing words"
        value, diagnostics = Extractor(
            FrozenConfig(max_text_size=20)
        ).extract_with_diagnostics(text)

        assert value == {"a": 1}
        assert "truncated_input" in diagnostics.flags
        assert diagnostics.input_type is InputType.PURE_STRUCTURED

    @pytest.mark.unit
    def test_oversize_valid_json_is_returned_whole(self):
        value = [{"i": i, "s": "x" * 20} for i in range(200)]
        text = json.dumps(value)

        result, diagnostics = Extractor(
            FrozenConfig(max_text_size=100)
        ).extract_with_diagnostics(text)

        assert result == value
        assert "oversize_input" in diagnostics.flags
        assert "truncated_input" not in diagnostics.flags
        assert diagnostics.successful_strategy == "direct-parse"

    @pytest.mark.unit
    def test_literal_cut_by_truncation_is_dropped(self):
        text = '[{"b": 2}, {"c": 3}] and some trailing words'

        result, diagnostics = Extractor(
            FrozenConfig(max_text_size=10)
        ).extract_with_diagnostics(text)

        assert result is None
        assert "truncated_input" in diagnostics.flags

    @pytest.mark.unit
    def test_truncation_keeps_literals_before_the_cut(self):
        text = 'Intro {"a": 1} then [{"b": 2}, {"c": 3}] and more'

        result, diagnostics = Extractor(
            FrozenConfig(max_text_size=30)
        ).extract_with_diagnostics(text)

        assert result == {"a": 1}
        assert "truncated_input" in diagnostics.flags

    @pytest.mark.unit
    def test_unexpected_strategy_error_is_logged_and_skipped(self, caplog):
        def broken_reader(text):
            raise RuntimeError("reader exploded")

        text = '```json\n{"a": 1}\n```'
        with caplog.at_level(logging.WARNING, logger="llm_json"):
            value, diagnostics = Extractor(
                fence_reader=broken_reader
            ).extract_with_diagnostics(text)

        assert value == {"a": 1}
        assert diagnostics.successful_strategy == "embedded-literal"
        assert diagnostics.strategy_errors["fenced-block"].startswith("RuntimeError")
        assert any("fenced-block" in r.getMessage() for r in caplog.records)

    @pytest.mark.unit
    def test_diagnostics_to_dict_is_plain(self):
        _, diagnostics = Extractor().extract_with_diagnostics("name: Ann")
        data = diagnostics.to_dict()

        assert data["input_type"] == "key-value-text"
        assert data["successful_strategy"] == "structured-key-value"
        assert isinstance(data["flags"], list)


class TestTelemetry:
    @pytest.mark.unit
    @pytest.mark.usefixtures("telemetry_enabled")
    def test_scopes_and_success_counts_are_reported(self):
        reporter = InMemoryReporter()
        Extractor(reporters=[reporter]).extract('{"a": 1}')

        assert "extract" in reporter.timings
        assert "extract.strategy.direct-parse" in reporter.timings
        assert "extract.strategy.direct-parse.success" in reporter.metrics

    @pytest.mark.unit
    def test_disabled_telemetry_reports_nothing(self, monkeypatch):
        monkeypatch.setattr(telemetry, "_TELEMETRY_ENABLED", False)
        reporter = InMemoryReporter()
        Extractor(reporters=[reporter]).extract('{"a": 1}')

        assert reporter.timings == {}
        assert reporter.metrics == {}
