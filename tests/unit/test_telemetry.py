"""Telemetry context behavior, enabled and disabled."""

import pytest

from llm_json import telemetry
from llm_json.telemetry import InMemoryReporter, TelemetryContext


class _ExplodingReporter:
    def record_timing(self, scope, duration, **metadata):
        raise RuntimeError("boom")

    def record_metric(self, scope, value, **metadata):
        raise RuntimeError("boom")


@pytest.mark.unit
def test_disabled_context_is_shared_noop(monkeypatch):
    monkeypatch.setattr(telemetry, "_TELEMETRY_ENABLED", False)

    first = TelemetryContext(InMemoryReporter())
    second = TelemetryContext()

    assert first is second
    assert first.enabled is False
    with first("anything") as ctx:
        ctx.metric("ignored", 1)


@pytest.mark.unit
@pytest.mark.usefixtures("telemetry_enabled")
def test_enabled_without_reporters_is_noop():
    assert TelemetryContext().enabled is False


@pytest.mark.unit
@pytest.mark.usefixtures("telemetry_enabled")
def test_nested_scopes_record_paths():
    reporter = InMemoryReporter()
    tele = TelemetryContext(reporter)

    with tele("outer"):
        with tele("inner"):
            tele.count("hits", 2)

    assert set(reporter.timings) == {"outer", "outer.inner"}
    value, metadata = reporter.metrics["outer.inner.hits"][0]
    assert value == 2
    assert metadata["metric_type"] == "counter"
    assert metadata["parent_scope"] == "outer.inner"
    _, inner_metadata = reporter.timings["outer.inner"][0]
    assert inner_metadata["depth"] == 1


@pytest.mark.unit
@pytest.mark.usefixtures("telemetry_enabled")
def test_empty_scope_name_rejected():
    tele = TelemetryContext(InMemoryReporter())

    with pytest.raises(ValueError, match="non-empty"):
        with tele(""):
            pass


@pytest.mark.unit
@pytest.mark.usefixtures("telemetry_enabled")
def test_failing_reporter_is_logged_not_raised(caplog):
    good = InMemoryReporter()
    tele = TelemetryContext(_ExplodingReporter(), good)

    with tele("work"):
        pass

    assert "work" in good.timings
    assert "Telemetry reporter '_ExplodingReporter' failed" in caplog.text


@pytest.mark.unit
def test_report_summarizes_scopes():
    reporter = InMemoryReporter()
    reporter.record_timing("extract", 0.5)
    reporter.record_metric("extract.hits", 3)

    report = reporter.get_report()

    assert report.splitlines()[0] == "=== Extraction Telemetry ==="
    assert "Calls: 1" in report
    assert "Total: 3" in report
