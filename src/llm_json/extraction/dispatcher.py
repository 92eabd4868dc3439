"""Strategy dispatch.

`Extractor` classifies an input once, runs the strategies preferred for that
input type, and falls back to the full strategy set where the input type (or
the `exhaustive_fallback` setting) calls for it. The first strategy that
produces a structured value wins.
"""

from collections.abc import Iterable
import logging
import time

from llm_json.config.types import FrozenConfig
from llm_json.core.types import (
    ExtractedValue,
    ExtractionDiagnostics,
    Failure,
    InputType,
    StrategyName,
    Success,
)
from llm_json.telemetry import (
    TelemetryContext,
    TelemetryContextProtocol,
    TelemetryReporter,
)

from .classifier import classify
from .literals import first_literal_open_at
from .repair import strict_parse
from .strategies import FenceReader, Strategy, build_strategies
from .validation import is_structurally_valid

log = logging.getLogger(__name__)

FULL_FALLBACK: tuple[StrategyName, ...] = (
    StrategyName.DIRECT_PARSE,
    StrategyName.FENCED_BLOCK,
    StrategyName.EMBEDDED_LITERAL,
    StrategyName.KEY_VALUE,
    StrategyName.NATURAL_LANGUAGE,
)

PREFERRED_ORDER: dict[InputType, tuple[StrategyName, ...]] = {
    InputType.PURE_STRUCTURED: (StrategyName.DIRECT_PARSE,),
    InputType.FENCED_BLOCK: (
        StrategyName.FENCED_BLOCK,
        StrategyName.EMBEDDED_LITERAL,
    ),
    InputType.EMBEDDED_LITERAL: (
        StrategyName.EMBEDDED_LITERAL,
        StrategyName.KEY_VALUE,
        StrategyName.NATURAL_LANGUAGE,
    ),
    InputType.KEY_VALUE_TEXT: (
        StrategyName.KEY_VALUE,
        StrategyName.NATURAL_LANGUAGE,
    ),
    InputType.NATURAL_LANGUAGE: (StrategyName.NATURAL_LANGUAGE,),
    InputType.MIXED_OR_INVALID: (),
}

# Input types that always continue into the full fallback set
_FALLBACK_TYPES = frozenset({InputType.NATURAL_LANGUAGE, InputType.MIXED_OR_INVALID})


def _ordered_plan(
    input_type: InputType, *, exhaustive: bool
) -> tuple[tuple[StrategyName, bool], ...]:
    """(strategy, is_fallback) pairs for one input type, without repeats."""
    plan: list[tuple[StrategyName, bool]] = [
        (name, False) for name in PREFERRED_ORDER[input_type]
    ]
    if exhaustive or input_type in _FALLBACK_TYPES:
        seen = {name for name, _ in plan}
        plan.extend((name, True) for name in FULL_FALLBACK if name not in seen)
    return tuple(plan)


class Extractor:
    """Classify-then-dispatch extractor.

    Holds only immutable settings and strategy objects, so a single instance
    can be shared freely.

    Args:
        config: Frozen settings; defaults to `FrozenConfig()`.
        reporters: Telemetry reporters, used only when telemetry is enabled.
        fence_reader: Replacement fenced-block reader for the fenced-block
            strategy.
    """

    def __init__(
        self,
        config: FrozenConfig | None = None,
        *,
        reporters: Iterable[TelemetryReporter] = (),
        fence_reader: FenceReader | None = None,
    ) -> None:
        self.config = config or FrozenConfig()
        self._telemetry: TelemetryContextProtocol = TelemetryContext(*reporters)
        strategies = build_strategies(
            allow_repair=self.config.enable_repair,
            min_description_length=self.config.min_description_length,
            fence_reader=fence_reader,
        )
        self._plans: dict[InputType, tuple[tuple[Strategy, bool], ...]] = {
            input_type: tuple(
                (strategies[name], is_fallback)
                for name, is_fallback in _ordered_plan(
                    input_type, exhaustive=self.config.exhaustive_fallback
                )
            )
            for input_type in InputType
        }

    def plan_for(self, input_type: InputType) -> tuple[StrategyName, ...]:
        """Strategy names tried for `input_type`, in order."""
        return tuple(strategy.name for strategy, _ in self._plans[input_type])

    def extract(self, text: str) -> ExtractedValue | None:
        """Return the first structured value recovered from `text`, or None."""
        value, _ = self.extract_with_diagnostics(text)
        return value

    def extract_with_diagnostics(
        self, text: str
    ) -> tuple[ExtractedValue | None, ExtractionDiagnostics]:
        """Like `extract`, also reporting what was tried and what worked."""
        diagnostics = ExtractionDiagnostics()
        start = time.perf_counter()
        try:
            with self._telemetry("extract"):
                value = self._run(text, diagnostics)
        finally:
            diagnostics.extraction_duration_ms = (time.perf_counter() - start) * 1000
        return value, diagnostics

    def _run(
        self, text: str, diagnostics: ExtractionDiagnostics
    ) -> ExtractedValue | None:
        if not isinstance(text, str) or not text.strip():
            diagnostics.input_type = InputType.MIXED_OR_INVALID
            diagnostics.flags.add("empty_input")
            return None

        if len(text) > self.config.max_text_size:
            whole = strict_parse(text.strip())
            if isinstance(whole, Success) and is_structurally_valid(whole.value):
                diagnostics.input_type = InputType.PURE_STRUCTURED
                diagnostics.attempted_strategies.append(str(StrategyName.DIRECT_PARSE))
                diagnostics.successful_strategy = str(StrategyName.DIRECT_PARSE)
                diagnostics.flags.add("oversize_input")
                return whole.value
            text = self._truncate(text, diagnostics)
            if not text.strip():
                diagnostics.input_type = InputType.MIXED_OR_INVALID
                return None

        input_type = classify(text)
        diagnostics.input_type = input_type
        log.debug("Classified input of %d chars as %s", len(text), input_type)

        for strategy, is_fallback in self._plans[input_type]:
            name = str(strategy.name)
            diagnostics.attempted_strategies.append(name)
            try:
                with self._telemetry(f"strategy.{name}"):
                    result = strategy.attempt(text)
            except Exception as e:
                log.warning("Strategy %s raised unexpectedly", name, exc_info=True)
                diagnostics.strategy_errors[name] = f"{type(e).__name__}: {e}"
                continue

            if isinstance(result, Failure):
                log.debug("Strategy %s missed: %s", name, result.error)
                diagnostics.strategy_errors[name] = str(result.error)
                continue

            diagnostics.successful_strategy = name
            diagnostics.used_fallback = is_fallback
            self._telemetry.count(f"strategy.{name}.success")
            return result.value

        return None

    def _truncate(self, text: str, diagnostics: ExtractionDiagnostics) -> str:
        """Cut `text` to `max_text_size`, dropping any literal open at the cut."""
        limit = self.config.max_text_size
        open_at = first_literal_open_at(text, limit)
        cut = text[: limit if open_at is None else open_at]
        log.info("Truncating input from %d to %d characters", len(text), len(cut))
        diagnostics.flags.add("truncated_input")
        return cut
