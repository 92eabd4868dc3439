"""Core data types that flow through the extraction pipeline.

This module defines the small immutable records produced and consumed while
a single piece of text is classified, scanned, and handed to the extraction
strategies. Nothing here holds state across calls.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import dataclasses
import enum
import typing

# --- Minimal guard helpers (clarity > boilerplate) ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            enhanced_message = f"{field_name}: {message}"
            raise exc(enhanced_message)
        raise exc(message)


# --- Result Monad for Robust Error Handling ---
# Strategies return a Result instead of raising, so "this text did not match"
# stays part of the data flow and exceptions are left for real faults.

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful result."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A failed result, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]

type ExtractedValue = dict[str, typing.Any] | list[typing.Any]

# --- Classification ---


class InputType(enum.StrEnum):
    """Shape of an input text, decided once per call by the classifier."""

    PURE_STRUCTURED = "pure-structured"
    FENCED_BLOCK = "fenced-block"
    EMBEDDED_LITERAL = "embedded-literal"
    KEY_VALUE_TEXT = "key-value-text"
    NATURAL_LANGUAGE = "natural-language"
    MIXED_OR_INVALID = "mixed-or-invalid"


class StrategyName(enum.StrEnum):
    """Closed set of extraction strategies."""

    DIRECT_PARSE = "direct-parse"
    FENCED_BLOCK = "fenced-block"
    EMBEDDED_LITERAL = "embedded-literal"
    KEY_VALUE = "structured-key-value"
    NATURAL_LANGUAGE = "natural-language-field-inference"


# --- Scanning ---

CandidateSource = typing.Literal["fenced", "braces", "brackets"]


@dataclasses.dataclass(frozen=True, slots=True)
class Candidate:
    """A substring hypothesized to hold a structured value."""

    content: str
    confidence: float
    source: CandidateSource

    def __post_init__(self) -> None:
        """Validate confidence bounds and source tag."""
        _require(
            condition=isinstance(self.content, str),
            message="must be str",
            field_name="content",
            exc=TypeError,
        )
        _require(
            condition=0.0 <= self.confidence <= 1.0,
            message=f"must be within [0, 1], got {self.confidence!r}",
            field_name="confidence",
        )
        _require(
            condition=self.source in ("fenced", "braces", "brackets"),
            message=f"must be one of ['fenced','braces','brackets'], got {self.source!r}",
            field_name="source",
        )


@dataclasses.dataclass(frozen=True, slots=True)
class FencedBlock:
    """A ``` delimited region of text, in discovery order."""

    language: str
    body: str
    start: int


# --- Outcomes ---


@dataclasses.dataclass(frozen=True, slots=True)
class ParseOutcome:
    """Result of `safe_parse`.

    `success` is true exactly when `error` is None. On failure `data` holds
    the caller's fallback value.
    """

    success: bool
    data: typing.Any
    error: str | None = None

    def __post_init__(self) -> None:
        """Enforce the success/error invariant."""
        _require(
            condition=self.success == (self.error is None),
            message="success must be True exactly when error is None",
            field_name="error",
        )


@dataclasses.dataclass(frozen=True, slots=True)
class FieldSpec:
    """Validation rules for one field of a `ValidationSchema`."""

    required: bool = False
    type: str | None = None
    validate: Callable[[typing.Any], bool] | None = None

    @classmethod
    def coerce(cls, spec: FieldSpec | Mapping[str, typing.Any]) -> FieldSpec:
        """Accept either a FieldSpec or a plain mapping with the same keys."""
        if isinstance(spec, FieldSpec):
            return spec
        return cls(
            required=bool(spec.get("required", False)),
            type=spec.get("type"),
            validate=spec.get("validate"),
        )


type ValidationSchema = Mapping[str, FieldSpec | Mapping[str, typing.Any]]


@dataclasses.dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """Result of schema validation; `valid` is true exactly when `errors` is None."""

    valid: bool
    errors: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        """Enforce the valid/errors invariant."""
        _require(
            condition=self.valid == (self.errors is None),
            message="valid must be True exactly when errors is None",
            field_name="errors",
        )


@dataclasses.dataclass
class ExtractionDiagnostics:
    """What the dispatcher tried for one input and what worked."""

    input_type: InputType | None = None
    attempted_strategies: list[str] = dataclasses.field(default_factory=list)
    successful_strategy: str | None = None
    strategy_errors: dict[str, str] = dataclasses.field(default_factory=dict)
    used_fallback: bool = False
    flags: set[str] = dataclasses.field(default_factory=set)
    extraction_duration_ms: float | None = None

    def to_dict(self) -> dict[str, typing.Any]:
        """Plain, JSON-serializable view."""
        data = dataclasses.asdict(self)
        data["input_type"] = str(self.input_type) if self.input_type else None
        data["flags"] = sorted(self.flags)
        return data
