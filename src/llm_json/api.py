"""Public entry points.

None of the extraction functions here raise for bad input: failures come back
as `None`, an empty list, or a `ParseOutcome` with an error message. Only
`create_extractor` can raise, and only for invalid configuration.
"""

from collections.abc import Iterable
import logging
from pathlib import Path
from typing import Any

from llm_json.config import FrozenConfig, resolve_config
from llm_json.core.types import (
    Candidate,
    ExtractedValue,
    Failure,
    InputType,
    ParseOutcome,
    Success,
    ValidationOutcome,
)
from llm_json.extraction import classifier, precheck, scanner
from llm_json.extraction import text as text_helpers
from llm_json.extraction.dispatcher import Extractor
from llm_json.extraction.literals import (
    JSON_FENCE_LANGUAGES,
    is_meaningful_literal,
    iter_fenced_blocks,
    iter_literals,
    iter_top_level_literals,
)
from llm_json.extraction.repair import parse_repaired, strict_parse
from llm_json.extraction.strategies import FenceReader, parse_with_repair
from llm_json.extraction.validation import (
    is_structurally_valid,
    validate_against_schema,
)
from llm_json.telemetry import TelemetryReporter

log = logging.getLogger(__name__)

# Built from default settings; never reconfigured
_default_extractor = Extractor()

# Stands for "no fallback given" so None can be a caller's fallback
_DEFAULT_FALLBACK: Any = object()


def create_extractor(
    config: FrozenConfig | None = None,
    *,
    profile: str | None = None,
    project_root: Path | None = None,
    reporters: Iterable[TelemetryReporter] = (),
    fence_reader: FenceReader | None = None,
    **overrides: Any,
) -> Extractor:
    """Build an `Extractor`, resolving configuration when none is given.

    Args:
        config: Frozen settings to use as-is. When omitted, settings are
            resolved from every source with `overrides` on top.
        profile: Configuration profile to resolve.
        project_root: Directory to search for pyproject.toml.
        reporters: Telemetry reporters.
        fence_reader: Replacement fenced-block reader.
        **overrides: Programmatic settings, e.g. ``enable_repair=False``.

    Raises:
        ValueError: If a resolved setting is invalid.
        ConfigFileError: If the project configuration file is malformed.
    """
    if config is None:
        config = resolve_config(
            overrides or None, profile=profile, project_root=project_root
        ).to_frozen()
    return Extractor(config, reporters=reporters, fence_reader=fence_reader)


def extract_json(text: str) -> ExtractedValue | None:
    """Recover an object or array from `text`, or return None."""
    return _default_extractor.extract(text)


def extract_json_array(text: str) -> list[Any]:
    """Collect every object found in `text` into one list.

    Fenced blocks tagged as JSON (or untagged) are read first, in document
    order: an array body contributes its items, an object body contributes
    itself. Only when no block yields anything is the whole text consulted:
    as one JSON value, and failing that as a sequence of embedded literals,
    where an array contributes its items and an object contributes itself.
    """
    if not isinstance(text, str) or not text.strip():
        return []

    results: list[Any] = []
    for block in iter_fenced_blocks(text):
        if block.language not in JSON_FENCE_LANGUAGES or not block.body:
            continue
        parsed = parse_with_repair(block.body)
        if isinstance(parsed, Success):
            _collect(results, parsed.value)
        else:
            results.extend(_parse_brace_literals(block.body))

    if results:
        return results

    whole = strict_parse(text.strip())
    if isinstance(whole, Success) and is_structurally_valid(whole.value):
        _collect(results, whole.value)
        return results

    return _parse_top_level_literals(text)


def _collect(results: list[Any], value: ExtractedValue) -> None:
    if isinstance(value, list | tuple):
        results.extend(value)
    else:
        results.append(value)


def _parse_brace_literals(source: str) -> list[Any]:
    found = []
    for _, literal in iter_literals(source, "{"):
        if not is_meaningful_literal(literal):
            continue
        parsed = parse_with_repair(literal)
        if isinstance(parsed, Success):
            found.append(parsed.value)
    return found


def _parse_top_level_literals(source: str) -> list[Any]:
    # Bracket literals are parsed strictly so prose like "[sic]" stays out
    found: list[Any] = []
    for _, literal in iter_top_level_literals(source):
        if not is_meaningful_literal(literal):
            continue
        if literal.startswith("{"):
            parsed = parse_with_repair(literal)
        else:
            parsed = strict_parse(literal)
            if isinstance(parsed, Failure):
                found.extend(_parse_brace_literals(literal))
                continue
        if isinstance(parsed, Success) and is_structurally_valid(parsed.value):
            _collect(found, parsed.value)
    return found


def safe_parse(
    text: str, *, fallback: Any = _DEFAULT_FALLBACK, strict: bool = False
) -> ParseOutcome:
    """Parse `text` into an object or array without ever raising.

    Args:
        text: Candidate JSON text.
        fallback: Returned as `data` on failure; a fresh empty dict when
            omitted. An explicit None is returned as-is.
        strict: Disable repair and extraction; the first parse error is
            reported as-is.
    """
    if fallback is _DEFAULT_FALLBACK:
        fallback = {}

    if not isinstance(text, str) or not text:
        return ParseOutcome(success=False, data=fallback, error="Invalid input")

    if precheck.looks_non_structured(text):
        return ParseOutcome(
            success=False,
            data=fallback,
            error="Content appears to be non-structured",
        )

    parsed = strict_parse(text.strip())
    if isinstance(parsed, Success):
        if not is_structurally_valid(parsed.value):
            return ParseOutcome(
                success=False, data=fallback, error="Invalid JSON structure"
            )
        return ParseOutcome(success=True, data=parsed.value)

    if strict:
        return ParseOutcome(success=False, data=fallback, error=str(parsed.error))

    repaired = parse_repaired(text.strip())
    if isinstance(repaired, Success) and is_structurally_valid(repaired.value):
        return ParseOutcome(success=True, data=repaired.value)
    if isinstance(repaired, Failure):
        log.debug("Repair did not help, running full extraction: %s", repaired.error)

    extracted = extract_json(text)
    if extracted is not None:
        return ParseOutcome(success=True, data=extracted)

    return ParseOutcome(
        success=False, data=fallback, error="Failed to extract valid JSON"
    )


def validate_json(value: Any, schema: Any) -> ValidationOutcome:
    """Check `value` against a field schema or a Pydantic model class."""
    return validate_against_schema(value, schema)


def has_structure(text: str) -> bool:
    """Return True if `text` is shaped like a single object or array."""
    return precheck.looks_structured(text)


def looks_non_structured(text: str) -> bool:
    """Return True if `text` reads as prose or code rather than data."""
    return precheck.looks_non_structured(text)


def classify(text: str) -> InputType:
    """Return the input type `extract_json` would dispatch on."""
    return classifier.classify(text)


def extract_candidates(text: str) -> list[Candidate]:
    """Return the ranked candidates found in `text`."""
    return scanner.scan(text)


def clean_json_string(value: str) -> str:
    """Escape newlines, tabs and double quotes for use inside a JSON string."""
    return text_helpers.clean_json_string(value)
