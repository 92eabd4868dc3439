"""Adapter around the `json_repair` library.

`repair_text` turns near-valid JSON (single quotes, trailing commas,
unquoted keys, unterminated brackets) into valid JSON text. The library is
treated as a black-box pure function: whatever it raises is folded into a
`Failure` so callers only ever see a Result.
"""

import json
import logging
from typing import Any

from json_repair import repair_json

from llm_json.core.types import Failure, Result, Success
from llm_json.exceptions import ExtractionMiss, RepairError

log = logging.getLogger(__name__)

# What repair_json returns when it found nothing to repair into
_EMPTY_REPAIRS = frozenset({"", '""', "''"})


def strict_parse(text: str) -> Result[Any, ExtractionMiss]:
    """Parse `text` with the standard JSON decoder and no repair."""
    try:
        return Success(json.loads(text))
    except json.JSONDecodeError as e:
        return Failure(ExtractionMiss(f"Invalid JSON: {e}"))
    except RecursionError:
        return Failure(ExtractionMiss("Invalid JSON: nesting too deep"))


def repair_text(text: str) -> Result[str, RepairError]:
    """Return repaired JSON text, or a `RepairError` if nothing usable came out."""
    try:
        repaired = repair_json(text, ensure_ascii=False)
    except Exception as e:  # noqa: BLE001
        log.debug("json_repair raised on %d chars: %s", len(text), e)
        return Failure(RepairError(f"Repair failed: {e}"))

    if not isinstance(repaired, str) or repaired.strip() in _EMPTY_REPAIRS:
        return Failure(RepairError("Repair produced no structured text"))
    return Success(repaired)


def parse_repaired(text: str) -> Result[Any, ExtractionMiss]:
    """Run one repair pass over `text`, then parse the result strictly."""
    repaired = repair_text(text)
    if isinstance(repaired, Failure):
        return repaired
    parsed = strict_parse(repaired.value)
    if isinstance(parsed, Failure):
        return Failure(RepairError(f"Repaired text is still invalid: {parsed.error}"))
    return parsed
