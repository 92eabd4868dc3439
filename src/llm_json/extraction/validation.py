"""Structural and schema validation of extracted values"""  # noqa: D415

from collections.abc import Mapping
import json
import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from llm_json.core.types import FieldSpec, ValidationOutcome, ValidationSchema

log = logging.getLogger(__name__)


def is_array(value: Any) -> bool:
    """Array predicate used for the `array` type tag."""
    return isinstance(value, list | tuple)


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


_TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "number": _is_number,
    "integer": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "object": lambda v: isinstance(v, Mapping),
    "array": is_array,
    "null": lambda v: v is None,
}


def type_tag(value: Any) -> str:
    """Name the primitive type tag of `value` for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if _is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if is_array(value):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _matches_type(value: Any, tag: str) -> bool:
    check = _TYPE_CHECKS.get(tag)
    if check is None:
        return type_tag(value) == tag
    return check(value)


def is_structurally_valid(value: Any) -> bool:
    """Return True for mappings and sequences that survive JSON serialization.

    Empty containers are valid. Primitives, None, cyclic structures and
    values holding non-serializable objects are not.
    """
    if not isinstance(value, Mapping | list | tuple):
        return False
    try:
        json.dumps(value)
    except (TypeError, ValueError, RecursionError):
        return False
    return True


def validate_against_schema(value: Any, schema: Any) -> ValidationOutcome:
    """Validate `value` against a field schema or a Pydantic model class.

    Field schemas are checked in declaration order and every applicable error
    is collected. Validation never raises.
    """
    if hasattr(schema, "model_validate"):  # Pydantic model
        return _validate_with_model(value, schema)

    if not isinstance(schema, Mapping):
        return ValidationOutcome(valid=False, errors=("Invalid schema",))

    if not isinstance(value, Mapping):
        return ValidationOutcome(valid=False, errors=("Invalid data type",))

    errors = _collect_field_errors(value, schema)
    if errors:
        return ValidationOutcome(valid=False, errors=tuple(errors))
    return ValidationOutcome(valid=True)


def _collect_field_errors(
    value: Mapping[str, Any], schema: ValidationSchema
) -> list[str]:
    errors: list[str] = []

    for key, raw_spec in schema.items():
        if not isinstance(raw_spec, FieldSpec | Mapping):
            errors.append(f"Invalid schema for field: {key}")
            continue
        spec = FieldSpec.coerce(raw_spec)
        if spec.type is not None and not isinstance(spec.type, str):
            errors.append(f"Invalid schema for field: {key}")
            continue

        if key not in value:
            if spec.required:
                errors.append(f"Missing required field: {key}")
            continue

        field_value = value[key]

        if spec.type and not _matches_type(field_value, spec.type):
            errors.append(
                f"Invalid type for {key}: expected {spec.type}, "
                f"got {type_tag(field_value)}"
            )

        if spec.validate is not None and not _run_predicate(spec, key, field_value):
            errors.append(f"Invalid value for {key}: {field_value}")

    return errors


def _run_predicate(spec: FieldSpec, key: str, field_value: Any) -> bool:
    try:
        return bool(spec.validate(field_value))
    except Exception as e:  # noqa: BLE001
        # A predicate that blows up is reported as a failed check
        log.debug("Validator for field '%s' raised: %s", key, e)
        return False


def _validate_with_model(value: Any, model: Any) -> ValidationOutcome:
    try:
        model.model_validate(value)
    except PydanticValidationError as e:
        errors = tuple(
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        return ValidationOutcome(valid=False, errors=errors or (str(e),))
    return ValidationOutcome(valid=True)
