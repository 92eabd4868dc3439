"""The extraction pipeline: pre-checks, scanning, classification and strategies."""

from .classifier import classify
from .dispatcher import Extractor
from .precheck import looks_non_structured, looks_structured
from .scanner import scan
from .strategies import build_strategies, parse_with_repair
from .validation import is_structurally_valid, validate_against_schema

__all__ = [
    "Extractor",
    "build_strategies",
    "classify",
    "is_structurally_valid",
    "looks_non_structured",
    "looks_structured",
    "parse_with_repair",
    "scan",
    "validate_against_schema",
]
