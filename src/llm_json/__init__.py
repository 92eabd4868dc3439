"""Recover structured JSON values from language-model responses."""

import importlib.metadata
import logging

from llm_json.api import (
    classify,
    clean_json_string,
    create_extractor,
    extract_candidates,
    extract_json,
    extract_json_array,
    has_structure,
    looks_non_structured,
    safe_parse,
    validate_json,
)
from llm_json.config import FrozenConfig, ResolvedConfig, config_scope, resolve_config
from llm_json.core.types import (
    Candidate,
    ExtractionDiagnostics,
    Failure,
    FieldSpec,
    InputType,
    ParseOutcome,
    Result,
    StrategyName,
    Success,
    ValidationOutcome,
)
from llm_json.exceptions import (
    ConfigFileError,
    ConfigurationError,
    ExtractionMiss,
    LLMJsonError,
    ProfileNotFoundError,
    RepairError,
)
from llm_json.extraction.dispatcher import Extractor
from llm_json.telemetry import TelemetryContext, TelemetryReporter

# Version handling
try:
    __version__ = importlib.metadata.version("llm-json")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the application configures it.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Extraction
    "extract_json",
    "extract_json_array",
    "safe_parse",
    "validate_json",
    "has_structure",
    "looks_non_structured",
    "classify",
    "extract_candidates",
    "clean_json_string",
    # Extractor
    "Extractor",
    "create_extractor",
    # Configuration
    "resolve_config",
    "config_scope",
    "ResolvedConfig",
    "FrozenConfig",
    # Telemetry (extension points)
    "TelemetryContext",
    "TelemetryReporter",
    # Core types
    "Candidate",
    "ExtractionDiagnostics",
    "FieldSpec",
    "InputType",
    "ParseOutcome",
    "StrategyName",
    "ValidationOutcome",
    "Result",
    "Success",
    "Failure",
    # Exceptions
    "LLMJsonError",
    "ExtractionMiss",
    "RepairError",
    "ConfigurationError",
    "ConfigFileError",
    "ProfileNotFoundError",
]
