"""Exceptions for structured-data extraction"""  # noqa: D415

from pathlib import Path


class LLMJsonError(Exception):
    """Base exception for llm_json errors"""  # noqa: D415


class ConfigurationError(LLMJsonError):
    """Raised when extractor configuration is invalid"""  # noqa: D415


class ExtractionMiss(LLMJsonError):
    """A strategy did not produce a structured value.

    Carried inside a `Failure` rather than raised; the dispatcher records the
    message and moves on to the next strategy.
    """

    def __init__(self, message: str, *, strategy: str | None = None) -> None:
        """Initialize with a reason and the name of the strategy that missed."""
        self.strategy = strategy
        super().__init__(message)


class RepairError(ExtractionMiss):
    """Raised when the repair routine cannot produce parseable text"""  # noqa: D415


class ConfigFileError(ConfigurationError):
    """Raised when a configuration file cannot be loaded"""  # noqa: D415

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        """Initialize with file path, message, and optional cause."""
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


class ProfileNotFoundError(ConfigFileError):
    """Raised when a requested profile is absent from a configuration file"""  # noqa: D415

    def __init__(self, file_path: Path, profile: str, available: list[str]) -> None:
        """Initialize with file path, the missing profile, and the known ones."""
        self.profile = profile
        self.available = available
        super().__init__(
            file_path,
            f"Profile '{profile}' not found. Available profiles: {available}",
        )
