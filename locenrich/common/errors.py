"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for enrichment failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class InvalidInputError(PipelineError):
    """Raised when a position sample is structurally invalid."""

    error_code = "INVALID_INPUT"


class LookupFailedError(PipelineError):
    """Raised by lookup adapters; absorbed by the pipeline."""

    error_code = "LOOKUP_FAILED"


class PositionSourceError(PipelineError):
    """Raised when the position provider cannot supply a sample."""

    error_code = "POSITION_SOURCE_ERROR"
