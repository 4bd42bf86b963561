class GenerationError(Exception):
    """Base class for anything that aborts a generation run."""

class ExternalServiceError(GenerationError):
    """Text-generation call failed, timed out or returned nothing."""

class ArtifactParseError(GenerationError):
    """Structured response was not valid JSON."""

class ArtifactSchemaError(GenerationError):
    """Structured response parsed but does not match the artifact schema."""

class RenderError(GenerationError):
    """Spreadsheet or document rendering failed."""

class RunInProgressError(Exception):
    """A generation run is already registered for this model id."""
