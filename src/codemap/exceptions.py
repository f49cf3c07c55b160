# Custom exceptions for codemap

class CodemapError(Exception):
    """Base exception for all application-specific errors."""
    pass

class BlueprintLoadError(CodemapError):
    """Raised when a persisted blueprint cannot be loaded."""
    pass

class MalformedBlueprintError(BlueprintLoadError):
    """Raised when a blueprint document is not valid JSON or lacks required sections."""

    def __init__(self, message: str, section: str = None):
        self.section = section
        super().__init__(message)

class IncompatibleVersionError(BlueprintLoadError):
    """Raised when a blueprint was written by a newer format version."""

    def __init__(self, found: str, supported: str):
        self.found = found
        self.supported = supported
        super().__init__(
            f"Blueprint format version {found} is newer than supported version {supported}."
        )

class ConfigError(CodemapError):
    """Raised for configuration-related problems."""
    pass

class GenerationCancelledError(CodemapError):
    """Raised when blueprint generation is cancelled between phases."""

    def __init__(self, phase: str):
        self.phase = phase
        super().__init__(f"Blueprint generation cancelled before phase '{phase}'")

class InvalidFactsError(CodemapError):
    """Raised when extracted per-file facts cannot be parsed."""

    def __init__(self, message: str, line: int = None):
        self.line = line
        super().__init__(message)
