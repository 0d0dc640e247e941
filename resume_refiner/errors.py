from typing import Optional


class RefinerError(Exception):
    """Base class for every failure raised by the refinement pipeline."""


class ValidationError(RefinerError, ValueError):
    """Input rejected before any call to the generation service."""

    def __init__(self, field: str, reason: str):
        super().__init__(reason)
        self.field = field
        self.reason = reason


class GenerationTimeoutError(RefinerError, TimeoutError):
    def __init__(self, timeout: float):
        super().__init__(f"Generation attempt timed out after {timeout:g}s")
        self.timeout = timeout


class SchemaViolationError(RefinerError):
    """Parsed response does not line up with the request."""

    def __init__(self, message: str, collection: Optional[str] = None, item_id: Optional[str] = None):
        super().__init__(message)
        self.collection = collection
        self.item_id = item_id


class TransportError(RefinerError):
    """The call failed before a response was obtained."""

    def __init__(self, message: str, overloaded: bool = False):
        super().__init__(message)
        self.overloaded = overloaded


class RefinementFailedError(RefinerError):
    """Terminal failure once the attempt budget is exhausted."""

    def __init__(self, attempts: int, cause: Exception, overloaded: bool = False):
        if overloaded:
            msg = f"Generation service is overloaded; gave up after {attempts} attempts: {cause}"
        else:
            msg = f"Failed to optimize resume after {attempts} attempts: {cause}"
        super().__init__(msg)
        self.attempts = attempts
        self.cause = cause
        self.overloaded = overloaded


class CoverLetterError(RefinerError):
    pass


class RepositoryError(RefinerError):
    pass
