"""Custom exceptions for Quire."""


class QuireError(Exception):
    """Base exception for all Quire errors."""

    pass


class ConfigurationError(QuireError):
    """Raised when a backend, router or option is misconfigured."""

    pass


class DirectoryError(QuireError):
    """Raised when an output directory cannot be cleaned or created."""

    pass


class ParseError(QuireError):
    """Raised when a graph or config file cannot be read."""

    pass


class ValidationError(QuireError):
    """Raised when graph validation fails."""

    pass


class MissingReferenceError(ValidationError):
    """Raised when a referenced entity ID does not exist."""

    pass


class DuplicateIdError(ValidationError):
    """Raised when two entities share the same ID."""

    pass
