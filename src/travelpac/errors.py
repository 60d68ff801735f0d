"""
Exception hierarchy for the Travelpac pipeline.

Each stage raises a specific error type; no stage recovers from another
stage's failure, so every error surfaces to the caller of Pipeline.run.
"""


class TravelpacError(Exception):
    """Base exception for all pipeline failures."""


class ResourceNotFoundError(TravelpacError, FileNotFoundError):
    """Raised when the input spreadsheet or a config file does not exist."""


class SchemaMismatchError(TravelpacError, ValueError):
    """Raised for an invalid sheet selector or an unexpected header."""


class DataValidationError(TravelpacError, ValueError):
    """Raised when a row carries a value that cannot be dropped as missing."""


class ComputationUndefinedError(TravelpacError, ZeroDivisionError):
    """Raised when a division by a zero or missing denominator is attempted."""


class VerificationError(TravelpacError):
    """Raised when a verification checkpoint fails in strict mode."""
