"""Errors used by the validation pipeline."""

class CredCheckError(Exception):
    """Base error for this package."""


class RuleError(CredCheckError):
    """Raised when a rule is invalid or cannot be compiled."""


class ParseError(CredCheckError):
    """Raised when a record cannot be tokenized or a field cannot be parsed."""


class ConfigError(CredCheckError):
    """Raised when a ValidationConfig holds unsupported values."""
