"""Exceptions raised when calculator inputs are rejected."""

from __future__ import annotations


class ValidationError(ValueError):
    """An input value is outside its allowed domain.

    The offending parameter name is kept in `field` so callers (the CLI,
    a form) can point the user at it.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class ConfigurationError(ValidationError):
    """An enumerated option (direction, limit style, sizing method) is unknown."""
