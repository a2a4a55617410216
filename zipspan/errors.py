"""zipspan error hierarchy and exceptions."""

from __future__ import annotations


class ZipspanError(Exception):
    """Base exception for all zipspan errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ValidationError(ZipspanError, ValueError):
    """Raised when a span field is given an invalid argument."""
    pass


class DecodeError(ZipspanError):
    """Raised when the canonical JSON form of a span cannot be decoded."""
    pass


class ConfigError(ZipspanError):
    """Raised when configuration is invalid or conflicting."""
    pass
