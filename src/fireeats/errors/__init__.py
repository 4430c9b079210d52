"""Custom exception hierarchy for FireEats."""

from __future__ import annotations


class FireEatsError(Exception):
    """Base class for all custom errors raised by FireEats."""


# --- 3-layer hierarchy ---

class DomainError(FireEatsError):
    """Base class for domain-level errors."""


class InfrastructureError(FireEatsError):
    """Base class for infrastructure-level errors."""


class ApplicationError(FireEatsError):
    """Base class for application-level errors."""


# --- Domain errors ---

class DocumentConversionError(DomainError):
    """Raised when a stored document cannot be converted into a Restaurant."""

    def __init__(self, message: str, data: object = None) -> None:
        super().__init__(message)
        self.data = data


# --- Infrastructure errors ---

class StoreError(InfrastructureError):
    """Raised when the document store reports a transport or server failure."""


class DocumentDeleteError(StoreError):
    """Raised when a document delete is rejected by the store."""


# --- DI-specific errors ---

class CircularDependencyError(FireEatsError):
    """Raised when a circular dependency is detected during resolution."""


class ResolutionError(FireEatsError):
    """Raised when a dependency cannot be resolved."""


# --- Settings ---

class SettingsError(FireEatsError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
