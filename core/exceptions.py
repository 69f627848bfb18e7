"""Application-wide exception classes."""

from __future__ import annotations


class ApplicationError(Exception):
    """Base exception for all application errors."""
    pass


class ConfigurationError(ApplicationError):
    """Raised when configuration is invalid."""
    pass


class ValidationError(ApplicationError):
    """Raised when user input fails validation."""
    pass


class FileValidationError(ValidationError):
    """Raised when an uploaded list file cannot be read."""
    pass


class InvalidGroupCountError(ValidationError):
    """Raised when the requested group count does not fit the pool."""
    pass


class ServiceError(ApplicationError):
    """Base exception for service-level errors."""
    pass


class RaffleError(ServiceError):
    """Base exception for raffle operations."""
    pass


class NoEligibleParticipantsError(RaffleError):
    """Raised when a draw starts with nobody left to draw."""
    pass


class SpinInProgressError(RaffleError):
    """Raised when a spin is requested while another one is running."""
    pass


class GroupingError(ServiceError):
    """Base exception for grouping operations."""
    pass


class GenerationInProgressError(GroupingError):
    """Raised when groups are requested while a generation is in flight."""
    pass


class ExportError(ServiceError):
    """Base exception for export operations."""
    pass


class EmptyExportError(ExportError):
    """Raised when there are no groups to export."""
    pass
