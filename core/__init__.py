"""Core application components."""

from core.logger import setup_logger, get_logger
from core.constants import (
    ImportDefaults,
    RaffleDefaults,
    GroupingDefaults,
    ExportDefaults,
    ThemeDefaults,
    SpinState,
    AppTab,
)
from core.exceptions import (
    ApplicationError,
    ConfigurationError,
    ValidationError,
    FileValidationError,
    InvalidGroupCountError,
    ServiceError,
    RaffleError,
    NoEligibleParticipantsError,
    SpinInProgressError,
    GroupingError,
    GenerationInProgressError,
    ExportError,
    EmptyExportError,
)
from core.models import Participant, Group, RaffleWinner

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    # Constants
    'ImportDefaults',
    'RaffleDefaults',
    'GroupingDefaults',
    'ExportDefaults',
    'ThemeDefaults',
    'SpinState',
    'AppTab',
    # Exceptions
    'ApplicationError',
    'ConfigurationError',
    'ValidationError',
    'FileValidationError',
    'InvalidGroupCountError',
    'ServiceError',
    'RaffleError',
    'NoEligibleParticipantsError',
    'SpinInProgressError',
    'GroupingError',
    'GenerationInProgressError',
    'ExportError',
    'EmptyExportError',
    # Models
    'Participant',
    'Group',
    'RaffleWinner',
]
