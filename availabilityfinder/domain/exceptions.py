"""
Domain-specific exception hierarchy for the availability finder application.
"""


class AvailabilityError(Exception):
    """Base class for all application-level errors."""


class MissingIdentityError(AvailabilityError):
    """Raised when no calendar identity was supplied for a search."""


class CalendarStoreUnavailableError(AvailabilityError):
    """Raised when busy intervals cannot be read from a calendar store."""


class InvalidConfigurationError(AvailabilityError):
    """Raised when a search configuration cannot be used by the engine."""
