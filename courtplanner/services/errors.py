"""
Failures a caller can recover from. Every service checks its preconditions and
raises one of these before it touches any state, so a failed call leaves the
collections exactly as they were.
"""


class SchedulingError(Exception):
    status_code = 400


class ValidationError(SchedulingError, ValueError):
    """Malformed input: self-challenge, wrong participant count, unknown player."""
    status_code = 400


class AvailabilityConflict(SchedulingError):
    """A targeted player marked themselves unavailable for the hour."""
    status_code = 409


class OccupancyConflict(SchedulingError):
    """A targeted player already plays somewhere in the same hour."""
    status_code = 409


class CapacityExhausted(SchedulingError):
    """Every court of the hour is taken."""
    status_code = 409


class AuthorizationError(SchedulingError, PermissionError):
    status_code = 403


class StateError(SchedulingError):
    """The operation does not apply to the entity's current lifecycle state."""
    status_code = 409


class NotFoundError(SchedulingError, LookupError):
    status_code = 404
