"""
Exception hierarchy for the Tourna bracket engine.

Read operations report a missing entity by returning None. Exceptions are
reserved for operations that could not run or were rejected.
"""


class TournaError(Exception):
    """Base exception for all engine errors."""
    pass


class NotFoundError(TournaError):
    """Raised when a mutation targets an entity that does not exist."""
    pass


class ConflictError(TournaError):
    """Raised on a uniqueness violation."""
    pass


class ConstraintViolationError(TournaError):
    """Raised on a foreign-key or invariant breach."""
    pass


class InvalidStatusError(ConstraintViolationError):
    """Raised when a status value is not one of the known values."""
    pass


class InvalidTransitionError(ConstraintViolationError):
    """Raised when a tournament status change would move backwards."""
    pass


class RegistrationClosedError(ConstraintViolationError):
    """Raised when registering into a tournament that is no longer open."""
    pass


class InvalidWinnerError(ConstraintViolationError):
    """Raised when a winner is not one of the match's two players."""
    pass


class AlreadyCompletedError(ConstraintViolationError):
    """Raised when committing a winner for a match that already has one."""
    pass


class MatchCompletedError(ConstraintViolationError):
    """Raised when recording a round on a completed match."""
    pass


class StorageUnavailableError(TournaError):
    """Raised when the store cannot be reached or did not respond in time."""
    pass
