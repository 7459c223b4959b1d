class DomainError(Exception):
    """Base exception for expected business outcomes.

    Every subclass is a structured failure returned to the caller; none of
    them means the system is broken.
    """


class ValidationError(DomainError):
    """Raised at the caller boundary when input data has the wrong shape."""


class NotFoundError(DomainError):
    """A shift, user, assignment or attendance record does not exist."""


class ShiftNotFoundError(NotFoundError):
    pass


class StaffNotFoundError(NotFoundError):
    """The target identity is missing, inactive, or not a staff member."""


class AssignmentNotFoundError(NotFoundError):
    pass


class AttendanceNotFoundError(NotFoundError):
    pass


class ConflictError(DomainError):
    """The request clashes with current state (capacity, duplicates, overlaps)."""


class CapacityExceededError(ConflictError):
    pass


class DuplicateAssignmentError(ConflictError):
    pass


class SchedulingConflictError(ConflictError):
    pass


class AlreadyCheckedInError(ConflictError):
    pass


class AlreadyCheckedOutError(ConflictError):
    pass


class DuplicateEmailError(ConflictError):
    pass


class CapacityBelowAssignmentsError(ConflictError):
    pass


class InvalidStateError(DomainError):
    """The record is not in a state that allows the requested transition."""


class NoCheckInError(InvalidStateError):
    pass


class ForbiddenError(DomainError):
    """Raised when an identity lacks the role required for an action."""


class UnavailableError(Exception):
    """Persistence layer failure (connection lost, timeout, ...).

    Not a DomainError; the HTTP layer answers it with 503.
    """
