"""Domain errors raised by the access, budget and task layers.

Every error carries a stable ``kind`` string, the HTTP status it maps to,
whether re-submitting with corrected input can succeed (``correctable``),
and a ``context`` dict with the computed amounts shown to the user.
"""

from typing import Any, Dict


class TaskTrackerError(Exception):
    kind = "task_tracker_error"
    status_code = 400
    correctable = False

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detail": self.message,
            "kind": self.kind,
            "correctable": self.correctable,
            **self.context,
        }


class AccessDenied(TaskTrackerError):
    kind = "access_denied"
    status_code = 403


class ReadOnlyRole(AccessDenied):
    """The caller's role may read everything but never write task entries."""

    kind = "read_only_role"


class InvalidFormat(TaskTrackerError):
    kind = "invalid_format"
    status_code = 422
    correctable = True


class BelowMinimum(TaskTrackerError):
    kind = "below_minimum"
    status_code = 422
    correctable = True


class ExceedsMaximum(TaskTrackerError):
    kind = "exceeds_maximum"
    status_code = 422
    correctable = True


class InsufficientDailyBaseline(TaskTrackerError):
    kind = "insufficient_daily_baseline"
    status_code = 422
    correctable = True


class DailyLimitExceeded(TaskTrackerError):
    kind = "daily_limit_exceeded"
    status_code = 422
    correctable = True


class CollaboratorUnavailable(TaskTrackerError):
    kind = "collaborator_unavailable"
    status_code = 503


class TaskNotFound(TaskTrackerError):
    kind = "task_not_found"
    status_code = 404


class PredefinedField(TaskTrackerError):
    kind = "predefined_field"
    status_code = 400


class WriteConflict(TaskTrackerError):
    kind = "write_conflict"
    status_code = 409
    correctable = True
