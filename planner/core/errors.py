# planner/core/errors.py
"""Exception hierarchy for the planner core.

Every error carries a stable ``error_code`` and the HTTP ``status_code`` the
API layer answers with (see ``planner.main``).
"""

from __future__ import annotations


class PlannerError(Exception):
    """Base exception for all planner domain errors."""

    error_code: str = "PLANNER_ERROR"
    status_code: int = 400

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message())

    @classmethod
    def default_message(cls) -> str:
        return "Planner request could not be processed."


class InvalidRuleError(PlannerError, ValueError):
    """Recurrence rule string is malformed."""

    error_code = "INVALID_RECURRENCE_RULE"

    @classmethod
    def default_message(cls) -> str:
        return "Recurrence rule is invalid or incomplete."


class InvalidCalendarParameterError(PlannerError, ValueError):
    """Year, month or timezone of a calendar request is not usable."""

    error_code = "INVALID_CALENDAR_PARAMETER"

    @classmethod
    def default_message(cls) -> str:
        return "The calendar parameter is invalid."


class LabelNotFoundError(PlannerError, LookupError):
    """Label does not exist."""

    error_code = "LABEL_NOT_FOUND"
    status_code = 404

    def __init__(self, label_id: int) -> None:
        super().__init__(f"Label with ID {label_id} not found")
        self.label_id = label_id


class LabelOwnershipError(PlannerError):
    """Label belongs to another user.

    Attributes:
        label_id: The label that was requested.
        user_id: The user who requested it.
    """

    error_code = "UNAUTHORIZED_LABEL_ACCESS"
    status_code = 403

    def __init__(self, label_id: int, user_id: str) -> None:
        super().__init__(f"User is not authorized to access label with ID {label_id}")
        self.label_id = label_id
        self.user_id = user_id


__all__: list[str] = [
    "PlannerError",
    "InvalidRuleError",
    "InvalidCalendarParameterError",
    "LabelNotFoundError",
    "LabelOwnershipError",
]
