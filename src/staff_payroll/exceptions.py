"""Domain exceptions."""

from __future__ import annotations

from uuid import UUID


class PayrollError(Exception):
    """Base exception for payroll domain errors."""


class InputIntegrityError(PayrollError):
    """Raised when a record-creation action is rejected at entry time.

    Attributes:
        reason: Machine-readable reason code
        message: User-facing message
    """

    DUPLICATE_SHIFT = "duplicate_shift"
    FULL_TIME_NAME = "full_time_name"
    OTHER_LOCATION = "other_location"
    MISSING_FIELD = "missing_field"
    INVALID_VALUE = "invalid_value"

    # Reasons that describe a conflict with existing data
    CONFLICTS = frozenset({DUPLICATE_SHIFT, FULL_TIME_NAME, OTHER_LOCATION})

    def __init__(self, reason: str, message: str):
        self.reason = reason
        self.message = message
        super().__init__(message)

    @property
    def is_conflict(self) -> bool:
        return self.reason in self.CONFLICTS


class StaffNotFoundError(PayrollError):
    """Raised when a staff member does not exist."""

    def __init__(self, staff_id: UUID):
        self.staff_id = staff_id
        super().__init__(f"Staff member {staff_id} not found")


class RecordNotFoundError(PayrollError):
    """Raised when a stored record does not exist."""

    def __init__(self, kind: str, record_id: UUID | str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")
