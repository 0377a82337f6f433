"""
Domain errors. Each one is an HTTPException whose detail carries an
`error` code and a `message`.
"""
from typing import Any, Optional
from uuid import UUID

from fastapi import HTTPException


class DomainError(HTTPException):
    status_code = 400
    error = "domain_error"

    def __init__(self, message: str, **extra: Any):
        self.message = message
        detail = {"error": self.error, "message": message}
        detail.update({k: v for k, v in extra.items() if v is not None})
        super().__init__(status_code=self.status_code, detail=detail)

    def __str__(self) -> str:
        return self.message


class NotFound(DomainError):
    status_code = 404
    error = "not_found"


class InvalidRange(DomainError):
    status_code = 400
    error = "invalid_range"


class ValidationError(DomainError):
    """A write that would break a stored invariant; `invariant` names it."""

    status_code = 422
    error = "validation_error"

    def __init__(self, invariant: str, message: str):
        self.invariant = invariant
        super().__init__(message, invariant=invariant)


class ConflictError(DomainError):
    status_code = 409
    error = "conflict"

    def __init__(self, invariant: str, message: str, conflicting_slot_ids: Optional[list[str]] = None):
        self.invariant = invariant
        super().__init__(message, invariant=invariant, conflicting_slot_ids=conflicting_slot_ids)


class AlreadyBookedError(DomainError):
    status_code = 409
    error = "already_booked"

    def __init__(self, slot_id: UUID, status: str):
        self.slot_id = slot_id
        super().__init__(f"Slot is not available (status={status})", slot_id=str(slot_id))


class InvalidTransition(DomainError):
    status_code = 409
    error = "invalid_transition"

    def __init__(self, slot_id: UUID, message: str):
        self.slot_id = slot_id
        super().__init__(message, slot_id=str(slot_id))
