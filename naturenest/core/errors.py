"""Error taxonomy shared by the domain, services and routers.

Routers do not translate these by hand: ``naturenest.main`` registers one
exception handler that maps ``NatureNestError.status_code`` to the response.
"""

from __future__ import annotations

from datetime import date
from typing import Any


class NatureNestError(Exception):
    status_code = 400

    def __init__(self, message: str, meta: dict[str, Any] | None = None):
        self.message = message
        self.meta = meta or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"detail": self.message}
        body.update(self.meta)
        return body


class ValidationError(NatureNestError):
    """Malformed or illogical input (dates, guest counts, unknown ids)."""

    status_code = 400


class ConflictError(NatureNestError):
    """Uniqueness violation, e.g. an email that is already registered."""

    status_code = 400


class NotFoundError(NatureNestError):
    status_code = 404


class AuthorizationError(NatureNestError):
    """Caller is authenticated but does not own the resource."""

    status_code = 403


class CapacityExceededError(NatureNestError):
    """Accepting a reservation would overfill at least one day."""

    status_code = 400

    def __init__(self, overbooked: list[tuple[date, int]], capacity: int):
        self.overbooked = overbooked
        self.capacity = capacity
        days = ", ".join(f"{day.isoformat()} (+{over})" for day, over in overbooked)
        super().__init__(
            f"Property capacity of {capacity} guests exceeded on: {days}",
            {
                "capacity": capacity,
                "overbooked_days": [
                    {"date": day.isoformat(), "overage": over}
                    for day, over in overbooked
                ],
            },
        )
