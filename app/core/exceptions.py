# app/core/exceptions.py
"""
Domain errors raised by the stores and services.

Missing records are never errors at the store level: lookups return None
(or False for existence checks). The API layer turns these exceptions into
HTTP responses in app.main.
"""


class IdSystemError(Exception):
    pass


class ConstraintViolation(IdSystemError):
    """A store-level constraint on a User or IdRequest failed."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class UniquenessViolation(ConstraintViolation):
    """email or student_id is already used by another user."""

    def __init__(self, field: str, value: str):
        self.value = value
        super().__init__(field, f"'{value}' is already registered")


class FieldValidationError(ConstraintViolation):
    """Required field blank/missing, or malformed email."""


class InvalidStatusTransition(IdSystemError):
    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(
            f"cannot move request from {current.value} to {requested.value}"
        )


class UserHasRequests(IdSystemError):
    def __init__(self, user_id: int, count: int):
        self.user_id = user_id
        self.count = count
        super().__init__(f"user {user_id} still owns {count} id request(s)")
