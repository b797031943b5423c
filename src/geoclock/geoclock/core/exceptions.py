from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is the error kind reported to clients next to the message.
    """

    code = "DomainError"
    default_message = "Request could not be completed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "BadRequest"
    default_message = "Invalid request"


class InvalidActionError(DomainError):
    code = "InvalidAction"
    default_message = "Invalid action"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "AuthenticationFailed"
    default_message = "Invalid identifier or credential"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "Forbidden"
    default_message = "You are not allowed to perform this action"


class EmployeeNotFoundError(DomainError):
    code = "EmployeeNotFound"
    default_message = "Employee not found"


class SiteConfigMissingError(DomainError):
    code = "SiteConfigMissing"
    default_message = "Site configuration not found"


class WeakSignalError(DomainError):
    code = "WeakSignal"
    default_message = "Location signal too weak, please try again in the open"


class OutOfRangeError(DomainError):
    code = "OutOfRange"

    def __init__(self, distance_m: float, radius_m: float):
        self.distance_m = distance_m
        self.radius_m = radius_m
        super().__init__(f"You are out of range of your work site ({distance_m:.0f} m away, allowed {radius_m:.0f} m)")


class AlreadyOpenSessionError(DomainError):
    code = "AlreadyOpenSession"
    default_message = "You already clocked in; please clock out first"


class NoOpenSessionError(DomainError):
    code = "NoOpenSession"
    default_message = "No open clock-in found to close"


class RequestNotFoundError(DomainError):
    code = "RequestNotFound"
    default_message = "Overtime request not found"


class AlreadyDecidedError(DomainError):
    code = "AlreadyDecided"
    default_message = "This request has already been decided"


class StoreUnavailableError(Exception):
    """Transient backing-store failure (connection lost, lock wait timeout...)."""

    code = "StoreUnavailable"
