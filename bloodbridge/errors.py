"""
Error taxonomy for the donation lifecycle core.

The lifecycle, slot and feed functions are pure and only raise these
structural errors. The FastAPI app maps each one to an HTTP status in
``main.py``; backend failures are surfaced as ``BackendUnavailable``.
"""

from typing import Optional


class BloodBridgeError(Exception):
    """Base class for every error the service raises on purpose"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": type(self).__name__, "message": self.message}


class MissingRequiredField(BloodBridgeError):
    status_code = 422

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"{field} is required")
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["field"] = self.field
        return data


class AuthenticationRequired(BloodBridgeError):
    """No user id was supplied; this is a precondition failure, not a form error"""

    status_code = 401

    def __init__(self, message: str = "You must be signed in to do this"):
        super().__init__(message)


class SlotUnavailable(BloodBridgeError):
    status_code = 409

    def __init__(self, date, time: str, message: Optional[str] = None):
        super().__init__(
            message or f"The {time} slot on {date} is no longer available. Please pick another time."
        )
        self.date = date
        self.time = time

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["date"] = str(self.date)
        data["time"] = self.time
        return data


class NotEditable(BloodBridgeError):
    status_code = 409

    def __init__(self, status: str, message: Optional[str] = None):
        super().__init__(message or f"This request has already been reviewed ({status}) and can no longer be edited")
        self.status = status


class InvalidTransition(BloodBridgeError):
    status_code = 409

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class NotFound(BloodBridgeError):
    status_code = 404


class BackendUnavailable(BloodBridgeError):
    status_code = 503

    def __init__(self, message: str = "Service temporarily unavailable. Please try again."):
        super().__init__(message)
