"""Error taxonomy for the order engine.

Every failure path surfaces one of these four kinds so callers can tell a
correctable input problem from a vanished row or a backend failure.
"""
from typing import Any, Dict, Optional


class OrderEngineError(Exception):
    """Base class for every order engine failure."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(OrderEngineError):
    """Caller-correctable input problem. Never reaches persistence."""

    def __init__(self, errors: Dict[str, str], message: str = "Validation failed", code: str = "invalid_fields"):
        super().__init__(message)
        self.errors = dict(errors)
        self.code = code


class NotFoundError(OrderEngineError):
    """The referenced order does not exist at the time of the call."""

    def __init__(self, order_id: str):
        super().__init__(f"Order with ID {order_id} does not exist")
        self.order_id = order_id


class PersistenceError(OrderEngineError):
    """The datastore rejected or failed the operation."""

    def __init__(self, message: str, details: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message)
        self.details = details
        self.code = code

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details, "code": self.code}


class UnauthorizedError(OrderEngineError):
    """Credential missing or not matching the configured access key."""

    def __init__(self, message: str = "Invalid or missing access key. Please authenticate first."):
        super().__init__(message)
