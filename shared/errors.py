"""
Error types raised by callable functions.

Callable functions report failures to the caller with a machine-readable code
and a human-readable message. Two codes matter in practice:

- ``invalid-argument``: the input failed validation; nothing was written
- ``internal``: something went wrong after validation; details stay in the logs

The HTTP layer maps each code to a status (see ``HTTP_STATUS``).
Trigger and scheduled functions never raise these; they report failure in
their return value instead.
"""

from typing import Any


class FunctionError(Exception):
    """
    Base error for callable functions.

    Attributes:
        code: Lower-case, dash separated error code (e.g. "invalid-argument")
        message: Message that is safe to show to the caller
    """

    code: str = "unknown"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status(self) -> str:
        """Upper-case status name used on the wire (e.g. "INVALID_ARGUMENT")."""
        return self.code.replace("-", "_").upper()

    def to_response(self) -> dict[str, Any]:
        return {
            "error": {
                "status": self.status,
                "code": self.code,
                "message": self.message,
            }
        }


class InvalidArgumentError(FunctionError):
    """Input validation failed before any side effect."""

    code = "invalid-argument"


class InternalError(FunctionError):
    """Unexpected failure while processing a valid request."""

    code = "internal"


class NotFoundError(FunctionError):
    """The requested function or document does not exist."""

    code = "not-found"


HTTP_STATUS: dict[str, int] = {
    InvalidArgumentError.code: 400,
    NotFoundError.code: 404,
    InternalError.code: 500,
}
