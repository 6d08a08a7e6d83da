# ops/results.py
"""
Command results shared by every app.

Commands never raise for expected failures. They return a CommandResult
carrying either data or an error message plus an ErrorKind, and the view
layer maps the kind to an HTTP status code. Anything that escapes a
command as an exception is, by definition, unexpected and becomes a 500.
"""

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


class CommandResult:
    def __init__(self, success: bool, data=None, error: str = None, kind: ErrorKind = None):
        self.success = success
        self.data = data
        self.error = error
        self.kind = kind

    @classmethod
    def ok(cls, data=None):
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, kind: ErrorKind = ErrorKind.INVALID_INPUT):
        return cls(success=False, error=error, kind=kind)

    @classmethod
    def invalid(cls, error: str):
        return cls.fail(error, ErrorKind.INVALID_INPUT)

    @classmethod
    def forbidden(cls, error: str = "You are not allowed to perform this action"):
        return cls.fail(error, ErrorKind.FORBIDDEN)

    @classmethod
    def not_found(cls, error: str):
        return cls.fail(error, ErrorKind.NOT_FOUND)

    @property
    def status_code(self) -> int:
        if self.success:
            return 200
        return (self.kind or ErrorKind.INTERNAL).status_code

    def __repr__(self):
        if self.success:
            return f"CommandResult(ok, data={self.data!r})"
        return f"CommandResult(fail, kind={self.kind.value if self.kind else None}, error={self.error!r})"
