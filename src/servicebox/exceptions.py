"""Exceptions that map onto protocol error codes."""

from enum import IntEnum
from typing import Any


# JSON-RPC 2.0 error codes
class ErrorCode(IntEnum):
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    SERVER_ERROR = -32000


class ServiceException(Exception):
    """Base exception carrying a protocol error code.

    Raising this (or a subclass) from a method callback sends the code,
    message and data back to the client unchanged. Anything else raised
    by a callback is reported as a generic internal error.
    """

    def __init__(
        self,
        message: str = "",
        code: int = ErrorCode.SERVER_ERROR,
        data: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = int(code)
        self.data = data

    @property
    def kind(self) -> ErrorCode | None:
        """The well-known error kind, or None for application codes."""
        try:
            return ErrorCode(self.code)
        except ValueError:
            return None

    def to_error(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "data": self.data}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code}, message={self.message!r})"


class ParseException(ServiceException):
    def __init__(self, data: Any = None):
        super().__init__("Parse error", ErrorCode.PARSE_ERROR, data)


class InvalidRequestException(ServiceException):
    def __init__(self, data: Any = None):
        super().__init__("Invalid request", ErrorCode.INVALID_REQUEST, data)


class MethodNotFoundException(ServiceException):
    def __init__(self, data: Any = None):
        super().__init__("Method not found", ErrorCode.METHOD_NOT_FOUND, data)


class InvalidParamsException(ServiceException):
    def __init__(self, data: Any = None):
        super().__init__("Invalid params", ErrorCode.INVALID_PARAMS, data)


class InternalErrorException(ServiceException):
    def __init__(self, data: Any = None):
        super().__init__("Internal error", ErrorCode.INTERNAL_ERROR, data)


class RemoteError(Exception):
    """Raised by the client when the host answers a call with an error."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(f"{message} ({code})")
        self.code = code
        self.message = message
        self.data = data
