"""Status-coded errors raised while building list options.

Every failure while interpreting a list request is an expected outcome that
the caller must be able to classify. Errors therefore carry an explicit
status code next to a message that is surfaced verbatim.
"""

from __future__ import annotations

from enum import Enum


class StatusCode(str, Enum):
    """
    Classification of a list-options failure.

    Values:
        INVALID_ARGUMENT: The caller sent malformed or contradicting input.
        INTERNAL: A field selector value was accepted syntactically but its
            literal could not be decoded.
    """

    INVALID_ARGUMENT = "InvalidArgument"
    INTERNAL = "Internal"


class StatusError(Exception):
    """Base error carrying a status code and a caller-facing message."""

    code: StatusCode = StatusCode.INTERNAL

    def __init__(self, message: str, code: StatusCode | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value}, message={self.message!r})"


class ValidationError(StatusError):
    """Raised for malformed or self-contradictory caller input."""

    code = StatusCode.INVALID_ARGUMENT


class LiteralDecodeError(StatusError):
    """Raised when an accepted field selector value fails to decode."""

    code = StatusCode.INTERNAL


_ERRORS_BY_CODE: dict[StatusCode, type[StatusError]] = {
    StatusCode.INVALID_ARGUMENT: ValidationError,
    StatusCode.INTERNAL: LiteralDecodeError,
}


def to_status_error(exc: Exception, code: StatusCode) -> StatusError:
    """
    Classify an arbitrary exception under a status code.

    Errors that already carry a status are returned unchanged so that a
    classification made deeper in the stack is never overwritten.

    Args:
        exc: The raw failure.
        code: Status code to attach when `exc` has none.

    Returns:
        A StatusError whose message is `str(exc)`.
    """
    if isinstance(exc, StatusError):
        return exc
    error = _ERRORS_BY_CODE[code](str(exc))
    error.__cause__ = exc
    return error
